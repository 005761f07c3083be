"""Shared exceptions for service layer operations."""


class FolderNotEmptyError(Exception):
    """
    Raised when deleting a folder that bookmarks still reference.

    Only raised under the "restrict" folder delete policy.
    """

    def __init__(self, folder_id: int, bookmark_count: int) -> None:
        self.folder_id = folder_id
        self.bookmark_count = bookmark_count
        super().__init__(
            f"Folder {folder_id} still contains {bookmark_count} bookmark(s)",
        )
