"""Service layer for folder CRUD operations."""
import logging
from typing import Literal

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from models.bookmark import Bookmark
from models.folder import Folder
from schemas.folder import FolderCreate, FolderUpdate
from services.exceptions import FolderNotEmptyError

logger = logging.getLogger(__name__)

FolderDeletePolicy = Literal["keep", "restrict", "nullify"]


async def _refresh_with_bookmarks(db: AsyncSession, folder: Folder) -> None:
    """Refresh folder and eagerly load its bookmarks relationship."""
    await db.refresh(folder)
    await db.refresh(folder, attribute_names=["bookmarks"])


async def create_folder(db: AsyncSession, data: FolderCreate) -> Folder:
    """
    Create a new (empty) folder.

    Note: Does not commit. Caller (session generator) handles commit at request end.
    """
    folder = Folder(name=data.name)
    db.add(folder)
    await db.flush()
    await _refresh_with_bookmarks(db, folder)
    logger.info("Created folder %s (%s)", folder.id, folder.name)
    return folder


async def get_folders(db: AsyncSession) -> list[Folder]:
    """Get all folders with their bookmarks loaded."""
    result = await db.execute(
        select(Folder)
        .options(selectinload(Folder.bookmarks))
        .order_by(Folder.id)
        .execution_options(populate_existing=True),
    )
    return list(result.scalars().all())


async def get_folder(db: AsyncSession, folder_id: int) -> Folder | None:
    """Get a folder by ID with its bookmarks loaded. Returns None if not found."""
    result = await db.execute(
        select(Folder)
        .options(selectinload(Folder.bookmarks))
        .where(Folder.id == folder_id)
        .execution_options(populate_existing=True),
    )
    return result.scalar_one_or_none()


async def update_folder(
    db: AsyncSession,
    folder_id: int,
    data: FolderUpdate,
) -> Folder | None:
    """
    Apply a partial update. Returns None if not found.

    Note: Does not commit. Caller (session generator) handles commit at request end.
    """
    folder = await get_folder(db, folder_id)
    if folder is None:
        return None

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(folder, field, value)

    await db.flush()
    await _refresh_with_bookmarks(db, folder)
    return folder


async def delete_folder(
    db: AsyncSession,
    folder_id: int,
    policy: FolderDeletePolicy = "keep",
) -> bool:
    """
    Delete a folder. Returns True if deleted, False if not found.

    Bookmarks are never deleted along with their folder. What happens to them
    depends on ``policy``:

    - "keep": they keep pointing at the removed folder id.
    - "restrict": the delete is refused while any bookmark references the folder.
    - "nullify": they are moved to unsorted (folder_id set to NULL) first.

    Raises:
        FolderNotEmptyError: Under "restrict" when bookmarks reference the folder.

    Note: Does not commit. Caller (session generator) handles commit at request end.
    """
    result = await db.execute(select(Folder).where(Folder.id == folder_id))
    folder = result.scalar_one_or_none()
    if folder is None:
        return False

    if policy == "restrict":
        count_result = await db.execute(
            select(func.count()).select_from(Bookmark).where(Bookmark.folder_id == folder_id),
        )
        bookmark_count = count_result.scalar() or 0
        if bookmark_count:
            raise FolderNotEmptyError(folder_id, bookmark_count)
    elif policy == "nullify":
        await db.execute(
            update(Bookmark)
            .where(Bookmark.folder_id == folder_id)
            .values(folder_id=None)
            .execution_options(synchronize_session="fetch"),
        )

    await db.delete(folder)
    await db.flush()
    logger.info("Deleted folder %s (policy=%s)", folder_id, policy)
    return True
