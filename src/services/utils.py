"""Shared utility functions for service layer."""


def escape_like(value: str) -> str:
    r"""
    Escape special LIKE characters for safe use in LIKE patterns.

    LIKE treats these characters specially:
    - % matches any sequence of characters
    - _ matches any single character
    - \\ is used as the escape character (passed as ``escape="\\"``)

    This function escapes them so they match literally.
    """
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
