"""Service layer for bookmark CRUD operations."""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.bookmark import Bookmark
from schemas.bookmark import BookmarkCreate, BookmarkUpdate
from services.favicon import get_favicon_url

logger = logging.getLogger(__name__)


async def create_bookmark(db: AsyncSession, data: BookmarkCreate) -> Bookmark:
    """
    Create a new bookmark.

    If no favicon URL was supplied, one is derived from the bookmark URL's host.

    Note: Does not commit. Caller (session generator) handles commit at request end.
    """
    favicon_url = data.favicon_url or get_favicon_url(data.url)

    bookmark = Bookmark(
        url=data.url,
        name=data.name,
        favicon_url=favicon_url,
        note=data.note,
        folder_id=data.folder_id,
        tags=data.tags,
        favorite=data.favorite,
    )
    db.add(bookmark)
    await db.flush()
    await db.refresh(bookmark)
    logger.info("Created bookmark %s for %s", bookmark.id, bookmark.url)
    return bookmark


async def get_bookmark(db: AsyncSession, bookmark_id: int) -> Bookmark | None:
    """Get a bookmark by ID. Returns None if not found."""
    result = await db.execute(select(Bookmark).where(Bookmark.id == bookmark_id))
    return result.scalar_one_or_none()


async def update_bookmark(
    db: AsyncSession,
    bookmark_id: int,
    data: BookmarkUpdate,
) -> Bookmark | None:
    """
    Apply a partial update. Returns None if not found.

    Only fields set in the request are written; everything else is left as stored.

    Note: Does not commit. Caller (session generator) handles commit at request end.
    """
    bookmark = await get_bookmark(db, bookmark_id)
    if bookmark is None:
        return None

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(bookmark, field, value)

    await db.flush()
    await db.refresh(bookmark)
    return bookmark


async def delete_bookmark(db: AsyncSession, bookmark_id: int) -> bool:
    """
    Delete a bookmark. Returns True if deleted, False if not found.

    Note: Does not commit. Caller (session generator) handles commit at request end.
    """
    bookmark = await get_bookmark(db, bookmark_id)
    if bookmark is None:
        return False

    await db.delete(bookmark)
    await db.flush()
    logger.info("Deleted bookmark %s", bookmark_id)
    return True


async def backfill_favicons(db: AsyncSession) -> int:
    """
    Fill in favicon_url for every bookmark that has none.

    Bookmarks whose URL can't be parsed are left untouched.

    Returns:
        Number of bookmarks updated.
    """
    result = await db.execute(select(Bookmark).where(Bookmark.favicon_url == ""))
    updated = 0
    for bookmark in result.scalars().all():
        favicon_url = get_favicon_url(bookmark.url)
        if not favicon_url:
            continue
        bookmark.favicon_url = favicon_url
        updated += 1
        logger.info("Updated bookmark %s: %s", bookmark.id, favicon_url)

    await db.flush()
    return updated
