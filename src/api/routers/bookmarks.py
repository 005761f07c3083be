"""Bookmark CRUD endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_app_settings, get_async_session
from core.config import Settings
from schemas.bookmark import BookmarkCreate, BookmarkResponse, BookmarkUpdate
from services import bookmark_query, bookmark_service
from services.bookmark_query import BookmarkListParams

router = APIRouter(prefix="/bookmarks", tags=["bookmarks"])


def _parse_folder_id(value: str | None) -> int | None:
    """An empty folder_id means no folder filter; anything else must be an integer."""
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise HTTPException(status_code=400, detail="folder_id must be an integer") from None


@router.post("", response_model=BookmarkResponse, status_code=201)
async def create_bookmark(
    data: BookmarkCreate,
    db: AsyncSession = Depends(get_async_session),
) -> BookmarkResponse:
    """Create a new bookmark. The favicon URL is derived from the URL when not given."""
    bookmark = await bookmark_service.create_bookmark(db, data)
    return BookmarkResponse.model_validate(bookmark)


@router.get("", response_model=list[BookmarkResponse])
async def list_bookmarks(
    url: str | None = Query(default=None, description="Substring the URL must contain"),
    name: str | None = Query(default=None, description="Substring the name must contain"),
    unsorted: str | None = Query(default=None, description="Only unsorted bookmarks if 'true'"),
    folder_id: str | None = Query(default=None, description="Only bookmarks in this folder"),
    sort_by: str | None = Query(
        default=None, alias="sortBy", description="bookmarked_at (default) or name",
    ),
    sort_order: str | None = Query(
        default=None, alias="sortOrder", description="asc or desc (default)",
    ),
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_app_settings),
) -> list[BookmarkResponse]:
    """
    List bookmarks with filtering and sorting.

    - **url** / **name**: substring filters, combined with AND
    - **unsorted**: "true" for only bookmarks without a folder; takes precedence over
      folder_id. Any other value is ignored.
    - **folder_id**: only bookmarks in the given folder; empty means no folder filter
    - **sortBy**: bookmarked_at or name; anything else falls back to bookmarked_at
    - **sortOrder**: asc or desc; anything else falls back to desc

    With neither unsorted nor folder_id, the configured default scope applies.
    """
    params = BookmarkListParams(
        url_contains=url,
        name_contains=name,
        unsorted=unsorted == "true",
        folder_id=_parse_folder_id(folder_id),
        sort_by=sort_by,
        sort_order=sort_order,
    )
    bookmarks = await bookmark_query.list_bookmarks(
        db, params, default_scope=settings.bookmarks_default_scope,
    )
    return [BookmarkResponse.model_validate(b) for b in bookmarks]


@router.get("/{bookmark_id}", response_model=BookmarkResponse)
async def get_bookmark(
    bookmark_id: int,
    db: AsyncSession = Depends(get_async_session),
) -> BookmarkResponse:
    """Get a single bookmark by ID."""
    bookmark = await bookmark_service.get_bookmark(db, bookmark_id)
    if bookmark is None:
        raise HTTPException(status_code=404, detail="Bookmark not found")
    return BookmarkResponse.model_validate(bookmark)


@router.put("/{bookmark_id}", response_model=BookmarkResponse)
async def update_bookmark(
    bookmark_id: int,
    data: BookmarkUpdate,
    db: AsyncSession = Depends(get_async_session),
) -> BookmarkResponse:
    """Update a bookmark. Only fields present in the body are changed."""
    bookmark = await bookmark_service.update_bookmark(db, bookmark_id, data)
    if bookmark is None:
        raise HTTPException(status_code=404, detail="Bookmark not found")
    return BookmarkResponse.model_validate(bookmark)


@router.delete("/{bookmark_id}", status_code=204)
async def delete_bookmark(
    bookmark_id: int,
    db: AsyncSession = Depends(get_async_session),
) -> Response:
    """Delete a bookmark."""
    deleted = await bookmark_service.delete_bookmark(db, bookmark_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Bookmark not found")
    return Response(status_code=204)
