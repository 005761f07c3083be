"""
Query building for the bookmark list endpoint.

Turns the optional list parameters (substring filters, folder scope, sorting)
into a single SQLAlchemy ``Select``. Sort values coming from the request are
only ever used as keys into ``SORT_COLUMNS``; nothing user-supplied is
interpolated into SQL.
"""
from dataclasses import dataclass
from typing import Literal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute
from sqlalchemy.sql import Select

from models.bookmark import Bookmark
from services.utils import escape_like

DefaultScope = Literal["all", "unsorted"]
SortOrder = Literal["asc", "desc"]

SORT_COLUMNS: dict[str, InstrumentedAttribute] = {
    "bookmarked_at": Bookmark.bookmarked_at,
    "name": Bookmark.name,
}

DEFAULT_SORT_BY = "bookmarked_at"
DEFAULT_SORT_ORDER: SortOrder = "desc"


@dataclass
class BookmarkListParams:
    """Raw list parameters as received from the client. Every field is optional."""

    url_contains: str | None = None
    name_contains: str | None = None
    unsorted: bool = False
    folder_id: int | None = None
    sort_by: str | None = None
    sort_order: str | None = None


@dataclass
class ResolvedSort:
    """Sort parameters after allowlist validation."""

    sort_by: str
    sort_order: SortOrder


def resolve_sort(sort_by: str | None, sort_order: str | None) -> ResolvedSort:
    """
    Validate sort parameters against the allowlist.

    Unknown or missing values fall back to ``bookmarked_at`` / ``desc``; this never
    raises.
    """
    resolved_by = sort_by if sort_by in SORT_COLUMNS else DEFAULT_SORT_BY
    resolved_order: SortOrder = "asc" if sort_order == "asc" else DEFAULT_SORT_ORDER
    return ResolvedSort(sort_by=resolved_by, sort_order=resolved_order)


def _apply_scope(
    query: Select[tuple[Bookmark]],
    params: BookmarkListParams,
    default_scope: DefaultScope,
) -> Select[tuple[Bookmark]]:
    """
    Apply the folder scope filter.

    Priority: ``unsorted`` beats ``folder_id``; with neither, ``default_scope``
    decides between all bookmarks and unsorted ones.
    """
    if params.unsorted:
        return query.where(Bookmark.folder_id.is_(None))
    if params.folder_id is not None:
        return query.where(Bookmark.folder_id == params.folder_id)
    if default_scope == "unsorted":
        return query.where(Bookmark.folder_id.is_(None))
    return query


def _apply_sorting(query: Select[tuple[Bookmark]], sort: ResolvedSort) -> Select[tuple[Bookmark]]:
    """Apply sorting with id as tiebreaker so equal keys come back in a stable order."""
    sort_column = SORT_COLUMNS[sort.sort_by]
    if sort.sort_order == "desc":
        return query.order_by(sort_column.desc(), Bookmark.id.desc())
    return query.order_by(sort_column.asc(), Bookmark.id.asc())


def build_bookmark_list_query(
    params: BookmarkListParams,
    default_scope: DefaultScope = "all",
) -> Select[tuple[Bookmark]]:
    """Build the list query: substring filters AND scope filter, then sorting."""
    query = select(Bookmark)

    if params.url_contains:
        pattern = f"%{escape_like(params.url_contains)}%"
        query = query.where(Bookmark.url.like(pattern, escape="\\"))

    if params.name_contains:
        pattern = f"%{escape_like(params.name_contains)}%"
        query = query.where(Bookmark.name.like(pattern, escape="\\"))

    query = _apply_scope(query, params, default_scope)
    return _apply_sorting(query, resolve_sort(params.sort_by, params.sort_order))


async def list_bookmarks(
    db: AsyncSession,
    params: BookmarkListParams,
    default_scope: DefaultScope = "all",
) -> list[Bookmark]:
    """Return bookmarks matching ``params`` in the requested (validated) order."""
    result = await db.execute(build_bookmark_list_query(params, default_scope))
    return list(result.scalars().all())
