"""Health check endpoint."""
import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session
from models.bookmark import Bookmark
from models.folder import Folder

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response. Counts are None when the database is unreachable."""

    status: str
    database: str
    bookmarks: int | None = None
    folders: int | None = None


@router.get("/health", response_model=HealthResponse)
async def health_check(
    db: AsyncSession = Depends(get_async_session),
) -> HealthResponse:
    """Check that the store answers queries and report how much it holds."""
    try:
        bookmark_count = await db.scalar(select(func.count()).select_from(Bookmark))
        folder_count = await db.scalar(select(func.count()).select_from(Folder))
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        return HealthResponse(status="degraded", database="unhealthy")

    return HealthResponse(
        status="healthy",
        database="healthy",
        bookmarks=bookmark_count,
        folders=folder_count,
    )
