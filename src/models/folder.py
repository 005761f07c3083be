"""Folder model for grouping bookmarks."""
from datetime import datetime

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, UTCDateTime, utcnow
from models.bookmark import Bookmark


class Folder(Base):
    """Folder model - a named group of bookmarks."""

    __tablename__ = "folders"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow,
    )

    # passive_deletes="all" stops the ORM from nulling out folder_id on the
    # children when a folder is deleted; the delete policy decides that instead.
    bookmarks: Mapped[list[Bookmark]] = relationship(
        Bookmark,
        order_by=Bookmark.id,
        passive_deletes="all",
    )
