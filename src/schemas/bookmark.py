"""Pydantic schemas for bookmark endpoints."""
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Fields stored NOT NULL; a patch may omit them but never set them to null.
NON_NULLABLE_UPDATE_FIELDS = ("url", "name", "favicon_url", "note", "tags", "favorite")


class BookmarkCreate(BaseModel):
    """Schema for creating a new bookmark."""

    url: str = Field(min_length=1)
    name: str = Field(min_length=1)
    favicon_url: str = ""
    note: str = ""
    folder_id: int | None = None
    tags: str = ""
    favorite: bool = False


class BookmarkUpdate(BaseModel):
    """
    Schema for partially updating a bookmark.

    Only fields present in the request body are applied (see
    ``model_dump(exclude_unset=True)`` in the service). ``folder_id: null`` moves
    the bookmark to unsorted. ``bookmarked_at`` is not updatable.
    """

    url: str | None = Field(default=None, min_length=1)
    name: str | None = Field(default=None, min_length=1)
    favicon_url: str | None = None
    note: str | None = None
    folder_id: int | None = None
    tags: str | None = None
    favorite: bool | None = None

    @field_validator(*NON_NULLABLE_UPDATE_FIELDS, mode="before")
    @classmethod
    def reject_explicit_null(cls, v: Any) -> Any:
        """Reject an explicit null for fields that can't be cleared."""
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class BookmarkResponse(BaseModel):
    """Schema for bookmark responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    url: str
    name: str
    favicon_url: str
    note: str
    folder_id: int | None
    tags: str
    favorite: bool
    bookmarked_at: datetime
