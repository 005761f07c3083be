"""Pydantic schemas for folder endpoints."""
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from schemas.bookmark import BookmarkResponse


class FolderCreate(BaseModel):
    """Schema for creating a new folder."""

    name: str = Field(min_length=1)


class FolderUpdate(BaseModel):
    """Schema for partially updating a folder."""

    name: str | None = Field(default=None, min_length=1)

    @field_validator("name", mode="before")
    @classmethod
    def reject_explicit_null(cls, v: Any) -> Any:
        """A folder always has a name."""
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class FolderResponse(BaseModel):
    """Schema for folder responses, including the bookmarks filed in it."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    created_at: datetime
    bookmarks: list[BookmarkResponse] = []
