"""SQLAlchemy models."""
from models.base import Base
from models.bookmark import Bookmark
from models.folder import Folder

__all__ = ["Base", "Bookmark", "Folder"]
