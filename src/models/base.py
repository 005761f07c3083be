"""SQLAlchemy declarative base and column types."""
from datetime import UTC, datetime

from sqlalchemy import DateTime
from sqlalchemy.engine import Dialect
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class UTCDateTime(TypeDecorator[datetime]):
    """
    Timezone-aware UTC datetime column.

    SQLite has no timezone-aware type, so values are stored as naive UTC and
    given back their UTC tzinfo on load. Naive values written to the column are
    taken to be UTC already; aware values are converted.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(UTC).replace(tzinfo=None)
        return value

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value


def utcnow() -> datetime:
    """
    Current time in UTC.

    Timestamps are generated client-side rather than with CURRENT_TIMESTAMP so they
    keep sub-second precision in SQLite, which stores DATETIME as text.
    """
    return datetime.now(UTC)
