"""
Convert a Raindrop.io CSV export into SQL insert statements.

Raindrop exports have the columns::

    id, title, note, excerpt, url, folder, tags, created, cover, highlights, favorite

The generated script creates any missing folders by name and inserts one
bookmark per usable row, all inside a single transaction.
"""
import csv
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TextIO

from services.favicon import get_favicon_url

logger = logging.getLogger(__name__)

# Column positions in the Raindrop export
COL_TITLE = 1
COL_NOTE = 2
COL_URL = 4
COL_FOLDER = 5
COL_TAGS = 6
COL_CREATED = 7
COL_FAVORITE = 10

MIN_COLUMNS = 5

# Raindrop's name for "no collection"
UNSORTED_FOLDER_NAMES = frozenset({"", "Unsorted"})

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class RaindropRecord:
    """A single usable row from the export."""

    url: str
    name: str
    note: str
    folder: str | None
    tags: str
    favorite: bool
    bookmarked_at: str


@dataclass
class MigrationResult:
    """Generated statements plus counts for reporting."""

    statements: list[str]
    bookmark_count: int
    folder_count: int
    skipped_rows: int


def sql_quote(value: str) -> str:
    """Render ``value`` as a single-quoted SQL string literal."""
    return "'" + value.replace("'", "''") + "'"


def parse_created(value: str, now: datetime | None = None) -> str:
    """
    Parse an ISO-8601 ``created`` value into a UTC ``YYYY-MM-DD HH:MM:SS`` string.

    Falls back to ``now`` (current UTC time by default) when the value is empty or
    not a valid timestamp.
    """
    fallback = now or datetime.now(UTC)
    if not value:
        return fallback.strftime(TIMESTAMP_FORMAT)
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return fallback.strftime(TIMESTAMP_FORMAT)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(UTC)
    return parsed.strftime(TIMESTAMP_FORMAT)


def _column(row: list[str], index: int) -> str:
    return row[index].strip() if index < len(row) else ""


def parse_row(row: list[str], now: datetime | None = None) -> RaindropRecord | None:
    """Turn a CSV row into a record. Returns None for rows that can't be imported."""
    if len(row) < MIN_COLUMNS:
        return None
    url = _column(row, COL_URL)
    if not url:
        return None

    folder = _column(row, COL_FOLDER)
    return RaindropRecord(
        url=url,
        # Untitled bookmarks fall back to the URL since name is required
        name=_column(row, COL_TITLE) or url,
        note=_column(row, COL_NOTE),
        folder=None if folder in UNSORTED_FOLDER_NAMES else folder,
        tags=_column(row, COL_TAGS),
        favorite=_column(row, COL_FAVORITE).lower() == "true",
        bookmarked_at=parse_created(_column(row, COL_CREATED), now),
    )


def folder_insert(name: str, created_at: str) -> str:
    """Insert a folder unless one with the same name already exists."""
    quoted = sql_quote(name)
    return (
        f"INSERT INTO folders (name, created_at) SELECT {quoted}, {sql_quote(created_at)} "
        f"WHERE NOT EXISTS (SELECT 1 FROM folders WHERE name = {quoted});"
    )


def bookmark_insert(record: RaindropRecord) -> str:
    """Insert a bookmark, resolving its folder by name."""
    if record.folder is None:
        folder_ref = "NULL"
    else:
        folder_ref = f"(SELECT id FROM folders WHERE name = {sql_quote(record.folder)} LIMIT 1)"
    values = ", ".join([
        sql_quote(record.url),
        sql_quote(record.name),
        sql_quote(get_favicon_url(record.url)),
        sql_quote(record.note),
        folder_ref,
        sql_quote(record.tags),
        "1" if record.favorite else "0",
        sql_quote(record.bookmarked_at),
    ])
    return (
        "INSERT INTO bookmarks "
        "(url, name, favicon_url, note, folder_id, tags, favorite, bookmarked_at) "
        f"VALUES ({values});"
    )


def convert_rows(rows: Iterable[list[str]], now: datetime | None = None) -> MigrationResult:
    """
    Build the migration script from CSV rows.

    The first row is treated as the header and skipped.

    Raises:
        ValueError: If there are no rows at all.
    """
    iterator = iter(rows)
    header = next(iterator, None)
    if header is None:
        raise ValueError("CSV file is empty")

    created_at = (now or datetime.now(UTC)).strftime(TIMESTAMP_FORMAT)
    records: list[RaindropRecord] = []
    skipped = 0
    # Row numbers are 1-based and include the header, matching what editors show
    for line_number, row in enumerate(iterator, start=2):
        record = parse_row(row, now)
        if record is None:
            logger.warning("Skipping row %d: missing columns or empty URL", line_number)
            skipped += 1
            continue
        records.append(record)

    folders = list(dict.fromkeys(r.folder for r in records if r.folder is not None))

    statements = ["BEGIN TRANSACTION;"]
    statements.extend(folder_insert(name, created_at) for name in folders)
    statements.extend(bookmark_insert(record) for record in records)
    statements.append("COMMIT;")

    return MigrationResult(
        statements=statements,
        bookmark_count=len(records),
        folder_count=len(folders),
        skipped_rows=skipped,
    )


def convert_file(source: TextIO, now: datetime | None = None) -> MigrationResult:
    """Read a Raindrop CSV export from an open text file."""
    return convert_rows(csv.reader(source), now)
