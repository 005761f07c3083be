"""Fill in missing favicon URLs for stored bookmarks.

Usage:
    PYTHONPATH=src python scripts/update_favicons.py
    PYTHONPATH=src python scripts/update_favicons.py --database-url sqlite+aiosqlite:///./other.db
"""

import argparse
import asyncio
import logging

from core.config import get_settings
from db.session import Database
from services.bookmark_service import backfill_favicons

logger = logging.getLogger(__name__)


async def run(database_url: str) -> int:
    """Backfill favicons in the given database. Returns the number of bookmarks updated."""
    database = Database(database_url)
    try:
        await database.create_schema()
        async with database.session_factory() as session:
            try:
                updated = await backfill_favicons(session)
                await session.commit()
            except Exception:
                await session.rollback()
                raise
    finally:
        await database.dispose()

    logger.info("Successfully updated %d bookmarks with favicon URLs", updated)
    return updated


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Fill in missing bookmark favicon URLs.")
    parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy async URL (default: DATABASE_URL setting)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(run(args.database_url or get_settings().database_url))


if __name__ == "__main__":
    main()
