"""Generate a SQL import script from a Raindrop.io CSV export.

Usage:
    PYTHONPATH=src python scripts/migrate_raindrop.py --input export.csv --output import.sql
    sqlite3 server.db < import.sql
"""

import argparse
import logging
import sys
from pathlib import Path

from services.raindrop_migration import convert_file

logger = logging.getLogger(__name__)


def run(input_path: Path, output_path: Path) -> int:
    """Convert ``input_path`` and write the statements to ``output_path``. Returns bookmark count."""
    with input_path.open(newline="", encoding="utf-8") as source:
        result = convert_file(source)

    with output_path.open("w", encoding="utf-8") as output:
        for statement in result.statements:
            output.write(statement + "\n")

    logger.info(
        "Generated %s with %d bookmarks in %d folders (%d rows skipped)",
        output_path,
        result.bookmark_count,
        result.folder_count,
        result.skipped_rows,
    )
    return result.bookmark_count


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Convert a Raindrop.io CSV export into SQL insert statements.",
    )
    parser.add_argument("--input", required=True, type=Path, help="Path to Raindrop.io CSV file")
    parser.add_argument("--output", required=True, type=Path, help="Path to output SQL file")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        run(args.input, args.output)
    except (OSError, ValueError) as e:
        logger.error("Migration failed: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
