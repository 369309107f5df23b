#!/usr/bin/env python3
"""Seed the master catalog.

Creates every master catalog entry (TMT rebars, structural sections,
shutter hardware, plates, sheets) that is not already present. Idempotent:
re-running only reports skips.

Usage:
    python scripts/seed_master_catalog.py [--database-url URL] [--dry-run]
"""

import argparse
import sys

from loguru import logger

from app.config import settings
from app.database import Database
from app.logging_config import setup_logging
from app.services.catalog_seed import master_catalog_specs, seed_master_catalog


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Seed the steel master catalog")
    parser.add_argument("--database-url", default=settings.database_url)
    parser.add_argument(
        "--dry-run", action="store_true", help="Only count the entries that would be generated"
    )
    args = parser.parse_args(argv)

    setup_logging()
    if args.dry_run:
        logger.info("Dry run: {} master entries in the enumeration", sum(1 for _ in master_catalog_specs()))
        return 0

    database = Database(args.database_url)
    database.connect()
    try:
        database.create_tables()
        with database.session() as db:
            stats = seed_master_catalog(db)
    finally:
        database.close()

    logger.info(
        "Added {total_added}, skipped {total_skipped}, processed {total_processed}", **stats
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
