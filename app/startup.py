"""
startup.py — Database Schema Sync (Idempotent)

Tables, constraints, and indexes are defined in the ORM models and created
via Base.metadata.create_all(checkfirst=True). Safe to call on every boot.

Called by: main.py lifespan
Depends on: database.py (Database)
"""

import logging
import os

from .database import Database

log = logging.getLogger(__name__)


def run_startup_migrations(database: Database) -> None:
    """Create any missing tables. Skipped under TESTING (fixtures own the schema)."""
    if os.environ.get("TESTING"):
        log.info("TESTING mode — skipping startup migrations")
        return

    database.create_tables()
    log.info("ORM schema sync complete (create_all checkfirst=True)")
