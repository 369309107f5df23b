"""Database connection and session factory.

The store is an explicitly constructed Database object: main.py's lifespan
connects it, parks it on app.state.database and closes it on shutdown.
Nothing opens a connection at import time.

All naive datetimes coming back from the driver are tagged as UTC via
UTCDateTime to prevent naive-vs-aware comparison errors (SQLite drops tzinfo).
"""

import logging
from datetime import timezone

from fastapi import Request
from sqlalchemy import DateTime, TypeDecorator, create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .exceptions import DatabaseNotConnectedError

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator):
    """DateTime type that ensures UTC timezone on load."""
    impl = DateTime
    cache_ok = True

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise every checkout sees an empty DB
            kwargs["poolclass"] = StaticPool
        return kwargs
    return {
        "pool_size": 10,
        "max_overflow": 20,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
        "connect_args": {"connect_timeout": 10},
    }


class Database:
    """Engine + session factory with an explicit connect/close lifecycle."""

    def __init__(self, url: str | None = None):
        self.url = url
        self._engine: Engine | None = None
        self._sessionmaker: sessionmaker | None = None

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise DatabaseNotConnectedError()
        return self._engine

    def connect(self, url: str | None = None) -> Engine:
        """Create the engine. Calling connect() twice is a no-op."""
        if self._engine is not None:
            return self._engine
        self.url = url or self.url
        if not self.url:
            raise DatabaseNotConnectedError("No database URL configured")

        engine = create_engine(self.url, **_engine_kwargs(self.url))
        if engine.dialect.name == "postgresql":
            event.listen(engine, "connect", _set_timezone)
        elif engine.dialect.name == "sqlite":
            event.listen(engine, "connect", _enable_sqlite_fk)

        self._engine = engine
        self._sessionmaker = sessionmaker(bind=engine, autocommit=False, autoflush=False)
        log.info("Database connected (%s)", engine.dialect.name)
        return engine

    def close(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._sessionmaker = None
        log.info("Database connection closed")

    def session(self) -> Session:
        if self._sessionmaker is None:
            raise DatabaseNotConnectedError()
        return self._sessionmaker()

    def create_tables(self) -> None:
        from .models import Base

        Base.metadata.create_all(bind=self.engine, checkfirst=True)

    def ping(self) -> bool:
        """True when a trivial query round-trips."""
        if self._engine is None:
            return False
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            log.warning("Database ping failed: %s", e)
            return False


def _set_timezone(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("SET timezone = 'UTC'")
    cursor.close()


def _enable_sqlite_fk(dbapi_conn, connection_record):
    """SQLite ignores FKs by default — turn them on so offer cascades work."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_database(request: Request) -> Database:
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise DatabaseNotConnectedError()
    return database


def get_db(request: Request):
    db = get_database(request).session()
    try:
        yield db
    finally:
        db.close()
