"""
conftest.py — Shared Test Fixtures for the steel marketplace

Provides an in-memory SQLite database, a FastAPI TestClient wired to it,
and factory fixtures for the core models (buyer/seller accounts, master
catalog entries, seller listings).

Business Rules:
- All tests run against an isolated in-memory DB (no real data at risk)
- Each test function gets fresh tables (created, then dropped)
- Accounts are created through account_service so passwords are real hashes

Called by: all test files via pytest autodiscovery
Depends on: app.models (Base), app.database (get_db), app.services
"""

import os
os.environ["TESTING"] = "1"  # Must be set before importing app modules
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"  # keep hashing fast; production default is 10

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.models import Account, Base, CatalogEntry
from app.services import account_service

# ── In-memory SQLite engine ──────────────────────────────────────────

TEST_DB_URL = "sqlite://"  # in-memory, fresh per session

engine = create_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@event.listens_for(engine, "connect")
def _enable_fk(dbapi_conn, _):
    """SQLite ignores FKs by default — turn them on."""
    dbapi_conn.execute("PRAGMA foreign_keys=ON")


TEST_PASSWORD = "secret123"


# ── Fixtures ─────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def db_session():
    """Create all tables, yield a session, then tear down."""
    Base.metadata.create_all(bind=engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db_session: Session) -> TestClient:
    """FastAPI TestClient with get_db overridden to use the test session."""
    from app.database import get_db
    from app.main import app

    def _override_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture()
def buyer(db_session: Session) -> Account:
    """A registered buyer (password TEST_PASSWORD)."""
    return account_service.register(
        db_session,
        "Buyer",
        name="Test Buyer",
        email="buyer@steelmart.in",
        username="testbuyer",
        password=TEST_PASSWORD,
        address="12 Station Road, Patna",
    )


@pytest.fixture()
def seller(db_session: Session) -> Account:
    """A registered seller (password TEST_PASSWORD)."""
    return account_service.register(
        db_session,
        "Seller",
        name="Patna Steel Traders",
        email="sales@patnasteel.in",
        username="patnasteel",
        password=TEST_PASSWORD,
        description="TMT and structural stockist",
    )


@pytest.fixture()
def other_seller(db_session: Session) -> Account:
    """A second seller for competing-offer tests."""
    return account_service.register(
        db_session,
        "Seller",
        name="Bihar Iron House",
        email="info@bihariron.in",
        username="bihariron",
        password=TEST_PASSWORD,
    )


def _make_master(db: Session, name: str = "TMT 500 D 12 mm", **fields) -> CatalogEntry:
    entry = CatalogEntry(
        name=name,
        category=fields.pop("category", "TMT Rebars"),
        brand=fields.pop("brand", "TATA Tiscon"),
        grade=fields.pop("grade", "500 D"),
        size=fields.pop("size", "12 mm"),
        unit=fields.pop("unit", "kg"),
        is_master=True,
        status="Active",
        **fields,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


def _make_listing(db: Session, master: CatalogEntry, seller: Account, status: str = "Active") -> CatalogEntry:
    entry = CatalogEntry(
        name=master.name,
        category=master.category,
        brand=master.brand,
        grade=master.grade,
        size=master.size,
        unit=master.unit,
        is_master=False,
        master_entry_id=master.id,
        seller_id=seller.id,
        seller_name=seller.name,
        status=status,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


@pytest.fixture()
def make_master(db_session: Session):
    """Factory: make_master(name, **fields) inserts a master catalog entry."""
    return lambda name="TMT 500 D 12 mm", **fields: _make_master(db_session, name, **fields)


@pytest.fixture()
def make_listing(db_session: Session):
    """Factory: make_listing(master, seller, status) inserts a seller listing."""
    return lambda master, seller, status="Active": _make_listing(db_session, master, seller, status)


@pytest.fixture()
def master_entry(db_session: Session) -> CatalogEntry:
    """A master TMT rebar entry."""
    return _make_master(db_session)


@pytest.fixture()
def active_listing(db_session: Session, master_entry: CatalogEntry, seller: Account) -> CatalogEntry:
    """seller stocks master_entry (Active)."""
    return _make_listing(db_session, master_entry, seller)
