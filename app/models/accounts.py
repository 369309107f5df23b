"""Account model — buyers, sellers and admins share one table."""

from datetime import datetime, timezone

from sqlalchemy import Column, Index, Integer, String, Text, UniqueConstraint

from ..database import UTCDateTime
from .base import Base

ROLES = ("Buyer", "Seller", "Admin")
ACCOUNT_STATUSES = ("Active", "Suspended")


class Account(Base):
    """A marketplace login. Email is unique per role, username across all roles."""

    __tablename__ = "accounts"
    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)  # stored lower-cased
    username = Column(String(100), nullable=False, unique=True)  # stored lower-cased
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False)  # Buyer | Seller | Admin
    status = Column(String(20), default="Active")  # Active | Suspended
    presence = Column(String(20), default="Offline")  # Online | Offline
    last_login_at = Column(UTCDateTime)
    description = Column(Text, default="")

    # Buyer onboarding extras
    phone = Column(String(50))
    address = Column(Text)
    company = Column(String(255))
    gstin = Column(String(20))

    created_at = Column(UTCDateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        UTCDateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        UniqueConstraint("email", "role", name="uq_accounts_email_role"),
        Index("ix_accounts_role", "role"),
    )
