"""Catalog models — master templates and the seller listings cloned from them."""

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    Float,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)

from ..database import UTCDateTime
from .base import Base

CATALOG_STATUSES = ("Active", "Inactive")

# Attributes a seller listing copies verbatim from its master entry
DESCRIPTIVE_FIELDS = (
    "name",
    "category",
    "metal_type",
    "brand",
    "grade",
    "finish",
    "size",
    "variety",
    "type",
    "description",
    "image_url",
    "price",
    "quantity",
    "unit",
)


class CatalogEntry(Base):
    """Either a master template (is_master) or a seller's own listing.

    Seller listings point back at their master through master_entry_id.
    The reference is logical only (no FK) and is checked when the listing
    is created.
    """

    __tablename__ = "catalog_entries"
    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False)
    metal_type = Column(String(50), default="Steel")
    brand = Column(String(100), default="")
    grade = Column(String(100), default="")
    finish = Column(String(100), default="")
    size = Column(String(100), default="")
    variety = Column(String(100), default="")
    type = Column(String(100), default="")
    description = Column(Text, default="")
    image_url = Column(String(500), default="")
    price = Column(Float)
    quantity = Column(Float)
    unit = Column(String(20), default="kg")

    is_master = Column(Boolean, default=False, nullable=False)
    master_entry_id = Column(Integer)
    status = Column(String(20), default="Active")  # Active | Inactive
    seller_id = Column(Integer)
    seller_name = Column(String(255))

    created_at = Column(UTCDateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        UTCDateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        UniqueConstraint("master_entry_id", "seller_id", name="uq_catalog_master_seller"),
        Index("ix_catalog_is_master", "is_master"),
        Index("ix_catalog_master_status", "master_entry_id", "status"),
        Index("ix_catalog_seller", "seller_id"),
        Index("ix_catalog_name", "name"),
    )
