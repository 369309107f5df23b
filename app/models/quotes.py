"""Quote request (RFQ), matched-seller snapshot and seller offer models."""

from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from ..database import UTCDateTime
from .base import Base

QUOTE_STATUSES = ("Pending", "Quoted", "Accepted", "Processing", "Rejected")
OPEN_QUOTE_STATUSES = ("Pending", "Quoted")
OFFER_STATUSES = ("Pending", "Accepted", "Rejected")

BROADCASTED = "BROADCASTED"
NO_SELLERS = "NO_SELLERS"
GENERAL_BROADCAST = "GENERAL_BROADCAST"


class QuoteRequest(Base):
    """One buyer RFQ covering one or more line items."""

    __tablename__ = "quote_requests"
    id = Column(Integer, primary_key=True)
    buyer_id = Column(Integer, nullable=False)
    buyer_name = Column(String(255), nullable=False)
    buyer_address = Column(Text)

    items = Column(JSON, default=list)  # [{catalog_entry_id, product_name, quantity}]
    product_name = Column(String(255))
    requested_quantity = Column(Float, default=0)
    targeted_price = Column(Float)
    delivery_date = Column(String(50))

    is_broadcast = Column(Boolean, default=False)
    broadcast_status = Column(String(30))  # BROADCASTED | NO_SELLERS | GENERAL_BROADCAST
    matched_sellers_count = Column(Integer, default=0)

    # Null for an open broadcast; set when bound or once an offer is accepted
    seller_id = Column(Integer)
    seller_name = Column(String(255))

    status = Column(String(20), default="Pending")
    accepted_offer_id = Column(Integer)
    final_price = Column(Float)

    created_at = Column(UTCDateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(UTCDateTime, default=lambda: datetime.now(timezone.utc))
    paid_at = Column(UTCDateTime)

    matched_sellers = relationship(
        "QuoteMatchedSeller",
        back_populates="quote_request",
        cascade="all, delete-orphan",
        order_by="QuoteMatchedSeller.id",
    )
    offers = relationship(
        "QuoteOffer",
        back_populates="quote_request",
        cascade="all, delete-orphan",
        order_by="QuoteOffer.id",
    )

    __table_args__ = (
        Index("ix_quote_requests_buyer", "buyer_id"),
        Index("ix_quote_requests_seller", "seller_id"),
        Index("ix_quote_requests_status", "status"),
        Index("ix_quote_requests_created", "created_at"),
    )


class QuoteMatchedSeller(Base):
    """Frozen snapshot of a seller that catalog matching selected for an RFQ."""

    __tablename__ = "quote_matched_sellers"
    id = Column(Integer, primary_key=True)
    quote_request_id = Column(
        Integer, ForeignKey("quote_requests.id", ondelete="CASCADE"), nullable=False
    )
    seller_id = Column(Integer, nullable=False)
    seller_name = Column(String(255))

    quote_request = relationship("QuoteRequest", back_populates="matched_sellers")

    __table_args__ = (
        UniqueConstraint("quote_request_id", "seller_id", name="uq_matched_quote_seller"),
        Index("ix_matched_sellers_seller", "seller_id"),
    )


class QuoteOffer(Base):
    """A seller's bid. At most one live offer per (quote, seller)."""

    __tablename__ = "quote_offers"
    id = Column(Integer, primary_key=True)
    quote_request_id = Column(
        Integer, ForeignKey("quote_requests.id", ondelete="CASCADE"), nullable=False
    )
    seller_id = Column(Integer, nullable=False)
    seller_name = Column(String(255))
    offered_price = Column(Float, nullable=False)
    message = Column(Text, default="")
    status = Column(String(20), default="Pending")  # Pending | Accepted | Rejected
    timestamp = Column(UTCDateTime, default=lambda: datetime.now(timezone.utc))

    quote_request = relationship("QuoteRequest", back_populates="offers")

    __table_args__ = (
        UniqueConstraint("quote_request_id", "seller_id", name="uq_offers_quote_seller"),
        Index("ix_quote_offers_seller", "seller_id"),
    )
