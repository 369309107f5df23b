"""
schemas/responses.py — Shared response models for OpenAPI documentation

Typed shapes of the serialized accounts, catalog entries and quotes. Used
as response_model= on router decorators; extra="allow" keeps any field the
service adds.

Called by: routers/*.py
Depends on: pydantic
"""

from __future__ import annotations

from pydantic import BaseModel, Field


# ── Base Wrappers ───────────────────────────────────────────────────────


class SuccessResponse(BaseModel, extra="allow"):
    success: bool = True
    message: str = ""


# ── Accounts ────────────────────────────────────────────────────────────


class AccountOut(BaseModel, extra="allow"):
    id: int
    name: str
    email: str
    username: str
    role: str
    status: str = "Active"
    presence: str = "Offline"
    last_login_at: str | None = None


class AccountEnvelope(SuccessResponse):
    user: AccountOut


# ── Catalog ─────────────────────────────────────────────────────────────


class CatalogEntryOut(BaseModel, extra="allow"):
    id: int
    name: str
    category: str
    is_master: bool = False
    master_entry_id: int | None = None
    status: str = "Active"
    seller_id: int | None = None


class SeedStats(BaseModel):
    total_added: int = 0
    total_skipped: int = 0
    total_processed: int = 0


class SeedResponse(SuccessResponse):
    stats: SeedStats


# ── Quotes ──────────────────────────────────────────────────────────────


class OfferOut(BaseModel, extra="allow"):
    id: int
    seller_id: int
    seller_name: str = ""
    offered_price: float
    status: str = "Pending"


class QuoteOut(BaseModel, extra="allow"):
    id: int
    buyer_id: int
    buyer_name: str
    product_name: str | None = None
    requested_quantity: float = 0
    status: str = "Pending"
    broadcast_status: str | None = None
    matched_sellers: list[dict] = Field(default_factory=list)
    offers: list[OfferOut] = Field(default_factory=list)


class QuoteEnvelope(SuccessResponse):
    quote: QuoteOut
