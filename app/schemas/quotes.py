"""
schemas/quotes.py — Pydantic models for RFQ / offer endpoints

Prices arrive as numbers or numeric strings; quote_service parses them
strictly so NaN, infinity and junk all come back as 400. Price fields use
strict number types so JSON booleans are rejected instead of read as 1.0.

Business Rules:
- A quote names its items, or a single product via product_id/product_name
- seller_id may be an account id or the BROADCAST / MULTIPLE marker
- Update bodies are allow-listed: unknown fields are rejected with 400

Called by: routers/quotes.py
Depends on: pydantic
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, StrictFloat, StrictInt, field_validator


class LineItem(BaseModel):
    catalog_entry_id: int | None = None
    product_name: str = ""
    quantity: float | str | None = None

    @field_validator("product_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()


class QuoteCreate(BaseModel):
    buyer_id: int | None = None
    buyer_name: str | None = None
    buyer_address: str | None = None
    items: list[LineItem] | None = None
    # Single-product shorthand used when items is omitted
    product_id: int | None = None
    product_name: str | None = None
    requested_quantity: float | str | None = None
    seller_id: int | str | None = None
    seller_name: str | None = None
    is_broadcast: bool | None = None
    targeted_price: StrictFloat | StrictInt | str | None = None
    delivery_date: str | None = None


class OfferSubmit(BaseModel):
    seller_id: int
    seller_name: str | None = None
    offered_price: StrictFloat | StrictInt | str
    message: str | None = None
    timestamp: datetime | None = None


class OfferAccept(BaseModel):
    offer_id: int
    seller_id: int | None = None
    seller_name: str | None = None
    final_price: StrictFloat | StrictInt | str | None = None


class QuoteUpdate(BaseModel, extra="forbid"):
    status: str | None = None
    buyer_address: str | None = None
    targeted_price: StrictFloat | StrictInt | str | None = None
    delivery_date: str | None = None


class QuoteStatusUpdate(BaseModel, extra="forbid"):
    status: str
