"""
schemas/catalog.py — Pydantic models for catalog (product) endpoints

Business Rules:
- Creation accepts master templates and seller listings alike
- Toggle requires master_entry_id and seller_id; status defaults to Active
- Updates are allow-listed: unknown fields are rejected with 400

Called by: routers/catalog.py
Depends on: pydantic
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class CatalogEntryCreate(BaseModel):
    name: str | None = None
    category: str | None = None
    metal_type: str | None = None
    brand: str | None = None
    grade: str | None = None
    finish: str | None = None
    size: str | None = None
    variety: str | None = None
    type: str | None = None
    description: str | None = None
    image_url: str | None = None
    price: float | None = None
    quantity: float | None = None
    unit: str | None = None
    status: Literal["Active", "Inactive"] | None = None
    is_master: bool = False
    master_entry_id: int | None = None
    seller_id: int | None = None
    seller_name: str | None = None


class ToggleMasterRequest(BaseModel):
    """Activate or deactivate a master entry in a seller's inventory."""
    master_entry_id: int
    seller_id: int
    seller_name: str | None = None
    status: Literal["Active", "Inactive"] = "Active"


class CatalogEntryUpdate(BaseModel, extra="forbid"):
    name: str | None = None
    category: str | None = None
    metal_type: str | None = None
    brand: str | None = None
    grade: str | None = None
    finish: str | None = None
    size: str | None = None
    variety: str | None = None
    type: str | None = None
    description: str | None = None
    image_url: str | None = None
    price: float | None = None
    quantity: float | None = None
    unit: str | None = None
    status: Literal["Active", "Inactive"] | None = None
