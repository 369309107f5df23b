"""
schemas/accounts.py — Pydantic models for login and onboarding endpoints

Required-field, email-shape and password-length checks live in
account_service so every caller gets the same messages; these models
only type the payloads.

Called by: routers/auth.py, routers/accounts.py
Depends on: pydantic
"""

from __future__ import annotations

from pydantic import BaseModel, field_validator


class LoginRequest(BaseModel):
    username: str | None = None
    password: str | None = None
    role: str | None = None

    @field_validator("username", "role")
    @classmethod
    def strip(cls, v: str | None) -> str | None:
        return v.strip() if isinstance(v, str) else v


class BuyerRegister(BaseModel):
    """Self-service buyer registration."""
    name: str | None = None
    email: str | None = None
    username: str | None = None
    password: str | None = None
    phone: str | None = None
    address: str | None = None
    company: str | None = None
    gstin: str | None = None


class SellerCreate(BaseModel):
    """Seller onboarding (done by an admin)."""
    name: str | None = None
    email: str | None = None
    username: str | None = None
    password: str | None = None
    description: str | None = None
    phone: str | None = None
    address: str | None = None
    company: str | None = None
    gstin: str | None = None
