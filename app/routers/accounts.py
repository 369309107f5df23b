"""
routers/accounts.py — Buyer & Seller Onboarding Routes

Buyer self-registration, seller onboarding, and account listings.

Business Rules:
- Username unique across all roles, email unique within a role (409)
- GET /api/buyers/{id} and /api/sellers/{id} 404 on a role mismatch
- Listings never include password hashes

Called by: main.py (router mount)
Depends on: services/account_service.py, rate_limit
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..rate_limit import limiter
from ..schemas.accounts import BuyerRegister, SellerCreate
from ..schemas.responses import AccountEnvelope, AccountOut
from ..services import account_service

router = APIRouter(tags=["accounts"])


# ── Buyers ───────────────────────────────────────────────────────────


@router.post("/api/buyers/register", status_code=201, response_model=AccountEnvelope)
@limiter.limit(settings.rate_limit_register)
def register_buyer(payload: BuyerRegister, request: Request, db: Session = Depends(get_db)):
    account = account_service.register(db, "Buyer", **payload.model_dump())
    return {
        "success": True,
        "message": "Buyer registered successfully",
        "user": account_service.account_to_dict(account),
    }


@router.get("/api/buyers/{buyer_id}", response_model=AccountOut)
def get_buyer(buyer_id: int, db: Session = Depends(get_db)):
    account = account_service.get_by_id(db, buyer_id, "Buyer")
    return account_service.account_to_dict(account)


# ── Sellers ──────────────────────────────────────────────────────────


@router.post("/api/sellers", status_code=201, response_model=AccountEnvelope)
@limiter.limit(settings.rate_limit_register)
def create_seller(payload: SellerCreate, request: Request, db: Session = Depends(get_db)):
    account = account_service.register(db, "Seller", **payload.model_dump())
    return {
        "success": True,
        "message": "Seller created successfully",
        "user": account_service.account_to_dict(account),
    }


@router.get("/api/sellers", response_model=list[AccountOut])
def list_sellers(db: Session = Depends(get_db)):
    return [account_service.account_to_dict(a) for a in account_service.list_accounts(db, "Seller")]


@router.get("/api/sellers/{seller_id}", response_model=AccountOut)
def get_seller(seller_id: int, db: Session = Depends(get_db)):
    account = account_service.get_by_id(db, seller_id, "Seller")
    return account_service.account_to_dict(account)


# ── All users ────────────────────────────────────────────────────────


@router.get("/api/users", response_model=list[AccountOut])
def list_users(db: Session = Depends(get_db)):
    return [account_service.account_to_dict(a) for a in account_service.list_accounts(db)]
