"""
routers/auth.py — Login & Profile Routes

Business Rules:
- Login is keyed by (username, role); a correct password under the wrong
  role is still "Invalid credentials"
- No session token is issued; the caller keeps the returned account
- Login attempts are rate limited per client address

Called by: main.py (router mount)
Depends on: services/account_service.py, rate_limit
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..rate_limit import limiter
from ..schemas.accounts import LoginRequest
from ..schemas.responses import AccountEnvelope, AccountOut
from ..services import account_service

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=AccountEnvelope)
@limiter.limit(settings.rate_limit_login)
def login(payload: LoginRequest, request: Request, db: Session = Depends(get_db)):
    account = account_service.login(db, payload.username, payload.password, payload.role)
    return {"success": True, "user": account_service.account_to_dict(account)}


@router.get("/profile/{account_id}", response_model=AccountOut)
def profile(account_id: int, db: Session = Depends(get_db)):
    return account_service.account_to_dict(account_service.get_profile(db, account_id))
