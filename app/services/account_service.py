"""
account_service.py — Registration, login and profile lookups

Business Rules:
- Username is unique across ALL roles; email is unique within a role
- Both are trimmed and lower-cased before storage and lookup
- Passwords are bcrypt hashed (cost from settings.bcrypt_rounds)
- Login is keyed by (username, role); every mismatch is the same 401
- Serialized accounts never carry the password hash

Called by: routers/auth.py, routers/accounts.py, services/matching_service.py
Depends on: models.Account, security.passwords
"""

import logging
import re
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..exceptions import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from ..models import Account
from ..models.accounts import ROLES
from ..security.passwords import MAX_PASSWORD_BYTES, hash_password, verify_password

log = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6
INVALID_CREDENTIALS = "Invalid credentials"


def account_to_dict(account: Account) -> dict:
    """Public view of an account (no password hash)."""
    return {
        "id": account.id,
        "name": account.name,
        "email": account.email,
        "username": account.username,
        "role": account.role,
        "status": account.status,
        "presence": account.presence,
        "last_login_at": account.last_login_at.isoformat() if account.last_login_at else None,
        "description": account.description or "",
        "phone": account.phone or "",
        "address": account.address or "",
        "company": account.company or "",
        "gstin": account.gstin or "",
        "created_at": account.created_at.isoformat() if account.created_at else None,
        "updated_at": account.updated_at.isoformat() if account.updated_at else None,
    }


def _normalize(value: str | None) -> str:
    return (value or "").strip().lower()


def _check_unique(db: Session, role: str, email: str, username: str) -> None:
    """Raise ConflictError naming the field that is already taken."""
    if db.query(Account.id).filter_by(email=email, role=role).first():
        raise ConflictError(f"Email already registered as {role}")
    if db.query(Account.id).filter_by(username=username).first():
        raise ConflictError("Username already exists")


# ── Registration ─────────────────────────────────────────────────────


def register(
    db: Session,
    role: str,
    *,
    name: str | None,
    email: str | None,
    username: str | None,
    password: str | None,
    description: str | None = None,
    phone: str | None = None,
    address: str | None = None,
    company: str | None = None,
    gstin: str | None = None,
) -> Account:
    """Create a Buyer, Seller or Admin account."""
    if role not in ROLES:
        raise ValidationError(f"Invalid role. Must be one of: {', '.join(ROLES)}")

    name = (name or "").strip()
    if not name or not (email or "").strip() or not (username or "").strip() or not password:
        raise ValidationError("Name, email, username, and password are required")

    email = _normalize(email)
    username = _normalize(username)
    if not EMAIL_RE.match(email):
        raise ValidationError("Invalid email format")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")

    _check_unique(db, role, email, username)

    account = Account(
        name=name,
        email=email,
        username=username,
        password_hash=hash_password(password),
        role=role,
        status="Active",
        presence="Offline",
        description=description or "",
        phone=phone or "",
        address=address or "",
        company=company or "",
        gstin=gstin or "",
    )
    db.add(account)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration; name the field
        db.rollback()
        _check_unique(db, role, email, username)
        raise
    db.refresh(account)
    log.info("Registered %s account %s (id=%s)", role, username, account.id)
    return account


# ── Login ────────────────────────────────────────────────────────────


def login(db: Session, username: str | None, password: str | None, role: str | None) -> Account:
    """Verify credentials for (username, role) and mark the account Online."""
    if not username or not password or not role:
        raise ValidationError("Username, password, and role are required")

    account = db.query(Account).filter_by(username=_normalize(username), role=role).first()
    if not account or not verify_password(password, account.password_hash):
        log.info("Failed login for username=%s role=%s", _normalize(username), role)
        raise UnauthorizedError(INVALID_CREDENTIALS)
    if account.status == "Suspended":
        log.info("Suspended account %s attempted login", account.id)
        raise UnauthorizedError(INVALID_CREDENTIALS)

    now = datetime.now(timezone.utc)
    account.presence = "Online"
    account.last_login_at = now
    account.updated_at = now
    db.commit()
    db.refresh(account)
    return account


# ── Lookups ──────────────────────────────────────────────────────────


def get_profile(db: Session, account_id: int) -> Account:
    account = db.get(Account, account_id)
    if not account:
        raise NotFoundError("User not found")
    return account


def get_by_id(db: Session, account_id: int, required_role: str) -> Account:
    """Fetch an account that must hold required_role; 404 otherwise."""
    account = db.get(Account, account_id)
    if not account or account.role != required_role:
        raise NotFoundError(f"{required_role} not found")
    return account


def list_accounts(db: Session, role: str | None = None) -> list[Account]:
    """All accounts (optionally one role), newest first."""
    query = db.query(Account)
    if role:
        query = query.filter(Account.role == role)
    return query.order_by(Account.created_at.desc(), Account.id.desc()).all()
