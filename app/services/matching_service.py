"""
matching_service.py — Decide which sellers a broadcast RFQ is sent to

Resolves each requested line item to a master catalog entry, then collects
every seller holding an Active listing of one of those masters.

Business Rules:
- Item resolution: catalog_entry_id of a master first, exact master name second
- Items that resolve to nothing are ignored (not an error)
- Only Active, non-master listings count; only role=Seller accounts qualify
- A seller whose account lookup fails is logged and skipped
- BROADCASTED when sellers matched, NO_SELLERS when items resolved but
  nobody stocks them, GENERAL_BROADCAST when no item resolved at all
- Runs once at RFQ creation; the result is a frozen snapshot

Called by: services/quote_service.py (create_quote)
Depends on: models.CatalogEntry, models.Account
"""

import logging
from dataclasses import dataclass, field

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import settings
from ..models import Account, CatalogEntry
from ..models.quotes import BROADCASTED, GENERAL_BROADCAST, NO_SELLERS

log = logging.getLogger(__name__)


@dataclass
class MatchResult:
    broadcast_status: str
    matched_sellers: list[dict] = field(default_factory=list)  # [{seller_id, seller_name}]
    master_entry_ids: list[int] = field(default_factory=list)


def resolve_master_id(db: Session, item: dict) -> int | None:
    """Master entry id for one line item, or None when it matches nothing."""
    entry_id = item.get("catalog_entry_id")
    if entry_id is not None:
        found = (
            db.query(CatalogEntry.id)
            .filter(CatalogEntry.id == entry_id, CatalogEntry.is_master.is_(True))
            .first()
        )
        if found:
            return found[0]

    name = (item.get("product_name") or "").strip()
    if name:
        found = (
            db.query(CatalogEntry.id)
            .filter(CatalogEntry.name == name, CatalogEntry.is_master.is_(True))
            .order_by(CatalogEntry.id)
            .first()
        )
        if found:
            return found[0]
    return None


def _seller_account(db: Session, seller_id: int) -> Account | None:
    # Savepoint so a failed lookup leaves the outer transaction usable
    try:
        with db.begin_nested():
            return db.get(Account, seller_id)
    except SQLAlchemyError as e:
        log.warning("Seller lookup failed for %s, skipping: %s", seller_id, e)
        return None


def match_sellers(db: Session, items: list[dict]) -> MatchResult:
    """Snapshot of the sellers who can bid on these items."""
    master_ids = []
    for item in items:
        master_id = resolve_master_id(db, item)
        if master_id is not None:
            master_ids.append(master_id)

    if not master_ids:
        log.info("No line item resolved to a master entry, general broadcast")
        return MatchResult(broadcast_status=GENERAL_BROADCAST)

    rows = (
        db.query(CatalogEntry.seller_id)
        .filter(
            CatalogEntry.master_entry_id.in_(set(master_ids)),
            CatalogEntry.is_master.is_(False),
            CatalogEntry.status == "Active",
            CatalogEntry.seller_id.isnot(None),
        )
        .order_by(CatalogEntry.id)
        .all()
    )
    seller_ids = list(dict.fromkeys(r[0] for r in rows))

    matched = []
    for seller_id in seller_ids:
        account = _seller_account(db, seller_id)
        if account is None or account.role != "Seller":
            continue
        matched.append(
            {"seller_id": account.id, "seller_name": account.name or settings.default_seller_name}
        )

    status = BROADCASTED if matched else NO_SELLERS
    log.info(
        "Matched %d seller(s) for masters %s (%s)", len(matched), sorted(set(master_ids)), status
    )
    return MatchResult(
        broadcast_status=status, matched_sellers=matched, master_entry_ids=master_ids
    )
