"""
quote_service.py — RFQ lifecycle: create, offer, accept, pay

A buyer's QuoteRequest is either bound to one seller or broadcast to every
seller that catalog matching selects. Sellers bid with offers, the buyer
accepts exactly one, then confirms payment.

Business Rules:
- Broadcast when seller_id is "BROADCAST"/"MULTIPLE", is_broadcast is set,
  or no seller_id is given; otherwise the RFQ is bound to seller_id
- product_name is the first item's name ("Steel Items" if none); items with
  neither a name nor a catalog id are dropped, and an RFQ left with no
  items is a general broadcast
- requested_quantity sums numeric item quantities, anything else counts 0
- One live offer per seller: a new offer replaces that seller's previous one
- States: Pending → Quoted (first offer) → Accepted → Processing (paid);
  Rejected is set by hand through update_quote
- Offers and accept are only allowed while Pending/Quoted, pay only when
  Accepted. Stored statuses are compared case-insensitively
- Accepting copies seller and price from the offer itself, marks it
  Accepted and every other offer Rejected

Called by: routers/quotes.py
Depends on: models.quotes, services/matching_service.py
"""

import logging
import math
from datetime import datetime, timezone

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session, selectinload

from ..config import settings
from ..exceptions import NotFoundError, ValidationError
from ..models import QuoteMatchedSeller, QuoteOffer, QuoteRequest
from ..models.quotes import (
    BROADCASTED,
    GENERAL_BROADCAST,
    OPEN_QUOTE_STATUSES,
    QUOTE_STATUSES,
)
from .matching_service import match_sellers

log = logging.getLogger(__name__)

BROADCAST_MARKERS = ("BROADCAST", "MULTIPLE")
UPDATABLE_FIELDS = ("status", "buyer_address", "targeted_price", "delivery_date")


# ── Serialization ────────────────────────────────────────────────────


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def offer_to_dict(offer: QuoteOffer) -> dict:
    return {
        "id": offer.id,
        "seller_id": offer.seller_id,
        "seller_name": offer.seller_name or "",
        "offered_price": offer.offered_price,
        "message": offer.message or "",
        "status": offer.status,
        "timestamp": _iso(offer.timestamp),
    }


def quote_to_dict(quote: QuoteRequest) -> dict:
    return {
        "id": quote.id,
        "buyer_id": quote.buyer_id,
        "buyer_name": quote.buyer_name,
        "buyer_address": quote.buyer_address,
        "items": quote.items or [],
        "product_name": quote.product_name,
        "requested_quantity": quote.requested_quantity,
        "targeted_price": quote.targeted_price,
        "delivery_date": quote.delivery_date,
        "is_broadcast": quote.is_broadcast,
        "broadcast_status": quote.broadcast_status,
        "seller_id": quote.seller_id,
        "seller_name": quote.seller_name,
        "matched_sellers": [
            {"seller_id": m.seller_id, "seller_name": m.seller_name}
            for m in quote.matched_sellers
        ],
        "matched_sellers_count": quote.matched_sellers_count or 0,
        "offers": [offer_to_dict(o) for o in quote.offers],
        "status": quote.status,
        "accepted_offer_id": quote.accepted_offer_id,
        "final_price": quote.final_price,
        "created_at": _iso(quote.created_at),
        "updated_at": _iso(quote.updated_at),
        "paid_at": _iso(quote.paid_at),
    }


# ── Helpers ──────────────────────────────────────────────────────────


def numeric_quantity(value) -> float:
    """Quantity as a float; anything unparseable or non-finite counts as 0."""
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def parse_price(value, field: str = "Offered price") -> float:
    """Strictly parse a price: finite and positive, else ValidationError."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field} must be a number")
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number") from None
    if not math.isfinite(price) or price <= 0:
        raise ValidationError(f"{field} must be a positive number")
    return price


def normalize_status(value: str | None) -> str:
    """Map any casing of a known status onto its canonical spelling."""
    lookup = {s.lower(): s for s in QUOTE_STATUSES}
    status = lookup.get((value or "").strip().lower())
    if not status:
        raise ValidationError(
            f"Invalid status. Must be one of: {', '.join(QUOTE_STATUSES)}"
        )
    return status


def _is_open(quote: QuoteRequest) -> bool:
    return (quote.status or "").lower() in {s.lower() for s in OPEN_QUOTE_STATUSES}


def _resolve_target(seller_id, is_broadcast: bool | None) -> tuple[bool, int | None]:
    """(broadcast?, bound seller id) from the create payload."""
    if is_broadcast or seller_id is None or seller_id == "":
        return True, None
    if isinstance(seller_id, str):
        if seller_id.strip().upper() in BROADCAST_MARKERS:
            return True, None
        raw = seller_id.strip()
        # ASCII only: str.isdigit() also accepts superscripts that int() rejects
        if not (raw.isascii() and raw.isdigit()):
            raise ValidationError("Invalid seller ID format")
        return False, int(raw)
    return False, int(seller_id)


def _build_items(items, product_id, product_name, requested_quantity) -> list[dict]:
    if items is None:
        items = [
            {
                "catalog_entry_id": product_id,
                "product_name": product_name,
                "quantity": requested_quantity,
            }
        ]
    built = []
    for item in items:
        name = (item.get("product_name") or "").strip()
        entry_id = item.get("catalog_entry_id")
        if not name and entry_id is None:
            continue
        built.append(
            {"catalog_entry_id": entry_id, "product_name": name, "quantity": item.get("quantity")}
        )
    return built


def _load_quote(db: Session, quote_id: int, for_update: bool = False) -> QuoteRequest:
    query = db.query(QuoteRequest).filter(QuoteRequest.id == quote_id)
    if for_update:
        query = query.with_for_update()
    quote = query.first()
    if not quote:
        raise NotFoundError("Quote not found")
    return quote


def _listing_query(db: Session):
    return db.query(QuoteRequest).options(
        selectinload(QuoteRequest.offers), selectinload(QuoteRequest.matched_sellers)
    )


# ── Create ───────────────────────────────────────────────────────────


def create_quote(
    db: Session,
    *,
    buyer_id: int | None,
    buyer_name: str | None,
    items: list[dict] | None = None,
    product_id: int | None = None,
    product_name: str | None = None,
    requested_quantity=None,
    seller_id=None,
    seller_name: str | None = None,
    is_broadcast: bool | None = None,
    buyer_address: str | None = None,
    targeted_price=None,
    delivery_date: str | None = None,
) -> QuoteRequest:
    """Create a Pending RFQ, running catalog matching when it is a broadcast."""
    if buyer_id is None or not (buyer_name or "").strip():
        raise ValidationError("buyer_id and buyer_name are required")

    broadcast, bound_seller = _resolve_target(seller_id, is_broadcast)
    line_items = _build_items(items, product_id, product_name, requested_quantity)
    if targeted_price is not None:
        targeted_price = parse_price(targeted_price, "Targeted price")
    first_name = line_items[0]["product_name"] if line_items else ""

    now = datetime.now(timezone.utc)
    quote = QuoteRequest(
        buyer_id=buyer_id,
        buyer_name=buyer_name.strip(),
        buyer_address=buyer_address or None,
        items=line_items,
        product_name=first_name or product_name or settings.default_product_name,
        requested_quantity=sum(numeric_quantity(i["quantity"]) for i in line_items),
        targeted_price=targeted_price,
        delivery_date=delivery_date or None,
        is_broadcast=broadcast,
        seller_id=bound_seller,
        seller_name=None if broadcast else (seller_name or None),
        status="Pending",
        created_at=now,
        updated_at=now,
    )

    if broadcast:
        result = match_sellers(db, line_items)
        quote.broadcast_status = result.broadcast_status
        quote.matched_sellers = [
            QuoteMatchedSeller(seller_id=m["seller_id"], seller_name=m["seller_name"])
            for m in result.matched_sellers
        ]
        quote.matched_sellers_count = len(result.matched_sellers)
    else:
        quote.matched_sellers_count = 0

    db.add(quote)
    db.commit()
    db.refresh(quote)
    log.info(
        "Quote %s created by buyer %s (broadcast=%s, status=%s, sellers=%d)",
        quote.id, buyer_id, broadcast, quote.broadcast_status, quote.matched_sellers_count,
    )
    return quote


def creation_message(quote: QuoteRequest) -> str:
    if quote.broadcast_status == BROADCASTED:
        return f"Quote created and broadcasted to {quote.matched_sellers_count} seller(s)"
    return "Quote created successfully"


# ── Reads ────────────────────────────────────────────────────────────


def get_quote(db: Session, quote_id: int) -> QuoteRequest:
    quote = _listing_query(db).filter(QuoteRequest.id == quote_id).first()
    if not quote:
        raise NotFoundError("Quote not found")
    return quote


def list_available_for_sellers(db: Session) -> list[QuoteRequest]:
    """Open broadcast-eligible quotes, newest first."""
    return (
        _listing_query(db)
        .filter(
            or_(
                QuoteRequest.is_broadcast.is_(True),
                QuoteRequest.seller_id.is_(None),
                QuoteRequest.broadcast_status.in_([BROADCASTED, GENERAL_BROADCAST]),
            ),
            func.lower(QuoteRequest.status).in_([s.lower() for s in OPEN_QUOTE_STATUSES]),
        )
        .order_by(QuoteRequest.created_at.desc(), QuoteRequest.id.desc())
        .all()
    )


def list_for_buyer(db: Session, buyer_id: int) -> list[QuoteRequest]:
    return (
        _listing_query(db)
        .filter(QuoteRequest.buyer_id == buyer_id)
        .order_by(QuoteRequest.created_at.desc(), QuoteRequest.id.desc())
        .all()
    )


def list_for_seller(db: Session, seller_id: int) -> list[QuoteRequest]:
    """Quotes bound to the seller, or unbound broadcasts the seller was matched to."""
    return (
        _listing_query(db)
        .filter(
            or_(
                QuoteRequest.seller_id == seller_id,
                and_(
                    QuoteRequest.seller_id.is_(None),
                    QuoteRequest.matched_sellers.any(QuoteMatchedSeller.seller_id == seller_id),
                ),
            )
        )
        .order_by(QuoteRequest.created_at.desc(), QuoteRequest.id.desc())
        .all()
    )


# ── Offers ───────────────────────────────────────────────────────────


def submit_offer(
    db: Session,
    quote_id: int,
    *,
    seller_id: int,
    seller_name: str | None = None,
    offered_price,
    message: str | None = None,
    timestamp: datetime | None = None,
) -> tuple[QuoteRequest, QuoteOffer]:
    """Replace the seller's live offer with a new one and mark the quote Quoted.

    The quote row is locked for the whole replace so concurrent offers from
    other sellers are serialized behind it.
    """
    quote = _load_quote(db, quote_id, for_update=True)
    price = parse_price(offered_price)
    if not _is_open(quote):
        raise ValidationError(f"Quote is {quote.status}; offers are closed")

    stale = [o for o in quote.offers if o.seller_id == seller_id]
    for old in stale:
        quote.offers.remove(old)
    if stale:
        # Deletes must reach the DB before the insert or the unique key trips
        db.flush()

    now = datetime.now(timezone.utc)
    offer = QuoteOffer(
        seller_id=seller_id,
        seller_name=seller_name or "",
        offered_price=price,
        message=message or "",
        status="Pending",
        timestamp=timestamp or now,
    )
    quote.offers.append(offer)
    quote.status = "Quoted"
    quote.updated_at = now
    db.commit()
    db.refresh(offer)
    log.info(
        "Seller %s offered %.2f on quote %s (replaced=%d)", seller_id, price, quote_id, len(stale)
    )
    return quote, offer


def accept_offer(
    db: Session,
    quote_id: int,
    offer_id: int,
    *,
    seller_id: int | None = None,
    seller_name: str | None = None,
    final_price=None,
) -> QuoteRequest:
    """Accept one offer; seller and price on the quote come from that offer."""
    quote = _load_quote(db, quote_id, for_update=True)
    offer = next((o for o in quote.offers if o.id == offer_id), None)
    if offer is None:
        raise NotFoundError("Offer not found")
    if not _is_open(quote):
        raise ValidationError(f"Quote is {quote.status}; it can no longer be accepted")
    if seller_id is not None and seller_id != offer.seller_id:
        raise ValidationError("seller_id does not match the selected offer")
    if final_price is not None and not math.isclose(
        parse_price(final_price, "Final price"), offer.offered_price
    ):
        raise ValidationError("final_price does not match the selected offer")

    for other in quote.offers:
        other.status = "Accepted" if other.id == offer.id else "Rejected"
    quote.status = "Accepted"
    quote.seller_id = offer.seller_id
    quote.seller_name = offer.seller_name or seller_name or ""
    quote.final_price = offer.offered_price
    quote.accepted_offer_id = offer.id
    quote.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(quote)
    log.info("Quote %s accepted offer %s from seller %s", quote_id, offer.id, offer.seller_id)
    return quote


def mark_paid(db: Session, quote_id: int) -> QuoteRequest:
    quote = _load_quote(db, quote_id, for_update=True)
    if (quote.status or "").lower() != "accepted":
        raise ValidationError("Only accepted quotes can be paid")
    now = datetime.now(timezone.utc)
    quote.status = "Processing"
    quote.paid_at = now
    quote.updated_at = now
    db.commit()
    db.refresh(quote)
    log.info("Quote %s paid, now Processing", quote_id)
    return quote


# ── Update ───────────────────────────────────────────────────────────


def update_quote(db: Session, quote_id: int, updates: dict) -> QuoteRequest:
    """Merge allow-listed fields. Accepted is only reachable via accept_offer."""
    unknown = sorted(set(updates) - set(UPDATABLE_FIELDS))
    if unknown:
        raise ValidationError(f"Field(s) cannot be updated: {', '.join(unknown)}")
    updates = dict(updates)

    quote = _load_quote(db, quote_id, for_update=True)
    if "status" in updates:
        status = normalize_status(updates["status"])
        if status == "Accepted" and (quote.status or "").lower() != "accepted":
            raise ValidationError("Use the accept endpoint to accept an offer")
        updates["status"] = status
    if "targeted_price" in updates and updates["targeted_price"] is not None:
        updates["targeted_price"] = parse_price(updates["targeted_price"], "Targeted price")

    for key, value in updates.items():
        setattr(quote, key, value)
    quote.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(quote)
    log.info("Quote %s updated: %s", quote_id, ", ".join(sorted(updates)))
    return quote
