"""
routers/quotes.py — RFQ, Offer, Accept & Pay Routes

Buyers create RFQs (bound to one seller or broadcast), sellers poll the
open broadcasts and bid, buyers accept one offer and confirm payment.

Business Rules:
- Broadcast RFQs are matched against active seller listings at creation
- A seller's new offer replaces their previous one on the same RFQ
- accept 404s on an offer id the RFQ does not have
- pay is only valid once an offer is accepted

Called by: main.py (router mount)
Depends on: services/quote_service.py
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.quotes import (
    OfferAccept,
    OfferSubmit,
    QuoteCreate,
    QuoteStatusUpdate,
    QuoteUpdate,
)
from ..schemas.responses import QuoteEnvelope, QuoteOut, SuccessResponse
from ..services import quote_service

router = APIRouter(prefix="/api/quotes", tags=["quotes"])


@router.post("", status_code=201, response_model=QuoteEnvelope)
def create_quote(payload: QuoteCreate, db: Session = Depends(get_db)):
    quote = quote_service.create_quote(db, **payload.model_dump())
    return {
        "success": True,
        "message": quote_service.creation_message(quote),
        "quote": quote_service.quote_to_dict(quote),
    }


# Static paths must stay above /{quote_id}
@router.get("/available", response_model=list[QuoteOut])
def available_quotes(db: Session = Depends(get_db)):
    return [quote_service.quote_to_dict(q) for q in quote_service.list_available_for_sellers(db)]


@router.get("/buyer/{buyer_id}", response_model=list[QuoteOut])
def buyer_quotes(buyer_id: int, db: Session = Depends(get_db)):
    return [quote_service.quote_to_dict(q) for q in quote_service.list_for_buyer(db, buyer_id)]


@router.get("/seller/{seller_id}", response_model=list[QuoteOut])
def seller_quotes(seller_id: int, db: Session = Depends(get_db)):
    return [quote_service.quote_to_dict(q) for q in quote_service.list_for_seller(db, seller_id)]


@router.get("/{quote_id}", response_model=QuoteOut)
def get_quote(quote_id: int, db: Session = Depends(get_db)):
    return quote_service.quote_to_dict(quote_service.get_quote(db, quote_id))


# ── Bidding ──────────────────────────────────────────────────────────


@router.post("/{quote_id}/offer", response_model=SuccessResponse)
def submit_offer(quote_id: int, payload: OfferSubmit, db: Session = Depends(get_db)):
    quote, offer = quote_service.submit_offer(db, quote_id, **payload.model_dump())
    return {
        "success": True,
        "offer": quote_service.offer_to_dict(offer),
        "quote": quote_service.quote_to_dict(quote),
    }


@router.post("/{quote_id}/accept", response_model=QuoteEnvelope)
def accept_offer(quote_id: int, payload: OfferAccept, db: Session = Depends(get_db)):
    quote = quote_service.accept_offer(
        db,
        quote_id,
        payload.offer_id,
        seller_id=payload.seller_id,
        seller_name=payload.seller_name,
        final_price=payload.final_price,
    )
    return {
        "success": True,
        "message": "Offer accepted. Proceeding to payment.",
        "quote": quote_service.quote_to_dict(quote),
    }


@router.post("/{quote_id}/pay", response_model=QuoteEnvelope)
def mark_paid(quote_id: int, db: Session = Depends(get_db)):
    quote = quote_service.mark_paid(db, quote_id)
    return {
        "success": True,
        "message": "Payment confirmed. Order moved to Processing.",
        "quote": quote_service.quote_to_dict(quote),
    }


# ── General update ───────────────────────────────────────────────────


@router.put("/{quote_id}", response_model=QuoteEnvelope)
def update_quote(quote_id: int, payload: QuoteUpdate, db: Session = Depends(get_db)):
    quote = quote_service.update_quote(db, quote_id, payload.model_dump(exclude_unset=True))
    return {"success": True, "quote": quote_service.quote_to_dict(quote)}


@router.patch("/{quote_id}/status", response_model=QuoteEnvelope)
def update_quote_status(quote_id: int, payload: QuoteStatusUpdate, db: Session = Depends(get_db)):
    quote = quote_service.update_quote(db, quote_id, {"status": payload.status})
    return {"success": True, "quote": quote_service.quote_to_dict(quote)}
