"""
catalog_service.py — Master templates and seller listings

Business Rules:
- Master entries carry no seller fields and no master_entry_id
- A seller listing must reference an existing master entry
- At most one listing per (master_entry_id, seller_id); toggle re-uses it
- Deactivation flips status, it never deletes the listing
- Master listing with a seller_id overlays that seller's listing status
  on each master ("Inactive" when the seller has no listing)

Called by: routers/catalog.py, services/catalog_seed.py
Depends on: models.CatalogEntry
"""

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..exceptions import ConflictError, NotFoundError, ValidationError
from ..models import CatalogEntry
from ..models.catalog import CATALOG_STATUSES, DESCRIPTIVE_FIELDS

log = logging.getLogger(__name__)


def entry_to_dict(entry: CatalogEntry, status: str | None = None) -> dict:
    """Serialize an entry; status overrides the stored one (seller overlay)."""
    return {
        "id": entry.id,
        "name": entry.name,
        "category": entry.category,
        "metal_type": entry.metal_type,
        "brand": entry.brand or "",
        "grade": entry.grade or "",
        "finish": entry.finish or "",
        "size": entry.size or "",
        "variety": entry.variety or "",
        "type": entry.type or "",
        "description": entry.description or "",
        "image_url": entry.image_url or "",
        "price": entry.price,
        "quantity": entry.quantity,
        "unit": entry.unit,
        "is_master": entry.is_master,
        "master_entry_id": entry.master_entry_id,
        "status": status or entry.status,
        "seller_id": entry.seller_id,
        "seller_name": entry.seller_name or "",
        "created_at": entry.created_at.isoformat() if entry.created_at else None,
        "updated_at": entry.updated_at.isoformat() if entry.updated_at else None,
    }


def _check_status(status: str) -> str:
    if status not in CATALOG_STATUSES:
        raise ValidationError(
            f"Invalid status. Must be one of: {', '.join(CATALOG_STATUSES)}"
        )
    return status


def _get_master(db: Session, master_entry_id: int) -> CatalogEntry | None:
    return (
        db.query(CatalogEntry)
        .filter_by(id=master_entry_id, is_master=True)
        .first()
    )


def _find_listing(db: Session, master_entry_id: int, seller_id: int) -> CatalogEntry | None:
    return (
        db.query(CatalogEntry)
        .filter_by(master_entry_id=master_entry_id, seller_id=seller_id, is_master=False)
        .first()
    )


# ── Create ───────────────────────────────────────────────────────────


def create_entry(db: Session, fields: dict) -> CatalogEntry:
    """Create a master template or a seller listing from validated fields."""
    name = (fields.get("name") or "").strip()
    category = (fields.get("category") or "").strip()
    if not name or not category:
        raise ValidationError("Name and category are required")

    is_master = bool(fields.get("is_master"))
    status = _check_status(fields.get("status") or "Active")
    values = {k: fields.get(k) for k in DESCRIPTIVE_FIELDS if fields.get(k) is not None}
    values.update(name=name, category=category)
    values.setdefault("metal_type", "Steel")
    values.setdefault("unit", "kg")

    if is_master:
        entry = CatalogEntry(**values, is_master=True, status=status)
    else:
        seller_id = fields.get("seller_id")
        master_entry_id = fields.get("master_entry_id")
        if seller_id is None or master_entry_id is None:
            raise ValidationError("Seller listings require seller_id and master_entry_id")
        if not _get_master(db, master_entry_id):
            raise NotFoundError("Master product not found")
        if _find_listing(db, master_entry_id, seller_id):
            raise ConflictError("Seller already lists this master product")
        entry = CatalogEntry(
            **values,
            is_master=False,
            master_entry_id=master_entry_id,
            seller_id=seller_id,
            seller_name=fields.get("seller_name") or "",
            status=status,
        )

    db.add(entry)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError("Seller already lists this master product") from e
    db.refresh(entry)
    log.info("Created catalog entry %s (master=%s)", entry.id, entry.is_master)
    return entry


# ── Toggle (find-or-clone) ───────────────────────────────────────────


def toggle_master(
    db: Session,
    master_entry_id: int,
    seller_id: int,
    seller_name: str | None = None,
    status: str | None = None,
) -> tuple[CatalogEntry, str]:
    """Activate/deactivate a master entry in a seller's inventory.

    Returns (listing, message). The first call clones the master; later
    calls only flip the listing's status.
    """
    status = _check_status(status or "Active")
    now = datetime.now(timezone.utc)

    listing = _find_listing(db, master_entry_id, seller_id)
    if listing:
        listing.status = status
        listing.updated_at = now
        db.commit()
        db.refresh(listing)
        log.info("Seller %s marked listing %s as %s", seller_id, listing.id, status)
        return listing, f"Product marked as {status}"

    master = _get_master(db, master_entry_id)
    if not master:
        raise NotFoundError("Master product not found")

    listing = CatalogEntry(
        **{k: getattr(master, k) for k in DESCRIPTIVE_FIELDS},
        is_master=False,
        master_entry_id=master.id,
        seller_id=seller_id,
        seller_name=seller_name or "",
        status=status,
        created_at=now,
        updated_at=now,
    )
    db.add(listing)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent toggle created the listing first; flip that one instead
        db.rollback()
        listing = _find_listing(db, master_entry_id, seller_id)
        if not listing:
            raise
        listing.status = status
        listing.updated_at = now
        db.commit()
        db.refresh(listing)
        return listing, f"Product marked as {status}"
    db.refresh(listing)
    log.info("Seller %s cloned master %s into listing %s", seller_id, master.id, listing.id)
    return listing, "Product added to your inventory"


# ── Queries ──────────────────────────────────────────────────────────


def list_entries(
    db: Session,
    category: str | None = None,
    metal_type: str | None = None,
    status: str | None = None,
    is_master: bool | None = None,
    seller_id: int | None = None,
) -> list[dict]:
    """Filtered catalog listing, newest first.

    With is_master=True and a seller_id every master is returned with the
    seller's own listing status in place of its stored status.
    """
    query = db.query(CatalogEntry)
    if category:
        query = query.filter(CatalogEntry.category == category)
    if metal_type:
        query = query.filter(CatalogEntry.metal_type == metal_type)
    order = (CatalogEntry.created_at.desc(), CatalogEntry.id.desc())

    if is_master is True and seller_id is not None:
        masters = query.filter(CatalogEntry.is_master.is_(True)).order_by(*order).all()
        listings = (
            db.query(CatalogEntry.master_entry_id, CatalogEntry.status)
            .filter(CatalogEntry.seller_id == seller_id, CatalogEntry.is_master.is_(False))
            .all()
        )
        seller_status = {mid: st for mid, st in listings}
        return [entry_to_dict(m, seller_status.get(m.id, "Inactive")) for m in masters]

    if status:
        query = query.filter(CatalogEntry.status == status)
    if is_master is not None:
        query = query.filter(CatalogEntry.is_master.is_(is_master))
    return [entry_to_dict(e) for e in query.order_by(*order).all()]


def list_for_seller(db: Session, seller_id: int) -> list[CatalogEntry]:
    return (
        db.query(CatalogEntry)
        .filter(CatalogEntry.seller_id == seller_id, CatalogEntry.is_master.is_(False))
        .order_by(CatalogEntry.created_at.desc(), CatalogEntry.id.desc())
        .all()
    )


def get_entry(db: Session, entry_id: int) -> CatalogEntry:
    entry = db.get(CatalogEntry, entry_id)
    if not entry:
        raise NotFoundError("Product not found")
    return entry


# ── Update / Delete ──────────────────────────────────────────────────


def update_entry(db: Session, entry_id: int, updates: dict) -> CatalogEntry:
    """Merge allow-listed fields (already validated by the schema)."""
    entry = get_entry(db, entry_id)
    for key, value in updates.items():
        if key not in DESCRIPTIVE_FIELDS and key != "status":
            raise ValidationError(f"Field '{key}' cannot be updated")
        if key == "status":
            value = _check_status(value)
        if key in ("name", "category") and not (value or "").strip():
            raise ValidationError(f"{key.capitalize()} must not be blank")
        setattr(entry, key, value)
    entry.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(entry)
    return entry


def delete_entry(db: Session, entry_id: int) -> None:
    entry = get_entry(db, entry_id)
    db.delete(entry)
    db.commit()
    log.info("Deleted catalog entry %s", entry_id)
