"""
routers/catalog.py — Product Catalog Routes

Master templates, seller listings, the find-or-clone toggle and catalog
seeding.

Business Rules:
- toggle-master is idempotent per (master, seller): clone once, then flip status
- GET /api/products?is_master=true&seller_id=N overlays N's listing status
- Updates reject unknown fields (400)

Called by: main.py (router mount)
Depends on: services/catalog_service.py, services/catalog_seed.py
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.catalog import CatalogEntryCreate, CatalogEntryUpdate, ToggleMasterRequest
from ..schemas.responses import CatalogEntryOut, SeedResponse, SuccessResponse
from ..services import catalog_service
from ..services.catalog_seed import seed_master_catalog

router = APIRouter(prefix="/api/products", tags=["catalog"])


@router.post("", status_code=201, response_model=SuccessResponse)
def create_product(payload: CatalogEntryCreate, db: Session = Depends(get_db)):
    entry = catalog_service.create_entry(db, payload.model_dump())
    return {
        "success": True,
        "message": "Product created successfully",
        "product": catalog_service.entry_to_dict(entry),
    }


@router.post("/toggle-master", response_model=SuccessResponse)
def toggle_master(payload: ToggleMasterRequest, db: Session = Depends(get_db)):
    listing, message = catalog_service.toggle_master(
        db,
        payload.master_entry_id,
        payload.seller_id,
        seller_name=payload.seller_name,
        status=payload.status,
    )
    return {"success": True, "message": message, "product": catalog_service.entry_to_dict(listing)}


@router.post("/seed-master-catalog", response_model=SeedResponse)
def seed_catalog(db: Session = Depends(get_db)):
    stats = seed_master_catalog(db)
    return {"success": True, "message": "Master catalog seeding completed", "stats": stats}


@router.get("", response_model=list[CatalogEntryOut])
def list_products(
    category: str | None = None,
    metal_type: str | None = None,
    status: str | None = None,
    is_master: bool | None = None,
    seller_id: int | None = None,
    db: Session = Depends(get_db),
):
    return catalog_service.list_entries(
        db,
        category=category,
        metal_type=metal_type,
        status=status,
        is_master=is_master,
        seller_id=seller_id,
    )


@router.get("/seller/{seller_id}", response_model=list[CatalogEntryOut])
def list_seller_products(seller_id: int, db: Session = Depends(get_db)):
    return [catalog_service.entry_to_dict(e) for e in catalog_service.list_for_seller(db, seller_id)]


@router.get("/{entry_id}", response_model=CatalogEntryOut)
def get_product(entry_id: int, db: Session = Depends(get_db)):
    return catalog_service.entry_to_dict(catalog_service.get_entry(db, entry_id))


@router.put("/{entry_id}", response_model=SuccessResponse)
def update_product(entry_id: int, payload: CatalogEntryUpdate, db: Session = Depends(get_db)):
    entry = catalog_service.update_entry(db, entry_id, payload.model_dump(exclude_unset=True))
    return {"success": True, "product": catalog_service.entry_to_dict(entry)}


@router.delete("/{entry_id}", response_model=SuccessResponse)
def delete_product(entry_id: int, db: Session = Depends(get_db)):
    catalog_service.delete_entry(db, entry_id)
    return {"success": True, "message": "Product deleted successfully"}
