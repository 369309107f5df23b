"""
test_services_catalog.py — Tests for catalog_service.

Covers master/listing creation, the toggle find-or-clone flow, the
seller status overlay on master listings, and update/delete.

Called by: pytest
Depends on: app/services/catalog_service.py, conftest.py
"""

import pytest

from app.exceptions import ConflictError, NotFoundError, ValidationError
from app.models import CatalogEntry
from app.services import catalog_service

# ── Create ──────────────────────────────────────────────────────────


class TestCreateEntry:
    def test_create_master(self, db_session):
        entry = catalog_service.create_entry(
            db_session,
            {"name": "Angle A 40×5", "category": "Angles", "brand": "SAIL", "is_master": True},
        )
        assert entry.is_master is True
        assert entry.seller_id is None
        assert entry.master_entry_id is None
        assert entry.status == "Active"
        assert entry.metal_type == "Steel"
        assert entry.unit == "kg"

    def test_master_ignores_seller_fields(self, db_session, seller):
        entry = catalog_service.create_entry(
            db_session,
            {"name": "Flat F 25×5", "category": "Flats", "is_master": True, "seller_id": seller.id},
        )
        assert entry.seller_id is None

    @pytest.mark.parametrize("fields", [{"category": "Angles"}, {"name": "Angle"}, {"name": " ", "category": "Angles"}])
    def test_name_and_category_required(self, db_session, fields):
        with pytest.raises(ValidationError, match="Name and category are required"):
            catalog_service.create_entry(db_session, {**fields, "is_master": True})

    def test_listing_requires_seller_and_master(self, db_session, seller):
        with pytest.raises(ValidationError, match="seller_id and master_entry_id"):
            catalog_service.create_entry(
                db_session, {"name": "TMT", "category": "TMT Rebars", "seller_id": seller.id}
            )

    def test_listing_requires_existing_master(self, db_session, seller):
        with pytest.raises(NotFoundError, match="Master product not found"):
            catalog_service.create_entry(
                db_session,
                {"name": "TMT", "category": "TMT Rebars", "seller_id": seller.id, "master_entry_id": 999},
            )

    def test_listing_cannot_point_at_another_listing(self, db_session, seller, active_listing):
        with pytest.raises(NotFoundError):
            catalog_service.create_entry(
                db_session,
                {
                    "name": "TMT",
                    "category": "TMT Rebars",
                    "seller_id": seller.id,
                    "master_entry_id": active_listing.id,
                },
            )

    def test_create_listing(self, db_session, master_entry, seller):
        entry = catalog_service.create_entry(
            db_session,
            {
                "name": master_entry.name,
                "category": master_entry.category,
                "seller_id": seller.id,
                "seller_name": seller.name,
                "master_entry_id": master_entry.id,
                "price": 58.5,
            },
        )
        assert entry.is_master is False
        assert entry.master_entry_id == master_entry.id
        assert entry.price == 58.5

    def test_duplicate_listing_conflicts(self, db_session, master_entry, seller, active_listing):
        with pytest.raises(ConflictError):
            catalog_service.create_entry(
                db_session,
                {
                    "name": master_entry.name,
                    "category": master_entry.category,
                    "seller_id": seller.id,
                    "master_entry_id": master_entry.id,
                },
            )

    def test_invalid_status(self, db_session):
        with pytest.raises(ValidationError, match="Invalid status"):
            catalog_service.create_entry(
                db_session, {"name": "X", "category": "Y", "is_master": True, "status": "Archived"}
            )


# ── Toggle ──────────────────────────────────────────────────────────


class TestToggleMaster:
    def test_first_toggle_clones_master(self, db_session, master_entry, seller):
        listing, message = catalog_service.toggle_master(
            db_session, master_entry.id, seller.id, seller.name
        )
        assert message == "Product added to your inventory"
        assert listing.is_master is False
        assert listing.master_entry_id == master_entry.id
        assert listing.seller_id == seller.id
        assert listing.seller_name == "Patna Steel Traders"
        assert listing.status == "Active"
        for field in ("name", "category", "brand", "grade", "size", "unit"):
            assert getattr(listing, field) == getattr(master_entry, field)

    def test_second_toggle_flips_status(self, db_session, master_entry, seller):
        first, _ = catalog_service.toggle_master(db_session, master_entry.id, seller.id)
        second, message = catalog_service.toggle_master(
            db_session, master_entry.id, seller.id, status="Inactive"
        )
        assert second.id == first.id
        assert second.status == "Inactive"
        assert message == "Product marked as Inactive"

    def test_never_creates_duplicates(self, db_session, master_entry, seller):
        for status in ("Active", "Inactive", "Active", "Inactive"):
            catalog_service.toggle_master(db_session, master_entry.id, seller.id, status=status)
        count = (
            db_session.query(CatalogEntry)
            .filter_by(master_entry_id=master_entry.id, seller_id=seller.id)
            .count()
        )
        assert count == 1

    def test_first_toggle_can_be_inactive(self, db_session, master_entry, seller):
        listing, message = catalog_service.toggle_master(
            db_session, master_entry.id, seller.id, status="Inactive"
        )
        assert listing.status == "Inactive"
        assert message == "Product added to your inventory"

    def test_unknown_master(self, db_session, seller):
        with pytest.raises(NotFoundError, match="Master product not found"):
            catalog_service.toggle_master(db_session, 4242, seller.id)

    def test_master_itself_untouched(self, db_session, master_entry, seller):
        catalog_service.toggle_master(db_session, master_entry.id, seller.id, status="Inactive")
        db_session.refresh(master_entry)
        assert master_entry.status == "Active"
        assert master_entry.seller_id is None


# ── Listing ─────────────────────────────────────────────────────────


class TestListEntries:
    def test_overlay_uses_seller_status(self, db_session, make_master, make_listing, seller):
        stocked = make_master("TMT 500 D 8 mm", size="8 mm")
        paused = make_master("TMT 500 D 10 mm", size="10 mm")
        unlisted = make_master("TMT 500 D 16 mm", size="16 mm")
        make_listing(stocked, seller, "Active")
        make_listing(paused, seller, "Inactive")

        rows = catalog_service.list_entries(db_session, is_master=True, seller_id=seller.id)
        by_id = {r["id"]: r["status"] for r in rows}
        assert by_id == {stocked.id: "Active", paused.id: "Inactive", unlisted.id: "Inactive"}
        assert all(r["is_master"] for r in rows)

    def test_overlay_is_per_seller(self, db_session, master_entry, seller, other_seller, active_listing):
        rows = catalog_service.list_entries(db_session, is_master=True, seller_id=other_seller.id)
        assert rows[0]["status"] == "Inactive"

    def test_without_seller_returns_stored_status(self, db_session, master_entry, active_listing):
        rows = catalog_service.list_entries(db_session, is_master=True)
        assert [r["id"] for r in rows] == [master_entry.id]
        assert rows[0]["status"] == "Active"

    def test_filters(self, db_session, make_master):
        make_master("Angle A 40×5", category="Angles", brand="SAIL", size="A 40×5")
        make_master("TMT 550 D 12 mm", grade="550 D")
        rows = catalog_service.list_entries(db_session, category="Angles")
        assert [r["name"] for r in rows] == ["Angle A 40×5"]
        assert catalog_service.list_entries(db_session, metal_type="Aluminium") == []
        assert catalog_service.list_entries(db_session, status="Inactive") == []

    def test_is_master_false_lists_only_listings(self, db_session, master_entry, active_listing):
        rows = catalog_service.list_entries(db_session, is_master=False)
        assert [r["id"] for r in rows] == [active_listing.id]

    def test_list_for_seller(self, db_session, make_master, make_listing, seller, other_seller):
        first = make_master("TMT 500 D 8 mm", size="8 mm")
        second = make_master("TMT 500 D 10 mm", size="10 mm")
        mine = make_listing(first, seller)
        make_listing(second, other_seller)
        assert [e.id for e in catalog_service.list_for_seller(db_session, seller.id)] == [mine.id]


# ── Update / Delete ─────────────────────────────────────────────────


class TestUpdateDelete:
    def test_update_price_and_status(self, db_session, active_listing):
        entry = catalog_service.update_entry(
            db_session, active_listing.id, {"price": 61.0, "quantity": 1200, "status": "Inactive"}
        )
        assert entry.price == 61.0
        assert entry.quantity == 1200
        assert entry.status == "Inactive"

    def test_update_rejects_structural_fields(self, db_session, active_listing, other_seller):
        with pytest.raises(ValidationError, match="cannot be updated"):
            catalog_service.update_entry(db_session, active_listing.id, {"seller_id": other_seller.id})

    def test_update_rejects_blank_name(self, db_session, master_entry):
        with pytest.raises(ValidationError, match="must not be blank"):
            catalog_service.update_entry(db_session, master_entry.id, {"name": "  "})

    def test_update_missing(self, db_session):
        with pytest.raises(NotFoundError, match="Product not found"):
            catalog_service.update_entry(db_session, 777, {"price": 1})

    def test_delete(self, db_session, active_listing):
        catalog_service.delete_entry(db_session, active_listing.id)
        assert db_session.get(CatalogEntry, active_listing.id) is None

    def test_delete_missing(self, db_session):
        with pytest.raises(NotFoundError):
            catalog_service.delete_entry(db_session, 777)

    def test_entry_to_dict_overlay(self, master_entry):
        assert catalog_service.entry_to_dict(master_entry)["status"] == "Active"
        assert catalog_service.entry_to_dict(master_entry, "Inactive")["status"] == "Inactive"
