"""
catalog_seed.py — Bulk generation of the master catalog

Enumerates every product family the marketplace sells (TMT rebars,
structural sections, shutter hardware, plates and sheets) as master
catalog entries.

Business Rules:
- Seeding is idempotent: a candidate is skipped when an existing master
  matches all of its non-empty attributes (category, brand, size, grade,
  finish, variety, type)
- Seeded masters are Active with price and quantity 0
- Everything is inserted in one transaction

Called by: routers/catalog.py (POST /api/products/seed-master-catalog),
           scripts/seed_master_catalog.py
Depends on: models.CatalogEntry
"""

import logging
from collections import defaultdict
from datetime import datetime, timezone
from itertools import product

from sqlalchemy.orm import Session

from ..models import CatalogEntry

log = logging.getLogger(__name__)

MATCH_ATTRS = ("category", "brand", "size", "grade", "finish", "variety", "type")

# ── Family lists ─────────────────────────────────────────────────────

TMT_BRANDS = ["TATA Tiscon", "SAIL", "Jindal", "JSW", "Shyam Steel", "Rungta", "Others"]
TMT_GRADES = ["500 D", "550 D", "600 D"]
TMT_SIZES = ["6 mm", "8 mm", "10 mm", "12 mm", "16 mm", "20 mm", "25 mm", "32 mm"]

# Structural sections all share one brand list and the MS/GI finishes
STRUCTURAL_BRANDS = ["Patna Iron", "Kamdhenu", "JKSPL", "Sel Tiger", "SAIL", "SUL", "Others"]
MS_GI_FINISHES = ["MS - Mild Steel (Black)", "GI - Galvanised"]
BAR_SIZES = ["8 mm", "10 mm", "12 mm", "16 mm", "20 mm", "25 mm", "32 mm", "40 mm"]

ANGLE_SIZES = [
    "A 20×3", "A 25×3", "A 25×5", "A 30×3", "A 32×3", "A 35×5", "A 35×6",
    "A 40×3", "A 40×5", "A 40×6", "A 50×3", "A 50×5", "A 50×6",
    "A 65×5", "A 65×6", "A 75×5", "A 75×6", "A 75×8", "A 75×10",
]
FLAT_SIZES = [
    "F 20×3", "F 20×5", "F 20×6", "F 25×3", "F 25×5", "F 25×6", "F 25×10", "F 25×12",
    "F 32×5", "F 32×6", "F 32×8", "F 32×10", "F 40×5", "F 40×6", "F 40×8", "F 40×10", "F 40×12",
    "F 50×5", "F 50×6", "F 50×8", "F 50×10", "F 50×12", "F 65×6", "F 65×8", "F 65×10", "F 65×12",
    "F 75×6", "F 75×8", "F 75×10", "F 75×12", "F 75×16", "F 100×8", "F 100×12",
]
CHANNEL_SIZES = [
    "ISMC 70×40", "ISMC 75×40 (ULC)", "ISMC 75×40 (LC)", "ISMC 75×40 (MC)", "ISMC 75×40 (H)",
    "ISMC 100×50 (LC)", "ISMC 100×50 (MC)", "ISMC 100×50 (H)",
    "ISMC 125×65", "ISMC 150×75", "ISMC 200×75", "ISMC 250×75",
]
JOIST_SIZES = [
    "ISMB 100", "ISMB 125", "ISMB 150", "ISMB 200",
    "ISMB 250", "ISMB 300", "ISMB 350", "ISMB 400",
]
Z_ANGLE_SIZES = ["Z - Angle (L)", "Z - Angle (H)"]
GATE_CHANNEL_SIZES = [f"Gt. Chn. {ft} ft" for ft in range(13, 19)]

# Shutter hardware
SHUTTER_BRANDS = ["Jagdamba", "Kamdhenu", "Manokaamna", "Others"]
HEAVY_LIGHT = ["Heavy", "Light"]
TAK_SIZES = [
    "Tak Sq. 8 mm", "Tak Sq. 10 mm", "Tak Sq. 12 mm", "Tak Flat 20×5", "Tak Flat 25×5",
    "Round Pipe 66", "Square Pipe 66", "Rectangular Pipes 28", "Fancy Pipes 3",
    "Shutter Guide", "Guide 13 ft", "Guide 14 ft", "Guide 15 ft", "Guide 16 ft",
    "Guide 17 ft", "Guide 18 ft", "Guide 19 ft", "Guide 20 ft",
]
SHUTTER_PROFILE_SIZES = [f"Profile {ft} ft" for ft in range(13, 24)]
LOCK_PLATE_ITEMS = [
    "Straight Lock Plate 8 ft", "Straight Lock Plate 10 ft",
    "Lock Plate (Roll Coil)", 'Bracket 14"×14"',
]

PLATE_BRANDS = ["Patna Iron", "Kamdhenu", "Satyam", "Others", "Tata Structura", "APL Apollo"]
PLATE_ITEMS = [
    "Chequered Plate", "MS Plate", "2.5 mm - 10×6", "3 mm - 10×6", "3.5 mm - 10×6",
    "4 mm - 10×6", "4.5 mm - 10×6", "5 mm - 10×5", "5 mm - 21×5", "6 mm - 10×5", "6 mm - 21×5",
]

# Sheets
HR_SHEET_BRANDS = ["TATA Astrum", "SAIL", "Secondary (Other)"]
HR_SHEET_GAUGES = ["8 G", "9 G", "10 G", "12 G", "14 G", "16 G"]
HR_SHEET_SIZES = ["6×3", "6×4", "6×Meter", "7×3", "7×4", "7×Meter", "8×3", "8×4", "8×5", "8×Meter", "10×3"]

GP_SHEET_BRANDS = ["TATA", "SAIL", "JSW", "AM/NS INDIA", "Secondary (Other)"]
GP_SHEET_THICKNESSES = [
    "0.40 mm", "0.50 mm - 26 G", "0.60 mm - 24 G", "22 G - 0.80 mm", "20 G - 1.00 mm",
    "18 G - 1.20 mm", "16 G - 1.60 mm", "14 G - 2 mm", "12 G - 2.50 mm", "10 G - 3.00 mm",
]
GP_SHEET_SIZES = ["6×3", "6×4", "6×Meter", "7×3", "7×4", "7×Meter", "8×3", "8×4", "8×5", "8×Meter"]
GP_SHEET_FINISHES = ["Galvanised", "Galvannealed"]

CR_SHEET_BRANDS = ["TATA Steelium Super", "SAIL", "Secondary (Other)"]
CR_SHEET_GAUGES = ["14 G", "16 G", "18 G", "20 G", "22 G", "24 G", "26 G", "0.40 mm", "0.35 mm", "0.30 mm"]
CR_SHEET_SIZES = ["6×3", "6×4", "6×Meter", "8×3", "8×4", "8×Meter"]

ROOFING_BRANDS = ["Tata Shaktee", "Aarti", "5 Star", "Others"]
ROOFING_THICKNESSES = [
    "0.15 mm", "0.18 mm", "0.20 mm", "0.22 mm", "0.25 mm", "0.30 mm",
    "0.35 mm", "0.40 mm", "0.45 mm", "0.50 mm", "0.60 mm", "0.80 mm",
]
ROOFING_SIZES = ["6×3", "6×4", "8×3", "8×4", "10×3", "10×4", "12×3", "12×4", "14×3", "14×4", "16×4"]

PROFILE_SHEET_BRANDS = [
    "TATA Durashine", "TATA Infinia", "JSW Pragati+", "Jindal Sabrang / Rangeen", "Aarti", "Others",
]
PROFILE_SHEET_THICKNESSES = [
    "0.25 mm", "0.30 mm", "0.35 mm", "0.37 mm", "0.40 mm", "0.45 mm", "0.47 mm", "0.50 mm", "0.53 mm",
]
PROFILE_SHEET_SIZES = [
    "6×3.5", "7×3.5", "8×3.5", "10×3.5", "12×3.5", "14×3.5", "16×3.5",
    "6×4", "7×4", "8×4", "10×4", "12×4", "14×4", "16×4", "18×4", "20×4",
]

ASBESTOS_BRANDS = ["Everest", "Visaka", "Konark", "Charminar (birlanu)", "Ramco", "Others"]
ASBESTOS_SIZES = ["6 ft (5.75 ft)", "6.5 ft", "8 ft", "10 ft", "12 ft"]
ASBESTOS_TYPES = ["Grey", "Colour Coated", "Cooling Sheet"]

# (category, name prefix, sizes, unit) for the MS/GI structural families
STRUCTURAL_FAMILIES = [
    ("Angles", "Angle", ANGLE_SIZES, "kg"),
    ("Flats", "Flat", FLAT_SIZES, "kg"),
    ("Square Bars", "Square Bar", BAR_SIZES, "kg"),
    ("Round Bars", "Round Bar", BAR_SIZES, "kg"),
    ("Channels", "Channel", CHANNEL_SIZES, "kg"),
    ("Joist / ISMB", "Joist", JOIST_SIZES, "kg"),
    ("Z-Angles", "Z-Angle", Z_ANGLE_SIZES, "kg"),
    ("Gate Channel", "Gate Channel", GATE_CHANNEL_SIZES, "pcs"),
]

# (category, name prefix, items) for the heavy/light shutter hardware
SHUTTER_FAMILIES = [
    ("Tak Sq. / Flat", "Tak", TAK_SIZES),
    ("Shutter Profiles", "Shutter Profile", SHUTTER_PROFILE_SIZES),
    ("Lock Plates / Bracket", "Lock Plate", LOCK_PLATE_ITEMS),
]


def _spec(name, category, brand, size, unit, grade="", finish="", variety="", type=""):
    return {
        "name": name,
        "category": category,
        "brand": brand,
        "size": size,
        "grade": grade,
        "finish": finish,
        "variety": variety,
        "type": type,
        "unit": unit,
    }


def master_catalog_specs():
    """Yield one attribute dict per master entry, family by family."""
    for brand, grade, size in product(TMT_BRANDS, TMT_GRADES, TMT_SIZES):
        yield _spec(f"TMT {grade} {size}", "TMT Rebars", brand, size, "kg", grade=grade)

    for category, prefix, sizes, unit in STRUCTURAL_FAMILIES:
        for size, finish, brand in product(sizes, MS_GI_FINISHES, STRUCTURAL_BRANDS):
            yield _spec(f"{prefix} {size}", category, brand, size, unit, finish=finish)

    for category, prefix, sizes in SHUTTER_FAMILIES:
        for size, finish, brand, variety in product(
            sizes, MS_GI_FINISHES, SHUTTER_BRANDS, HEAVY_LIGHT
        ):
            yield _spec(
                f"{prefix} {size}", category, brand, size, "pcs",
                finish=finish, variety=variety,
            )

    for size, finish, brand in product(PLATE_ITEMS, MS_GI_FINISHES, PLATE_BRANDS):
        yield _spec(f"Plate {size}", "Plates", brand, size, "kg", finish=finish)

    for gauge, size, brand in product(HR_SHEET_GAUGES, HR_SHEET_SIZES, HR_SHEET_BRANDS):
        yield _spec(f"HR Sheet {gauge} {size}", "HR Sheets", brand, f"{gauge} {size}", "kg")

    for thickness, size, finish, brand in product(
        GP_SHEET_THICKNESSES, GP_SHEET_SIZES, GP_SHEET_FINISHES, GP_SHEET_BRANDS
    ):
        yield _spec(
            f"GP Sheet {thickness} {size}", "GP Sheets", brand, f"{thickness} {size}", "kg",
            finish=finish,
        )

    for gauge, size, brand in product(CR_SHEET_GAUGES, CR_SHEET_SIZES, CR_SHEET_BRANDS):
        yield _spec(f"CR Sheet {gauge} {size}", "CR Sheets", brand, f"{gauge} {size}", "kg")

    for thickness, size, brand in product(ROOFING_THICKNESSES, ROOFING_SIZES, ROOFING_BRANDS):
        yield _spec(
            f"Roofing Sheet {thickness} {size}", "Roofing Sheet", brand,
            f"{thickness} {size}", "pcs",
        )

    for thickness, size, brand in product(
        PROFILE_SHEET_THICKNESSES, PROFILE_SHEET_SIZES, PROFILE_SHEET_BRANDS
    ):
        yield _spec(
            f"Colour Profile Sheet {thickness} {size}", "Colour Profile Sheet", brand,
            f"{thickness} {size}", "pcs",
        )

    for size, type_, brand in product(ASBESTOS_SIZES, ASBESTOS_TYPES, ASBESTOS_BRANDS):
        yield _spec(
            f"Asbestos Sheet {size} {type_}", "Asbestos Sheet", brand, size, "pcs", type=type_,
        )


class _MasterIndex:
    """In-memory view of existing master attributes for duplicate checks."""

    def __init__(self):
        self._by_category = defaultdict(list)
        self._by_key = defaultdict(list)  # (category, brand, size)

    def add(self, attrs: dict) -> None:
        row = {k: attrs.get(k) or "" for k in MATCH_ATTRS}
        self._by_category[row["category"]].append(row)
        self._by_key[(row["category"], row["brand"], row["size"])].append(row)

    def contains(self, spec: dict) -> bool:
        """True if an existing master matches every non-empty attribute of spec."""
        wanted = {k: spec[k] for k in MATCH_ATTRS if spec.get(k)}
        if spec.get("brand") and spec.get("size"):
            rows = self._by_key.get((spec["category"], spec["brand"], spec["size"]), ())
        else:
            rows = self._by_category.get(spec["category"], ())
        return any(all(row[k] == v for k, v in wanted.items()) for row in rows)


def _load_index(db: Session) -> _MasterIndex:
    index = _MasterIndex()
    columns = [getattr(CatalogEntry, k) for k in MATCH_ATTRS]
    for row in db.query(*columns).filter(CatalogEntry.is_master.is_(True)):
        index.add(dict(zip(MATCH_ATTRS, row)))
    return index


def seed_master_catalog(db: Session) -> dict:
    """Insert every missing master entry. Returns added/skipped/processed counts."""
    index = _load_index(db)
    now = datetime.now(timezone.utc)
    added, skipped = [], 0

    for spec in master_catalog_specs():
        if index.contains(spec):
            skipped += 1
            continue
        index.add(spec)
        added.append(
            CatalogEntry(
                **spec,
                metal_type="Steel",
                description="",
                image_url="",
                price=0,
                quantity=0,
                is_master=True,
                status="Active",
                created_at=now,
                updated_at=now,
            )
        )

    db.add_all(added)
    db.commit()
    stats = {
        "total_added": len(added),
        "total_skipped": skipped,
        "total_processed": len(added) + skipped,
    }
    log.info(
        "Master catalog seeded: %d added, %d skipped",
        stats["total_added"], stats["total_skipped"],
    )
    return stats
