"""
Seed default shipping zones and the shipping settings row.

Zones seeded (only when the (country, region) pair is not configured yet):
  - India (country-wide default)
  - India / North, India / South
  - United States (country-wide default)

Existing rows, active or not, are left untouched so the script can be re-run
against a live database.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from shipadmin.db.session import SessionLocal
from shipadmin.schemas.shipping_charge import ShippingChargeCreate
from shipadmin.services.shipping_charge_store import ShippingChargeStore
from shipadmin.services.shipping_settings_service import ShippingSettingsService

logger = logging.getLogger(__name__)

SEED_EMAIL = "seed@local"

DEFAULT_ZONES: list[dict] = [
    {"country": "India", "region": None, "delivery_charge": Decimal("50.00"), "return_charge": Decimal("30.00"), "estimated_days": 5},
    {"country": "India", "region": "North", "delivery_charge": Decimal("60.00"), "return_charge": Decimal("35.00"), "estimated_days": 4},
    {"country": "India", "region": "South", "delivery_charge": Decimal("55.00"), "return_charge": Decimal("35.00"), "estimated_days": 4},
    {"country": "United States", "region": None, "delivery_charge": Decimal("10.99"), "return_charge": Decimal("5.99"), "estimated_days": 7},
]


def seed(db) -> int:
    store = ShippingChargeStore(db)
    created = 0
    for zone in DEFAULT_ZONES:
        payload = ShippingChargeCreate(**zone)
        if store.get_by_zone(payload.country, payload.region) is not None:
            continue
        store.create(payload, current_user_email=SEED_EMAIL)
        created += 1
    ShippingSettingsService(db, store=store).get_settings()
    return created


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    db = SessionLocal()
    try:
        created = seed(db)
        logger.info("seed_shipping_charges created=%s", created)
    finally:
        db.close()


if __name__ == "__main__":
    main()
