from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
import logging

from sqlalchemy.orm import Session

from shipadmin.core.flow_logging import flow_info
from shipadmin.models.shipping_charge import ShippingCharge
from shipadmin.models.shipping_settings import SETTINGS_ROW_ID, ShippingSettings
from shipadmin.schemas.shipping_settings import ShippingSettingsUpdate
from shipadmin.services.shipping_charge_store import ShippingChargeStore

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


@dataclass
class ShippingQuote:
    charge: ShippingCharge
    delivery_charge: Decimal
    return_charge: Decimal
    include_return: bool
    free_shipping_applied: bool

    @property
    def total(self) -> Decimal:
        if self.include_return:
            return self.delivery_charge + self.return_charge
        return self.delivery_charge

    def to_payload(self) -> dict:
        return {
            "charge_id": self.charge.id,
            "display_name": self.charge.display_name,
            "delivery_charge": self.delivery_charge,
            "return_charge": self.return_charge,
            "estimated_days": self.charge.estimated_days,
            "include_return": self.include_return,
            "free_shipping_applied": self.free_shipping_applied,
            "total": self.total,
        }


class ShippingSettingsService:
    def __init__(self, db: Session, store: ShippingChargeStore | None = None):
        self.db = db
        self.store = store or ShippingChargeStore(db)

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc).replace(tzinfo=None)

    def get_settings(self) -> ShippingSettings:
        row = self.db.get(ShippingSettings, SETTINGS_ROW_ID)
        if row is not None:
            return row
        row = ShippingSettings(
            id=SETTINGS_ROW_ID,
            enabled=False,
            free_shipping_threshold=Decimal("500.00"),
            expedited_shipping=True,
            international_shipping=False,
            shipping_insurance=False,
            tracking_updates=True,
            updated_at=self._now(),
        )
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row

    def update_settings(
        self, data: ShippingSettingsUpdate, current_user_email: str | None = None
    ) -> ShippingSettings:
        row = self.get_settings()
        patch = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        for key, value in patch.items():
            setattr(row, key, value)
        row.updated_at = self._now()
        if current_user_email:
            row.last_changed_by = current_user_email
        self.db.commit()
        self.db.refresh(row)
        flow_info(
            logger,
            "shipping_settings_updated fields=%s by=%s",
            sorted(patch.keys()),
            current_user_email or "-",
            category="shipping_settings",
        )
        return row

    def quote(
        self,
        country: str,
        region: str | None = None,
        order_total: Decimal | None = None,
        include_return: bool = False,
    ) -> ShippingQuote | None:
        charge = self.store.find_by_location(country, region)
        if charge is None:
            return None

        settings_row = self.get_settings()
        free_shipping = bool(
            settings_row.enabled
            and order_total is not None
            and order_total >= settings_row.free_shipping_threshold
        )
        return ShippingQuote(
            charge=charge,
            delivery_charge=ZERO if free_shipping else charge.delivery_charge,
            return_charge=charge.return_charge,
            include_return=include_return,
            free_shipping_applied=free_shipping,
        )
