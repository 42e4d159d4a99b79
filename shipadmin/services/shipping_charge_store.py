from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shipadmin.core.flow_logging import flow_info
from shipadmin.models.shipping_charge import (
    COUNTRY_MAX_LENGTH,
    MAX_ESTIMATED_DAYS,
    MIN_ESTIMATED_DAYS,
    REGION_MAX_LENGTH,
    ShippingCharge,
    region_key_for,
)
from shipadmin.schemas.shipping_charge import ShippingChargeCreate, ShippingChargeUpdate

logger = logging.getLogger(__name__)

_ZONE_FIELDS = ("country", "region")
_MUTABLE_FIELDS = (
    "country",
    "region",
    "delivery_charge",
    "return_charge",
    "estimated_days",
    "is_active",
)

# Numeric(12, 2) columns
_CENT = Decimal("0.01")
_AMOUNT_LIMIT = Decimal("10000000000")
_ZONE_CONSTRAINT = "uq_shipping_charge_country_region"


class ShippingChargeValidationError(ValueError):
    """Raised when a shipping charge write would break a field bound."""


class DuplicateShippingZoneError(Exception):
    """Raised when a (country, region) pair is already configured."""


def normalize_country(country: str | None) -> str:
    return (country or "").strip()


def normalize_region(region: str | None) -> str | None:
    if region is None:
        return None
    return region.strip() or None


def get_total_shipping_cost(charge: ShippingCharge, include_return: bool = False) -> Decimal:
    return charge.get_total_shipping_cost(include_return=include_return)


def _as_amount(field: str, value: Any) -> Decimal:
    if value is None:
        raise ShippingChargeValidationError(f"{field} is required.")
    if isinstance(value, bool):
        raise ShippingChargeValidationError(f"{field} must be a number.")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ShippingChargeValidationError(f"{field} must be a number.") from exc
    if not amount.is_finite():
        raise ShippingChargeValidationError(f"{field} must be a finite number.")
    if amount < 0:
        raise ShippingChargeValidationError(f"{field} must be greater than or equal to 0.")
    if amount >= _AMOUNT_LIMIT:
        raise ShippingChargeValidationError(f"{field} must be less than {_AMOUNT_LIMIT}.")
    if amount != amount.quantize(_CENT):
        raise ShippingChargeValidationError(f"{field} must have at most 2 decimal places.")
    return amount.quantize(_CENT)


def _as_days(value: Any) -> int:
    if value is None:
        raise ShippingChargeValidationError("estimated_days is required.")
    if isinstance(value, bool) or not isinstance(value, int):
        raise ShippingChargeValidationError("estimated_days must be a whole number of days.")
    if value < MIN_ESTIMATED_DAYS or value > MAX_ESTIMATED_DAYS:
        raise ShippingChargeValidationError(
            f"estimated_days must be between {MIN_ESTIMATED_DAYS} and {MAX_ESTIMATED_DAYS}."
        )
    return value


def validate_shipping_charge_values(values: dict[str, Any]) -> dict[str, Any]:
    """
    Normalise and check a full set of shipping charge values.

    Returns a cleaned copy; raises ShippingChargeValidationError on the first
    violated bound.
    """
    raw_country = values.get("country")
    if raw_country is not None and not isinstance(raw_country, str):
        raise ShippingChargeValidationError("country must be text.")
    country = normalize_country(raw_country)
    if not country:
        raise ShippingChargeValidationError("country is required.")
    if len(country) > COUNTRY_MAX_LENGTH:
        raise ShippingChargeValidationError(
            f"country must be at most {COUNTRY_MAX_LENGTH} characters."
        )

    raw_region = values.get("region")
    if raw_region is not None and not isinstance(raw_region, str):
        raise ShippingChargeValidationError("region must be text.")
    region = normalize_region(raw_region)
    if region is not None and len(region) > REGION_MAX_LENGTH:
        raise ShippingChargeValidationError(
            f"region must be at most {REGION_MAX_LENGTH} characters."
        )

    is_active = values.get("is_active", True)
    return {
        "country": country,
        "region": region,
        "delivery_charge": _as_amount("delivery_charge", values.get("delivery_charge")),
        "return_charge": _as_amount("return_charge", values.get("return_charge")),
        "estimated_days": _as_days(values.get("estimated_days")),
        "is_active": True if is_active is None else bool(is_active),
    }


class ShippingChargeStore:
    """
    Persistence for shipping zones over an explicitly supplied session.

    Every write path stamps `updated_at` itself and commits; integrity errors
    are rolled back and surfaced as DuplicateShippingZoneError for the zone
    unique constraint, ShippingChargeValidationError otherwise.
    """

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc).replace(tzinfo=None)

    # ---- reads -------------------------------------------------------------

    def get(self, charge_id: int) -> ShippingCharge | None:
        return self.db.get(ShippingCharge, charge_id)

    def get_by_zone(self, country: str, region: str | None) -> ShippingCharge | None:
        """Active or inactive row for an already-normalised (country, region)."""
        stmt = select(ShippingCharge).where(
            ShippingCharge.country == country,
            ShippingCharge.region_key == region_key_for(region),
        )
        return self.db.execute(stmt).scalars().first()

    def find_by_location(self, country: str, region: str | None = None) -> ShippingCharge | None:
        country = normalize_country(country)
        region = normalize_region(region)
        if not country:
            return None
        stmt = select(ShippingCharge).where(
            ShippingCharge.country == country,
            ShippingCharge.region_key == region_key_for(region),
            ShippingCharge.is_active.is_(True),
        )
        return self.db.execute(stmt).scalars().first()

    def _filtered(self, stmt, country: str | None, is_active: bool | None):
        if country is not None:
            stmt = stmt.where(ShippingCharge.country == normalize_country(country))
        if is_active is not None:
            stmt = stmt.where(ShippingCharge.is_active == is_active)
        return stmt

    def list_charges(
        self,
        skip: int = 0,
        limit: int = 50,
        country: str | None = None,
        is_active: bool | None = None,
    ) -> list[ShippingCharge]:
        stmt = select(ShippingCharge).order_by(
            ShippingCharge.country.asc(),
            ShippingCharge.region_key.asc(),
            ShippingCharge.id.asc(),
        )
        stmt = self._filtered(stmt, country, is_active).offset(skip).limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def count_charges(self, country: str | None = None, is_active: bool | None = None) -> int:
        stmt = self._filtered(select(func.count(ShippingCharge.id)), country, is_active)
        return int(self.db.execute(stmt).scalar_one())

    # ---- writes ------------------------------------------------------------

    def _commit(self, message: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            detail = str(e.orig)
            # sqlite reports the columns, postgres the constraint name
            if _ZONE_CONSTRAINT in detail or "shipping_charge.region_key" in detail:
                raise DuplicateShippingZoneError(message) from e
            logger.warning("shipping_charge_integrity_error detail=%s", detail)
            raise ShippingChargeValidationError(
                "Shipping charge violates a database constraint."
            ) from e

    def create(
        self, data: ShippingChargeCreate, current_user_email: str = "system@local"
    ) -> ShippingCharge:
        values = validate_shipping_charge_values(data.model_dump())
        zone = f"{values['country']}/{values['region'] or '*'}"

        existing = self.get_by_zone(values["country"], values["region"])
        if existing:
            if existing.is_active:
                logger.warning("shipping_charge_duplicate zone=%s existing_id=%s", zone, existing.id)
                raise DuplicateShippingZoneError(
                    "Shipping charge for this country and region already exists."
                )
            # Re-creating a deactivated zone revives the original row with the submitted values.
            for key, value in values.items():
                setattr(existing, key, value)
            existing.updated_at = self._now()
            existing.last_changed_by = current_user_email
            self._commit("Shipping charge for this country and region already exists.")
            self.db.refresh(existing)
            flow_info(
                logger,
                "shipping_charge_reactivated id=%s zone=%s by=%s",
                existing.id,
                zone,
                current_user_email,
                category="shipping_charge",
            )
            return existing

        now = self._now()
        obj = ShippingCharge(
            **values,
            region_key=region_key_for(values["region"]),
            created_at=now,
            updated_at=now,
            created_by=current_user_email,
            last_changed_by=current_user_email,
        )
        self.db.add(obj)
        self._commit("Shipping charge for this country and region already exists.")
        self.db.refresh(obj)
        flow_info(
            logger,
            "shipping_charge_created id=%s zone=%s delivery=%s return=%s days=%s by=%s",
            obj.id,
            zone,
            obj.delivery_charge,
            obj.return_charge,
            obj.estimated_days,
            current_user_email,
            category="shipping_charge",
        )
        return obj

    def update(
        self,
        charge_id: int,
        data: ShippingChargeUpdate,
        current_user_email: str | None = None,
    ) -> ShippingCharge | None:
        obj = self.get(charge_id)
        if not obj:
            return None

        patch = data.model_dump(exclude_unset=True)
        if patch.get("is_active", False) is None:
            patch.pop("is_active")
        merged = {field: getattr(obj, field) for field in _MUTABLE_FIELDS}
        merged.update(patch)
        values = validate_shipping_charge_values(merged)

        if any(field in patch for field in _ZONE_FIELDS):
            clash = self.get_by_zone(values["country"], values["region"])
            if clash is not None and clash.id != obj.id:
                logger.warning(
                    "shipping_charge_update_duplicate id=%s clashes_with=%s",
                    obj.id,
                    clash.id,
                )
                raise DuplicateShippingZoneError(
                    "Shipping charge for this country and region already exists."
                )

        for key, value in values.items():
            setattr(obj, key, value)
        obj.region_key = region_key_for(values["region"])
        obj.updated_at = self._now()
        if current_user_email:
            obj.last_changed_by = current_user_email

        self._commit("Update violates unique constraint.")
        self.db.refresh(obj)
        flow_info(
            logger,
            "shipping_charge_updated id=%s fields=%s by=%s",
            obj.id,
            sorted(patch.keys()),
            current_user_email or "-",
            category="shipping_charge",
        )
        return obj

    def deactivate(
        self, charge_id: int, mode: str = "soft", current_user_email: str | None = None
    ) -> bool:
        obj = self.get(charge_id)
        if not obj:
            return False

        if mode == "hard":
            self.db.delete(obj)
            self.db.commit()
            flow_info(
                logger,
                "shipping_charge_deleted id=%s mode=hard by=%s",
                charge_id,
                current_user_email or "-",
                category="shipping_charge",
            )
            return True

        obj.is_active = False
        obj.updated_at = self._now()
        if current_user_email:
            obj.last_changed_by = current_user_email
        self.db.commit()
        flow_info(
            logger,
            "shipping_charge_deleted id=%s mode=soft by=%s",
            charge_id,
            current_user_email or "-",
            category="shipping_charge",
        )
        return True
