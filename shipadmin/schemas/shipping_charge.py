from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from shipadmin.models.shipping_charge import (
    COUNTRY_MAX_LENGTH,
    MAX_ESTIMATED_DAYS,
    MIN_ESTIMATED_DAYS,
    REGION_MAX_LENGTH,
)

from .base import BaseSchema


def _strip_text(value):
    if isinstance(value, str):
        return value.strip()
    return value


def _blank_to_none(value):
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _quantize_amount(value):
    if value is None:
        return value
    try:
        dec = value if isinstance(value, Decimal) else Decimal(str(value))
        return dec.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    except Exception:
        # Leave unparseable input for the field's own validation error.
        return value


class ShippingChargeBase(BaseModel):
    country: str = Field(min_length=1, max_length=COUNTRY_MAX_LENGTH)
    region: Optional[str] = Field(default=None, max_length=REGION_MAX_LENGTH)
    delivery_charge: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    return_charge: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    estimated_days: int = Field(ge=MIN_ESTIMATED_DAYS, le=MAX_ESTIMATED_DAYS)
    is_active: bool = True

    @field_validator("country", mode="before")
    @classmethod
    def _trim_country(cls, value):
        return _strip_text(value)

    @field_validator("region", mode="before")
    @classmethod
    def _normalize_region(cls, value):
        return _blank_to_none(value)

    @field_validator("delivery_charge", "return_charge", mode="before")
    @classmethod
    def _quantize(cls, value):
        return _quantize_amount(value)


class ShippingChargeCreate(ShippingChargeBase):
    pass


class ShippingChargeUpdate(BaseModel):
    country: Optional[str] = Field(default=None, min_length=1, max_length=COUNTRY_MAX_LENGTH)
    region: Optional[str] = Field(default=None, max_length=REGION_MAX_LENGTH)
    delivery_charge: Optional[Decimal] = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    return_charge: Optional[Decimal] = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    estimated_days: Optional[int] = Field(default=None, ge=MIN_ESTIMATED_DAYS, le=MAX_ESTIMATED_DAYS)
    is_active: Optional[bool] = None

    @field_validator("country", mode="before")
    @classmethod
    def _trim_country(cls, value):
        return _strip_text(value)

    @field_validator("region", mode="before")
    @classmethod
    def _normalize_region(cls, value):
        return _blank_to_none(value)

    @field_validator("delivery_charge", "return_charge", mode="before")
    @classmethod
    def _quantize(cls, value):
        return _quantize_amount(value)


class ShippingChargeOut(ShippingChargeBase, BaseSchema):
    id: int
    display_name: str
    created_at: datetime
    updated_at: datetime
    created_by: str
    last_changed_by: str


class ShippingQuoteOut(BaseModel):
    charge_id: int
    display_name: str
    delivery_charge: Decimal
    return_charge: Decimal
    estimated_days: int
    include_return: bool
    free_shipping_applied: bool
    total: Decimal
