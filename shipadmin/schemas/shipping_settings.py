from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from .base import BaseSchema


class ShippingSettingsUpdate(BaseModel):
    enabled: Optional[bool] = None
    free_shipping_threshold: Optional[Decimal] = Field(
        default=None, ge=0, max_digits=12, decimal_places=2
    )
    expedited_shipping: Optional[bool] = None
    international_shipping: Optional[bool] = None
    shipping_insurance: Optional[bool] = None
    tracking_updates: Optional[bool] = None


class ShippingSettingsOut(BaseSchema):
    enabled: bool
    free_shipping_threshold: Decimal
    expedited_shipping: bool
    international_shipping: bool
    shipping_insurance: bool
    tracking_updates: bool
    updated_at: datetime
    last_changed_by: str
