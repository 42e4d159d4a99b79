from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from shipadmin.db.base import Base
from shipadmin.models.mixins import AuditMixin

COUNTRY_MAX_LENGTH = 100
REGION_MAX_LENGTH = 100
MIN_ESTIMATED_DAYS = 1
MAX_ESTIMATED_DAYS = 365


def region_key_for(region: str | None) -> str:
    return region or ""


class ShippingCharge(AuditMixin, Base):
    """
    Delivery pricing for one shipping zone.

    A zone is a (country, region) pair; a null region is the country-wide
    default. `region_key` mirrors `region` with "" in place of null so the
    unique constraint also covers the country-wide row.
    """

    __tablename__ = "shipping_charge"

    __table_args__ = (
        UniqueConstraint("country", "region_key", name="uq_shipping_charge_country_region"),
        CheckConstraint("delivery_charge >= 0", name="ck_shipping_charge_delivery_non_negative"),
        CheckConstraint("return_charge >= 0", name="ck_shipping_charge_return_non_negative"),
        CheckConstraint(
            f"estimated_days BETWEEN {MIN_ESTIMATED_DAYS} AND {MAX_ESTIMATED_DAYS}",
            name="ck_shipping_charge_estimated_days_range",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    country: Mapped[str] = mapped_column(String(COUNTRY_MAX_LENGTH), nullable=False, index=True)
    region: Mapped[str | None] = mapped_column(String(REGION_MAX_LENGTH), nullable=True)
    region_key: Mapped[str] = mapped_column(
        String(REGION_MAX_LENGTH), nullable=False, default="", server_default=""
    )

    delivery_charge: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    return_charge: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    estimated_days: Mapped[int] = mapped_column(Integer, nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    @property
    def display_name(self) -> str:
        return f"{self.country} - {self.region}" if self.region else self.country

    def get_total_shipping_cost(self, include_return: bool = False) -> Decimal:
        if include_return:
            return self.delivery_charge + self.return_charge
        return self.delivery_charge

    def __repr__(self) -> str:
        return f"<ShippingCharge id={self.id} zone={self.display_name!r} active={self.is_active}>"
