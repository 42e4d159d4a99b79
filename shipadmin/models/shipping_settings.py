from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, DateTime, Numeric, String, text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from shipadmin.db.base import Base

SETTINGS_ROW_ID = 1


class ShippingSettings(Base):
    """Store-wide shipping switches. Exactly one row (id=1)."""

    __tablename__ = "shipping_settings"

    __table_args__ = (
        CheckConstraint("free_shipping_threshold >= 0", name="ck_shipping_settings_threshold_non_negative"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    free_shipping_threshold: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("500.00")
    )
    expedited_shipping: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    international_shipping: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    shipping_insurance: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    tracking_updates: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        nullable=False,
    )
    last_changed_by: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="system@local",
        server_default=text("'system@local'"),
    )
