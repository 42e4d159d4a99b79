"""create_shipping_charge

Revision ID: 3e1a9c7b2d40
Revises:
Create Date: 2026-10-12 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3e1a9c7b2d40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "shipping_charge",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("country", sa.String(length=100), nullable=False),
        sa.Column("region", sa.String(length=100), nullable=True),
        sa.Column("region_key", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("delivery_charge", sa.Numeric(12, 2), nullable=False),
        sa.Column("return_charge", sa.Numeric(12, 2), nullable=False),
        sa.Column("estimated_days", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("created_by", sa.String(length=255), nullable=False, server_default=sa.text("'system@local'")),
        sa.Column("last_changed_by", sa.String(length=255), nullable=False, server_default=sa.text("'system@local'")),
        sa.UniqueConstraint("country", "region_key", name="uq_shipping_charge_country_region"),
        sa.CheckConstraint("delivery_charge >= 0", name="ck_shipping_charge_delivery_non_negative"),
        sa.CheckConstraint("return_charge >= 0", name="ck_shipping_charge_return_non_negative"),
        sa.CheckConstraint(
            "estimated_days BETWEEN 1 AND 365",
            name="ck_shipping_charge_estimated_days_range",
        ),
    )
    op.create_index("ix_shipping_charge_country", "shipping_charge", ["country"])
    op.create_index("ix_shipping_charge_is_active", "shipping_charge", ["is_active"])


def downgrade() -> None:
    op.drop_index("ix_shipping_charge_is_active", table_name="shipping_charge")
    op.drop_index("ix_shipping_charge_country", table_name="shipping_charge")
    op.drop_table("shipping_charge")
