"""create_shipping_settings

Revision ID: 7b4d2f6e8a13
Revises: 3e1a9c7b2d40
Create Date: 2026-10-12 00:10:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '7b4d2f6e8a13'
down_revision: Union[str, Sequence[str], None] = '3e1a9c7b2d40'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "shipping_settings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("enabled", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("free_shipping_threshold", sa.Numeric(12, 2), nullable=False, server_default=sa.text("500.00")),
        sa.Column("expedited_shipping", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("international_shipping", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("shipping_insurance", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("tracking_updates", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("last_changed_by", sa.String(length=255), nullable=False, server_default=sa.text("'system@local'")),
        sa.CheckConstraint("free_shipping_threshold >= 0", name="ck_shipping_settings_threshold_non_negative"),
    )


def downgrade() -> None:
    op.drop_table("shipping_settings")
