# Import all models so they register themselves on Base.metadata
# (Alembic autogenerate and the test fixtures rely on this).
from shipadmin.db.base import Base  # noqa: F401
from shipadmin.models.shipping_charge import ShippingCharge  # noqa: F401
from shipadmin.models.shipping_settings import ShippingSettings  # noqa: F401
