from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from shipadmin.api.deps.request_identity import get_request_email, get_request_identity
from shipadmin.db.session import get_db
from shipadmin.schemas.shipping_settings import ShippingSettingsOut, ShippingSettingsUpdate
from shipadmin.services.shipping_settings_service import ShippingSettingsService

router = APIRouter(
    prefix="/shipping/settings",
    tags=["shipping-settings"],
    dependencies=[Depends(get_request_identity)],
)


@router.get("", response_model=ShippingSettingsOut)
def get_shipping_settings_api(db: Session = Depends(get_db)):
    return ShippingSettingsService(db).get_settings()


@router.put("", response_model=ShippingSettingsOut)
def update_shipping_settings_api(
    payload: ShippingSettingsUpdate,
    request: Request,
    db: Session = Depends(get_db),
):
    user_email = get_request_email(request)
    return ShippingSettingsService(db).update_settings(payload, current_user_email=user_email)
