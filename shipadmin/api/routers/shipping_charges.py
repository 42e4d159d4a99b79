from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from shipadmin.api.deps.request_identity import get_request_email, get_request_identity
from shipadmin.core.config import settings
from shipadmin.db.session import get_db
from shipadmin.schemas.shipping_charge import (
    ShippingChargeCreate,
    ShippingChargeOut,
    ShippingChargeUpdate,
    ShippingQuoteOut,
)
from shipadmin.services.shipping_charge_store import (
    DuplicateShippingZoneError,
    ShippingChargeStore,
    ShippingChargeValidationError,
)
from shipadmin.services.shipping_export_service import export_shipping_charges
from shipadmin.services.shipping_settings_service import ShippingSettingsService

router = APIRouter(
    prefix="/shipping/charges",
    tags=["shipping-charges"],
    dependencies=[Depends(get_request_identity)],
)


def _get_store(db: Session = Depends(get_db)) -> ShippingChargeStore:
    return ShippingChargeStore(db)


@router.post("", response_model=ShippingChargeOut, status_code=status.HTTP_201_CREATED)
def create_shipping_charge_api(
    payload: ShippingChargeCreate,
    request: Request,
    store: ShippingChargeStore = Depends(_get_store),
):
    user_email = get_request_email(request)
    try:
        return store.create(payload, current_user_email=user_email)
    except DuplicateShippingZoneError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ShippingChargeValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.get("", response_model=list[ShippingChargeOut])
def list_shipping_charges_api(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=500),
    country: str | None = Query(None, max_length=100),
    is_active: bool | None = Query(None),
    store: ShippingChargeStore = Depends(_get_store),
):
    return store.list_charges(skip=skip, limit=limit, country=country, is_active=is_active)


@router.get("/paged/list")
def list_shipping_charges_paged_api(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=500),
    country: str | None = Query(None, max_length=100),
    is_active: bool | None = Query(None),
    store: ShippingChargeStore = Depends(_get_store),
):
    items = store.list_charges(skip=skip, limit=limit, country=country, is_active=is_active)
    total = store.count_charges(country=country, is_active=is_active)
    return {
        "items": [
            ShippingChargeOut.model_validate(item).model_dump(mode="json")
            for item in items
        ],
        "total": total,
        "skip": skip,
        "limit": limit,
    }


@router.get("/lookup", response_model=ShippingChargeOut)
def lookup_shipping_charge_api(
    country: str = Query(..., min_length=1, max_length=100),
    region: str | None = Query(None, max_length=100),
    store: ShippingChargeStore = Depends(_get_store),
):
    obj = store.find_by_location(country, region)
    if not obj:
        raise HTTPException(status_code=404, detail="Shipping charge not found for this location")
    return obj


@router.get("/quote", response_model=ShippingQuoteOut)
def quote_shipping_charge_api(
    country: str = Query(..., min_length=1, max_length=100),
    region: str | None = Query(None, max_length=100),
    order_total: Decimal | None = Query(None, ge=0),
    include_return: bool = Query(False),
    db: Session = Depends(get_db),
):
    quote = ShippingSettingsService(db).quote(
        country,
        region,
        order_total=order_total,
        include_return=include_return,
    )
    if quote is None:
        raise HTTPException(status_code=404, detail="Shipping charge not found for this location")
    return quote.to_payload()


@router.get("/export")
def export_shipping_charges_api(
    is_active: bool | None = Query(None),
    store: ShippingChargeStore = Depends(_get_store),
):
    charges = store.list_charges(
        skip=0,
        limit=max(1, settings.SHIPPING_EXPORT_MAX_ROWS),
        is_active=is_active,
    )
    return export_shipping_charges(charges)


@router.get("/{charge_id}", response_model=ShippingChargeOut)
def get_shipping_charge_api(charge_id: int, store: ShippingChargeStore = Depends(_get_store)):
    obj = store.get(charge_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Shipping charge not found")
    return obj


@router.patch("/{charge_id}", response_model=ShippingChargeOut)
def update_shipping_charge_api(
    charge_id: int,
    payload: ShippingChargeUpdate,
    request: Request,
    store: ShippingChargeStore = Depends(_get_store),
):
    user_email = get_request_email(request)
    try:
        obj = store.update(charge_id, payload, current_user_email=user_email)
    except DuplicateShippingZoneError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ShippingChargeValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if not obj:
        raise HTTPException(status_code=404, detail="Shipping charge not found")
    return obj


@router.put("/{charge_id}", response_model=ShippingChargeOut)
def update_shipping_charge_put_api(
    charge_id: int,
    payload: ShippingChargeUpdate,
    request: Request,
    store: ShippingChargeStore = Depends(_get_store),
):
    return update_shipping_charge_api(charge_id, payload, request, store)


@router.delete("/{charge_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_shipping_charge_api(
    charge_id: int,
    request: Request,
    mode: str = Query("soft", pattern="^(soft|hard)$"),
    store: ShippingChargeStore = Depends(_get_store),
):
    user_email = get_request_email(request)
    ok = store.deactivate(charge_id, mode=mode, current_user_email=user_email)
    if not ok:
        raise HTTPException(status_code=404, detail="Shipping charge not found")
    return None
