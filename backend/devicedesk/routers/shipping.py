"""Carrier tracking lookups."""

from fastapi import APIRouter, Depends, Query, Request

from .. import schemas
from ..constants import ShippingMethod
from ..services.shipping import is_trackable, track
from ..session import require_session

router = APIRouter(prefix="/shipping", tags=["Shipping"], dependencies=[Depends(require_session)])


@router.get("/track", response_model=schemas.TrackingOut)
def track_shipment(
    request: Request,
    carrier: ShippingMethod = Query(...),
    code: str = Query("", max_length=64),
):
    code = code.strip()
    if not is_trackable(carrier) or not code:
        return schemas.TrackingOut(trackable=is_trackable(carrier), tracking_number=code)
    info = track(carrier, code, delay=request.app.state.settings.tracking_delay_seconds)
    return schemas.TrackingOut(trackable=True, tracking_number=code, info=info)
