"""Carrier tracking stub.

Real carrier APIs need keys and a proxy, so the lookup synthesizes a history
from the tracking code: codes longer than five characters are in transit and
codes containing "done" are delivered.
"""

from __future__ import annotations

import time
from typing import Optional

from ..config import get_settings
from ..constants import TRACKABLE_CARRIERS, ShippingMethod
from ..schemas import ShipmentInfo, ShipmentStep

RECEIVED_STEP = ShipmentStep(
    status="Received at origin",
    location="Origin post office",
    time="2024-03-20 09:00",
    description="The post office accepted the parcel from the sender",
)
IN_TRANSIT_STEP = ShipmentStep(
    status="In transit",
    location="Regional sorting hub",
    time="2024-03-20 14:30",
    description="Leaving the sorting hub",
)
DELIVERED_STEP = ShipmentStep(
    status="Delivered",
    location="Recipient address",
    time="2024-03-21 10:15",
    description="The recipient signed for the parcel",
)


def is_trackable(carrier: Optional[ShippingMethod]) -> bool:
    return carrier in TRACKABLE_CARRIERS


def track(carrier: ShippingMethod, tracking_number: str, delay: Optional[float] = None) -> Optional[ShipmentInfo]:
    if not tracking_number:
        return None

    if delay is None:
        delay = get_settings().tracking_delay_seconds
    if delay > 0:
        time.sleep(delay)

    steps = [RECEIVED_STEP]
    if len(tracking_number) > 5:
        steps.append(IN_TRANSIT_STEP)
    if "done" in tracking_number.lower():
        steps.append(DELIVERED_STEP)

    last_step = steps[-1]
    return ShipmentInfo(
        carrier=carrier,
        tracking_number=tracking_number,
        current_status=last_step.status,
        last_update=last_step.time,
        steps=list(reversed(steps)),
    )
