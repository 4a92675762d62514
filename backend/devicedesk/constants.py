"""Enumerations shared by the store, services and routers."""

from enum import Enum


class DeviceType(str, Enum):
    CODEC = "Codec"
    MIC = "Mic"
    CAMERA = "Camera"
    SOURCE = "Source/Power"
    CONTROL = "Control"
    OTHER = "Other"


class ShippingMethod(str, Enum):
    VIETTEL_POST = "Viettel Post"
    GHN = "Giao Hang Nhanh"
    GHTK = "Giao Hang Tiet Kiem"
    TAXI = "Taxi"
    BUS = "Bus"
    DIRECT = "Direct"


class RepairStatus(str, Enum):
    RECEIVED = "Received"
    PROCESSING = "Processing"
    RETURNED = "Returned"


class WarrantyStatus(str, Enum):
    SENT = "Sent"
    FIXING = "Fixing"
    DONE = "Done"
    CANNOT_FIX = "Cannot-Fix"


TRACKABLE_CARRIERS = frozenset({ShippingMethod.VIETTEL_POST, ShippingMethod.GHN, ShippingMethod.GHTK})

OFFLINE_SESSION_KEY = "device_mgr_offline_session"
