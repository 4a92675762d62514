"""Pydantic schemas for entities and request/response bodies."""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import DeviceType, RepairStatus, ShippingMethod, WarrantyStatus

T = TypeVar("T")


class Entity(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime

    @field_validator("created_at", "updated_at", check_fields=False)
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # SQLite hands back naive datetimes even for timezone-aware columns.
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class Organization(Entity):
    name: str
    address: str = ""


class Customer(Entity):
    full_name: str
    organization_id: str
    phone: str = ""
    address: str = ""


class RepairTicket(Entity):
    customer_id: str
    device_type: DeviceType
    serial_number: Optional[str] = None
    device_condition: str = ""
    receive_date: date
    status: RepairStatus = RepairStatus.RECEIVED
    return_date: Optional[date] = None
    return_note: Optional[str] = None
    shipping_method: Optional[ShippingMethod] = None
    tracking_number: Optional[str] = None
    updated_at: datetime


class WarrantyTicket(Entity):
    organization_id: str
    device_type: DeviceType
    serial_number: Optional[str] = None
    description: str = ""
    sent_date: date
    status: WarrantyStatus = WarrantyStatus.SENT
    return_date: Optional[date] = None
    cost: Optional[Decimal] = None
    note: Optional[str] = None
    shipping_method: Optional[ShippingMethod] = None
    tracking_number: Optional[str] = None
    updated_at: datetime


# Form payloads. Mandatory fields are checked by the lifecycle rules so the
# client gets one readable message instead of a field-by-field 422.


class OrganizationIn(BaseModel):
    name: Optional[str] = Field(None, max_length=200, description="Organization name")
    address: Optional[str] = None


class CustomerIn(BaseModel):
    full_name: Optional[str] = Field(None, max_length=200)
    organization_id: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=32)
    address: Optional[str] = None


class RepairTicketIn(BaseModel):
    customer_id: Optional[str] = None
    device_type: Optional[DeviceType] = None
    serial_number: Optional[str] = Field(None, max_length=64)
    device_condition: Optional[str] = None
    receive_date: Optional[date] = None
    status: Optional[RepairStatus] = None
    return_date: Optional[date] = None
    return_note: Optional[str] = None
    shipping_method: Optional[ShippingMethod] = None
    tracking_number: Optional[str] = Field(None, max_length=64)
    new_customer: Optional[CustomerIn] = Field(None, description="Create this customer first and attach the ticket to it")


class WarrantyTicketIn(BaseModel):
    organization_id: Optional[str] = None
    device_type: Optional[DeviceType] = None
    serial_number: Optional[str] = Field(None, max_length=64)
    description: Optional[str] = None
    sent_date: Optional[date] = None
    status: Optional[WarrantyStatus] = None
    return_date: Optional[date] = None
    cost: Optional[Decimal] = Field(None, ge=0)
    note: Optional[str] = None
    shipping_method: Optional[ShippingMethod] = None
    tracking_number: Optional[str] = Field(None, max_length=64)


class Page(BaseModel, Generic[T]):
    total: int
    page: int
    pages: int
    items: List[T]


class HistoryOut(BaseModel):
    title: str
    tickets: List[RepairTicket]


class LabelCount(BaseModel):
    label: str
    count: int


class DeviceTypeStat(BaseModel):
    name: str
    count: int
    percent: float
    level: str = Field(..., description="safe, warning or critical")
    recommendation: str


class RecentTicket(BaseModel):
    id: str
    customer_name: str
    organization_name: str
    device_type: DeviceType
    status: RepairStatus
    receive_date: date


class DashboardOut(BaseModel):
    total: int
    by_status: List[LabelCount]
    completion_rate: float
    by_device: List[LabelCount]
    recent: List[RecentTicket]
    warranty_by_status: List[LabelCount]


class FailureStatsOut(BaseModel):
    total: int
    most_failing: Optional[DeviceTypeStat] = None
    most_reliable: Optional[DeviceTypeStat] = None
    breakdown: List[DeviceTypeStat]


class ShipmentStep(BaseModel):
    status: str
    location: str
    time: str
    description: str


class ShipmentInfo(BaseModel):
    carrier: ShippingMethod
    tracking_number: str
    current_status: str
    last_update: str
    steps: List[ShipmentStep]


class TrackingOut(BaseModel):
    trackable: bool
    tracking_number: str
    info: Optional[ShipmentInfo] = None


class SessionIn(BaseModel):
    email: str = Field(..., min_length=3, max_length=200)


class SessionOut(BaseModel):
    authenticated: bool
    offline: bool
    email: Optional[str] = None
    signed_in_at: Optional[datetime] = None
