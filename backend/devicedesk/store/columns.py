"""Field-to-column mapping for each collection.

Rows written by older clients may carry camelCase keys while the current
schema uses snake_case. Each field lists its candidate column names in
priority order; decoding takes the first one present with a value. The first
candidate is the remote column name, the last one is the local storage key.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Tuple, Type

from pydantic import BaseModel

from .. import schemas

REMOTE = "remote"
LOCAL = "local"


@dataclass(frozen=True)
class ColumnMap:
    table: str
    local_key: str
    label: str
    entity: Type[BaseModel]
    fields: Dict[str, Tuple[str, ...]]
    # field -> table it references
    references: Dict[str, str] = field(default_factory=dict)

    def decode(self, row: Mapping[str, Any]) -> BaseModel:
        data: Dict[str, Any] = {}
        for name, candidates in self.fields.items():
            for column in candidates:
                value = row.get(column)
                if value is not None:
                    data[name] = value
                    break
        return self.entity.model_validate(data)

    def encode(self, entity: BaseModel, style: str) -> Dict[str, Any]:
        if style == LOCAL:
            values = entity.model_dump(mode="json")
            return {self.fields[name][-1]: value for name, value in values.items() if name in self.fields}
        values = entity.model_dump()
        return {
            self.fields[name][0]: value.value if isinstance(value, Enum) else value
            for name, value in values.items()
            if name in self.fields
        }


ORGANIZATIONS = ColumnMap(
    table="organizations",
    local_key="device_mgr_orgs",
    label="organization",
    entity=schemas.Organization,
    fields={
        "id": ("id",),
        "name": ("name",),
        "address": ("address",),
        "created_at": ("created_at", "createdAt"),
    },
)

CUSTOMERS = ColumnMap(
    table="customers",
    local_key="device_mgr_customers",
    label="customer",
    entity=schemas.Customer,
    fields={
        "id": ("id",),
        "full_name": ("full_name", "fullName"),
        "organization_id": ("organization_id", "organizationId"),
        "phone": ("phone",),
        "address": ("address",),
        "created_at": ("created_at", "createdAt"),
    },
    references={"organization_id": "organizations"},
)

TICKETS = ColumnMap(
    table="tickets",
    local_key="device_mgr_tickets",
    label="repair ticket",
    entity=schemas.RepairTicket,
    fields={
        "id": ("id",),
        "customer_id": ("customer_id", "customerId"),
        "device_type": ("device_type", "deviceType"),
        "serial_number": ("serial_number", "serialNumber"),
        "device_condition": ("device_condition", "deviceCondition"),
        "receive_date": ("receive_date", "receiveDate"),
        "status": ("status",),
        "return_date": ("return_date", "returnDate"),
        "return_note": ("return_note", "returnNote"),
        "shipping_method": ("shipping_method", "shippingMethod"),
        "tracking_number": ("tracking_number", "trackingNumber"),
        "created_at": ("created_at", "createdAt"),
        "updated_at": ("updated_at", "updatedAt"),
    },
    references={"customer_id": "customers"},
)

WARRANTIES = ColumnMap(
    table="warranties",
    local_key="device_mgr_warranties",
    label="warranty ticket",
    entity=schemas.WarrantyTicket,
    fields={
        "id": ("id",),
        "organization_id": ("organization_id", "organizationId"),
        "device_type": ("device_type", "deviceType"),
        "serial_number": ("serial_number", "serialNumber"),
        "description": ("description",),
        "sent_date": ("sent_date", "sentDate"),
        "status": ("status",),
        "return_date": ("return_date", "returnDate"),
        "cost": ("cost",),
        "note": ("note",),
        "shipping_method": ("shipping_method", "shippingMethod"),
        "tracking_number": ("tracking_number", "trackingNumber"),
        "created_at": ("created_at", "createdAt"),
        "updated_at": ("updated_at", "updatedAt"),
    },
    references={"organization_id": "organizations"},
)
