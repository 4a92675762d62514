"""Save rules for organizations, customers and tickets.

Status values are a free selector: any status can be set from any other. What
the rules enforce is field presence. Mandatory fields are checked before the
store is touched, so a rejected save never leaves a partial write behind.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from ..constants import RepairStatus, WarrantyStatus
from ..errors import StoreWriteError, TicketValidationError
from ..schemas import (
    Customer,
    CustomerIn,
    Organization,
    OrganizationIn,
    RepairTicket,
    RepairTicketIn,
    WarrantyTicket,
    WarrantyTicketIn,
)
from ..store import EntityStore

logger = logging.getLogger(__name__)

DEFAULT_DEVICE_CONDITION = "Normal"


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _missing(payload, fields) -> list:
    return [name for name in fields if _blank(getattr(payload, name))]


# --- Validation ---


def validate_organization(payload: OrganizationIn) -> None:
    if _missing(payload, ("name",)):
        raise TicketValidationError("Please enter the organization name", ["name"])


def validate_customer(payload: CustomerIn) -> None:
    missing = _missing(payload, ("full_name", "organization_id"))
    if missing:
        raise TicketValidationError("Please enter the customer name and choose an organization", missing)


def validate_repair_ticket(payload: RepairTicketIn, with_new_customer: bool = False) -> None:
    required = ("device_type", "receive_date") if with_new_customer else ("customer_id", "device_type", "receive_date")
    missing = _missing(payload, required)
    if missing:
        raise TicketValidationError("Please fill in all required fields: customer, device type and receive date", missing)

    if with_new_customer:
        validate_customer(payload.new_customer)

    if payload.status == RepairStatus.RETURNED:
        missing = _missing(payload, ("return_date", "shipping_method"))
        if missing:
            raise TicketValidationError(
                "A returned ticket needs a return date and a shipping method", missing
            )


def validate_warranty_ticket(payload: WarrantyTicketIn) -> None:
    # Done and Cannot-Fix add no mandatory fields, unlike a returned repair ticket.
    missing = _missing(payload, ("organization_id", "device_type", "sent_date"))
    if missing:
        raise TicketValidationError(
            "Please fill in all required fields: organization, device type and sent date", missing
        )


# --- Saves ---


def _existing(collection, entity_id: str):
    return collection.require(entity_id, f"update {collection.label}")


def save_organization(store: EntityStore, payload: OrganizationIn, organization_id: Optional[str] = None) -> Organization:
    validate_organization(payload)
    created_at = _existing(store.organizations, organization_id).created_at if organization_id else utcnow()
    organization = Organization(
        id=organization_id or new_id(),
        name=payload.name.strip(),
        address=payload.address or "",
        created_at=created_at,
    )
    if organization_id:
        store.organizations.update(organization)
    else:
        store.organizations.add(organization)
    return organization


def save_customer(store: EntityStore, payload: CustomerIn, customer_id: Optional[str] = None) -> Customer:
    validate_customer(payload)
    created_at = _existing(store.customers, customer_id).created_at if customer_id else utcnow()
    customer = Customer(
        id=customer_id or new_id(),
        full_name=payload.full_name.strip(),
        organization_id=payload.organization_id,
        phone=payload.phone or "",
        address=payload.address or "",
        created_at=created_at,
    )
    if customer_id:
        store.customers.update(customer)
    else:
        store.customers.add(customer)
    return customer


def save_repair_ticket(store: EntityStore, payload: RepairTicketIn, ticket_id: Optional[str] = None) -> RepairTicket:
    """
    Create or replace a repair ticket.

    A new ticket may carry ``new_customer``: that customer is stored first and
    the ticket points at it. If the customer cannot be stored the ticket is not
    saved; if the ticket cannot be stored the customer is removed again.
    """
    with_new_customer = ticket_id is None and payload.new_customer is not None
    validate_repair_ticket(payload, with_new_customer)

    now = utcnow()
    created_at = _existing(store.tickets, ticket_id).created_at if ticket_id else now

    customer_id = payload.customer_id
    created_customer = None
    if with_new_customer:
        created_customer = save_customer(store, payload.new_customer)
        customer_id = created_customer.id

    ticket = RepairTicket(
        id=ticket_id or new_id(),
        customer_id=customer_id,
        device_type=payload.device_type,
        serial_number=payload.serial_number or None,
        device_condition=payload.device_condition or DEFAULT_DEVICE_CONDITION,
        receive_date=payload.receive_date,
        status=payload.status or RepairStatus.RECEIVED,
        return_date=payload.return_date,
        return_note=payload.return_note,
        shipping_method=payload.shipping_method,
        tracking_number=payload.tracking_number or None,
        created_at=created_at,
        updated_at=now,
    )

    if ticket_id:
        store.tickets.update(ticket)
        return ticket

    try:
        store.tickets.add(ticket)
    except StoreWriteError:
        if created_customer is not None:
            _discard_customer(store, created_customer)
        raise
    return ticket


def _discard_customer(store: EntityStore, customer: Customer) -> None:
    try:
        store.customers.delete(customer.id)
    except StoreWriteError:
        logger.exception("Could not remove customer %s after the ticket save failed", customer.id)


def save_warranty_ticket(
    store: EntityStore, payload: WarrantyTicketIn, ticket_id: Optional[str] = None
) -> WarrantyTicket:
    validate_warranty_ticket(payload)

    now = utcnow()
    created_at = _existing(store.warranties, ticket_id).created_at if ticket_id else now
    ticket = WarrantyTicket(
        id=ticket_id or new_id(),
        organization_id=payload.organization_id,
        device_type=payload.device_type,
        serial_number=payload.serial_number or None,
        description=payload.description or "",
        sent_date=payload.sent_date,
        status=payload.status or WarrantyStatus.SENT,
        return_date=payload.return_date,
        cost=payload.cost,
        note=payload.note,
        shipping_method=payload.shipping_method,
        tracking_number=payload.tracking_number or None,
        created_at=created_at,
        updated_at=now,
    )
    if ticket_id:
        store.warranties.update(ticket)
    else:
        store.warranties.add(ticket)
    return ticket
