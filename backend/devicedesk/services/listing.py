"""Search, status filters and page slicing for the list pages."""

from __future__ import annotations

import math
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

from ..schemas import Customer, Organization, Page, RepairTicket, WarrantyTicket
from .views import NameResolver

T = TypeVar("T")


def _matches(term: str, *values: Optional[str]) -> bool:
    return any(value and term in value.lower() for value in values)


def _search(items: Iterable[T], search: Optional[str], fields: Callable[[T], Sequence[Optional[str]]]) -> List[T]:
    term = (search or "").strip().lower()
    if not term:
        return list(items)
    return [item for item in items if _matches(term, *fields(item))]


def _status(items: Iterable[T], status: Optional[str]) -> List[T]:
    if not status or status == "ALL":
        return list(items)
    return [item for item in items if item.status.value == status]


def filter_repair_tickets(
    tickets: Iterable[RepairTicket], resolver: NameResolver, search: Optional[str] = None, status: Optional[str] = None
) -> List[RepairTicket]:
    def fields(ticket: RepairTicket):
        customer = resolver.customer(ticket.customer_id)
        return (
            customer.full_name if customer else None,
            resolver.organization_for_customer(ticket.customer_id),
            ticket.serial_number,
        )

    return _status(_search(tickets, search, fields), status)


def filter_warranty_tickets(
    tickets: Iterable[WarrantyTicket],
    resolver: NameResolver,
    search: Optional[str] = None,
    status: Optional[str] = None,
) -> List[WarrantyTicket]:
    def fields(ticket: WarrantyTicket):
        return (
            resolver.organization_name(ticket.organization_id),
            ticket.device_type.value,
            ticket.serial_number,
            ticket.id,
        )

    matched = _status(_search(tickets, search, fields), status)
    return sorted(matched, key=lambda ticket: ticket.sent_date, reverse=True)


def filter_customers(
    customers: Iterable[Customer], resolver: NameResolver, search: Optional[str] = None
) -> List[Customer]:
    return _search(
        customers,
        search,
        lambda customer: (customer.full_name, resolver.organization_name(customer.organization_id, "")),
    )


def filter_organizations(organizations: Iterable[Organization], search: Optional[str] = None) -> List[Organization]:
    return _search(organizations, search, lambda organization: (organization.name,))


def paginate(items: Sequence[T], page: int, page_size: int) -> Page:
    total = len(items)
    pages = max(1, math.ceil(total / page_size))
    start = (page - 1) * page_size
    return Page(total=total, page=page, pages=pages, items=list(items[start : start + page_size]))
