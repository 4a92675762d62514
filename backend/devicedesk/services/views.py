"""Aggregates and lookups computed from loaded collections.

Everything here is a pure function of the lists it is given; pages reload the
collections and recompute on every request.
"""

from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence

from ..constants import RepairStatus, WarrantyStatus
from ..schemas import (
    Customer,
    DashboardOut,
    DeviceTypeStat,
    FailureStatsOut,
    Organization,
    RecentTicket,
    RepairTicket,
    LabelCount,
)

UNKNOWN_CUSTOMER = "Unknown"
UNKNOWN_ORGANIZATION = "Unknown Org"

CRITICAL_PERCENT = 30
WARNING_PERCENT = 15
RECOMMENDATIONS = {
    "critical": "Failure rate is too high. Consider replacing this device type or checking power and installation conditions.",
    "warning": "Failure rate is fairly high. Keep monitoring and service these devices more often.",
    "safe": "Failure rate is acceptable. Keep the current maintenance routine.",
}


def status_histogram(tickets: Iterable, statuses: Iterable) -> List[LabelCount]:
    counts = Counter(ticket.status for ticket in tickets)
    return [LabelCount(label=status.value, count=counts.get(status, 0)) for status in statuses]


def completion_rate(tickets: Sequence[RepairTicket]) -> float:
    if not tickets:
        return 0.0
    returned = sum(1 for ticket in tickets if ticket.status == RepairStatus.RETURNED)
    return round(returned / len(tickets) * 100, 1)


def device_type_counts(tickets: Iterable) -> List[LabelCount]:
    counts = Counter(ticket.device_type.value for ticket in tickets)
    return [LabelCount(label=name, count=count) for name, count in counts.items()]


def classify_percent(percent: float) -> str:
    if percent >= CRITICAL_PERCENT:
        return "critical"
    if percent >= WARNING_PERCENT:
        return "warning"
    return "safe"


def device_type_breakdown(tickets: Sequence) -> List[DeviceTypeStat]:
    total = len(tickets)
    if total == 0:
        return []

    result = []
    for name, count in Counter(ticket.device_type.value for ticket in tickets).items():
        percent = round(count / total * 100, 1)
        level = classify_percent(percent)
        result.append(
            DeviceTypeStat(name=name, count=count, percent=percent, level=level, recommendation=RECOMMENDATIONS[level])
        )
    result.sort(key=lambda item: item.count, reverse=True)
    return result


def failure_statistics(tickets: Sequence) -> FailureStatsOut:
    breakdown = device_type_breakdown(tickets)
    return FailureStatsOut(
        total=len(tickets),
        most_failing=breakdown[0] if breakdown else None,
        most_reliable=breakdown[-1] if breakdown else None,
        breakdown=breakdown,
    )


def monthly_trend(tickets: Iterable[RepairTicket], months: int = 6) -> List[LabelCount]:
    """Ticket counts for the most recent ``months`` calendar months that have tickets, oldest first."""
    counts = Counter((ticket.receive_date.year, ticket.receive_date.month) for ticket in tickets)
    recent = sorted(counts)[-months:] if months > 0 else []
    return [LabelCount(label=f"{month:02d}/{year}", count=counts[(year, month)]) for year, month in recent]


def _index(items: Iterable) -> Dict[str, object]:
    return {item.id: item for item in items}


def customer_name(customers: Iterable[Customer], customer_id: str) -> str:
    return NameResolver(customers, ()).customer_name(customer_id)


def organization_name(
    organizations: Iterable[Organization], organization_id: str, fallback: str = UNKNOWN_ORGANIZATION
) -> str:
    return NameResolver((), organizations).organization_name(organization_id, fallback)


def organization_name_for_customer(
    customers: Iterable[Customer],
    organizations: Iterable[Organization],
    customer_id: str,
    fallback: str = UNKNOWN_ORGANIZATION,
) -> str:
    return NameResolver(customers, organizations).organization_for_customer(customer_id, fallback)


class NameResolver:
    """Indexes customers and organizations once for repeated lookups over a page."""

    def __init__(self, customers: Iterable[Customer], organizations: Iterable[Organization]):
        self.customers = _index(customers)
        self.organizations = _index(organizations)

    def customer(self, customer_id: str) -> Optional[Customer]:
        return self.customers.get(customer_id)

    def customer_name(self, customer_id: str) -> str:
        customer = self.customers.get(customer_id)
        return customer.full_name if customer else UNKNOWN_CUSTOMER

    def organization_name(self, organization_id: str, fallback: str = UNKNOWN_ORGANIZATION) -> str:
        organization = self.organizations.get(organization_id)
        return organization.name if organization else fallback

    def organization_for_customer(self, customer_id: str, fallback: str = UNKNOWN_ORGANIZATION) -> str:
        customer = self.customers.get(customer_id)
        if customer is None:
            return ""
        return self.organization_name(customer.organization_id, fallback)


def recent_tickets(tickets: Iterable[RepairTicket], resolver: NameResolver, limit: int = 5) -> List[RecentTicket]:
    newest = sorted(tickets, key=lambda ticket: ticket.created_at, reverse=True)[:limit]
    return [
        RecentTicket(
            id=ticket.id,
            customer_name=resolver.customer_name(ticket.customer_id),
            organization_name=resolver.organization_for_customer(ticket.customer_id),
            device_type=ticket.device_type,
            status=ticket.status,
            receive_date=ticket.receive_date,
        )
        for ticket in newest
    ]


def dashboard_summary(
    tickets: Sequence[RepairTicket],
    warranties: Sequence,
    customers: Iterable[Customer],
    organizations: Iterable[Organization],
) -> DashboardOut:
    resolver = NameResolver(customers, organizations)
    return DashboardOut(
        total=len(tickets),
        by_status=status_histogram(tickets, RepairStatus),
        completion_rate=completion_rate(tickets),
        by_device=device_type_counts(tickets),
        recent=recent_tickets(tickets, resolver),
        warranty_by_status=status_histogram(warranties, WarrantyStatus),
    )
