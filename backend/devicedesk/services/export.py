"""CSV reports for the repair and warranty lists.

Files open cleanly in Excel: UTF-8 with a BOM, every field quoted.
"""

from __future__ import annotations

import csv
import io
from datetime import date
from typing import Iterable, List, Optional, Sequence

from ..schemas import RepairTicket, WarrantyTicket
from .views import NameResolver

BOM = "\ufeff"

REPAIR_HEADERS = ["Ticket ID", "Receive Date", "Customer", "Organization", "Phone", "Device", "Serial", "Status"]
WARRANTY_HEADERS = [
    "Ticket ID",
    "Sent Date",
    "Service Center",
    "Device Type",
    "Serial Number",
    "Fault Description",
    "Status",
    "Return Date",
    "Cost",
    "Note",
]


def short_id(entity_id: str) -> str:
    return entity_id[:8]


def _to_csv(headers: List[str], rows: Iterable[Sequence[object]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(headers)
    writer.writerows(rows)
    return BOM + buffer.getvalue()


def repair_tickets_csv(tickets: Iterable[RepairTicket], resolver: NameResolver) -> str:
    rows = []
    for ticket in tickets:
        customer = resolver.customer(ticket.customer_id)
        rows.append(
            [
                short_id(ticket.id),
                ticket.receive_date.isoformat(),
                customer.full_name if customer else "",
                resolver.organization_for_customer(ticket.customer_id),
                customer.phone if customer else "",
                ticket.device_type.value,
                ticket.serial_number or "",
                ticket.status.value,
            ]
        )
    return _to_csv(REPAIR_HEADERS, rows)


def warranty_tickets_csv(tickets: Iterable[WarrantyTicket], resolver: NameResolver) -> str:
    ordered = sorted(tickets, key=lambda ticket: ticket.sent_date, reverse=True)
    rows = [
        [
            short_id(ticket.id),
            ticket.sent_date.isoformat(),
            resolver.organization_name(ticket.organization_id),
            ticket.device_type.value,
            ticket.serial_number or "",
            ticket.description or "",
            ticket.status.value,
            ticket.return_date.isoformat() if ticket.return_date else "",
            str(ticket.cost) if ticket.cost else "0",
            ticket.note or "",
        ]
        for ticket in ordered
    ]
    return _to_csv(WARRANTY_HEADERS, rows)


def export_filename(prefix: str, today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"{prefix}_{today.isoformat()}.csv"
