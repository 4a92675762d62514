"""Device history: tickets related to a given repair ticket."""

from __future__ import annotations

from typing import Iterable, List

from ..schemas import RepairTicket
from .views import NameResolver


def _newest_received_first(tickets: Iterable[RepairTicket]) -> List[RepairTicket]:
    return sorted(tickets, key=lambda ticket: ticket.receive_date, reverse=True)


def history_peers(ticket: RepairTicket, tickets: Iterable[RepairTicket]) -> List[RepairTicket]:
    """
    Tickets sharing the source ticket's serial number, across all customers.

    Without a serial number the device cannot be identified, so the peers are
    the tickets of the same customer for the same device type.
    """
    if ticket.serial_number:
        peers = (item for item in tickets if item.serial_number == ticket.serial_number)
    else:
        peers = (
            item
            for item in tickets
            if item.customer_id == ticket.customer_id and item.device_type == ticket.device_type
        )
    return _newest_received_first(peers)


def customer_tickets(customer_id: str, tickets: Iterable[RepairTicket]) -> List[RepairTicket]:
    return _newest_received_first(item for item in tickets if item.customer_id == customer_id)


def history_title(ticket: RepairTicket, resolver: NameResolver) -> str:
    if ticket.serial_number:
        return f"Device history SN: {ticket.serial_number}"
    return f"{ticket.device_type.value} history for {resolver.customer_name(ticket.customer_id)}"
