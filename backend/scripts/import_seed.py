"""Load CSV seed tickets into the configured entity store."""

from __future__ import annotations

import csv
import logging
import sys
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Dict, Optional, Tuple

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from devicedesk.config import get_settings  # noqa: E402
from devicedesk.constants import DeviceType, RepairStatus, ShippingMethod  # noqa: E402
from devicedesk.errors import StoreWriteError, TicketValidationError  # noqa: E402
from devicedesk.schemas import CustomerIn, OrganizationIn, RepairTicketIn  # noqa: E402
from devicedesk.services.lifecycle import save_customer, save_organization, save_repair_ticket  # noqa: E402
from devicedesk.store import EntityStore, LocalStorage, build_store  # noqa: E402

logger = logging.getLogger("devicedesk.import_seed")

TicketKey = Tuple[str, str, str]


@dataclass
class ImportStats:
    created: int = 0
    skipped: int = 0
    failed: int = 0


def ticket_key(customer_id: str, serial_number: Optional[str], receive_date: date) -> TicketKey:
    return (customer_id, serial_number or "", receive_date.isoformat())


def load_existing_tickets(store: EntityStore) -> set[TicketKey]:
    return {ticket_key(t.customer_id, t.serial_number, t.receive_date) for t in store.tickets.list()}


def parse_row(row: dict[str, str], customer_id: str) -> RepairTicketIn:
    return RepairTicketIn(
        customer_id=customer_id,
        device_type=DeviceType(row["device_type"]),
        serial_number=row.get("serial_number") or None,
        device_condition=row.get("device_condition") or None,
        receive_date=date.fromisoformat(row["receive_date"]),
        status=RepairStatus(row["status"]),
        return_date=date.fromisoformat(row["return_date"]) if row.get("return_date") else None,
        shipping_method=ShippingMethod(row["shipping_method"]) if row.get("shipping_method") else None,
        tracking_number=row.get("tracking_number") or None,
    )


class Directory:
    """Finds organizations and customers by name, creating them on first use."""

    def __init__(self, store: EntityStore):
        self.store = store
        self.organizations: Dict[str, str] = {item.name: item.id for item in store.organizations.list()}
        self.customers: Dict[Tuple[str, str], str] = {
            (item.organization_id, item.full_name): item.id for item in store.customers.list()
        }

    def organization_id(self, name: str) -> str:
        if name not in self.organizations:
            self.organizations[name] = save_organization(self.store, OrganizationIn(name=name)).id
        return self.organizations[name]

    def customer_id(self, organization: str, full_name: str, phone: str) -> str:
        organization_id = self.organization_id(organization)
        key = (organization_id, full_name)
        if key not in self.customers:
            payload = CustomerIn(full_name=full_name, organization_id=organization_id, phone=phone)
            self.customers[key] = save_customer(self.store, payload).id
        return self.customers[key]


def import_csv(csv_path: Path, store: EntityStore) -> ImportStats:
    stats = ImportStats()
    directory = Directory(store)
    existing = load_existing_tickets(store)
    with csv_path.open(newline="", encoding="utf-8") as fh:
        reader = csv.DictReader(fh)
        for line, row in enumerate(reader, start=2):
            try:
                customer_id = directory.customer_id(row["organization"], row["customer"], row.get("phone", ""))
                payload = parse_row(row, customer_id)
                key = ticket_key(customer_id, payload.serial_number, payload.receive_date)
                if key in existing:
                    stats.skipped += 1
                    continue
                save_repair_ticket(store, payload)
            except (ValueError, TicketValidationError, StoreWriteError):
                logger.exception("Row %s could not be imported", line)
                stats.failed += 1
                continue
            existing.add(key)
            stats.created += 1
    return stats


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    csv_path = ROOT.parent / "data" / "tickets_seed.csv"
    if not csv_path.exists():
        raise SystemExit(f"CSV file not found: {csv_path}")

    settings = get_settings()
    store = build_store(settings, LocalStorage(settings.local_store_path))
    try:
        stats = import_csv(csv_path, store)
    finally:
        store.close()
    print(f"Created {stats.created} tickets, skipped {stats.skipped} duplicates, {stats.failed} failed.")


if __name__ == "__main__":
    main()
