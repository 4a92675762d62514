"""Pytest configuration to ensure local testing defaults."""

from __future__ import annotations

import os
import sys
from datetime import date
from pathlib import Path

import pytest

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

# During pytest runs we force SQLAlchemy to use a local sqlite database so that tests
# do not require a running remote database.
default_sqlite_url = f"sqlite:///{(BACKEND_DIR / 'tests' / 'test_devicedesk.db').resolve().as_posix()}"
os.environ.setdefault("DATABASE_URL", default_sqlite_url)
os.environ.setdefault("TRACKING_DELAY_SECONDS", "0")
os.environ.setdefault("LOCAL_STORE_PATH", str(BACKEND_DIR / "tests" / "test_local_store.json"))

from fastapi.testclient import TestClient  # noqa: E402

from devicedesk.config import Settings  # noqa: E402
from devicedesk.constants import DeviceType, RepairStatus  # noqa: E402
from devicedesk.main import create_app  # noqa: E402
from devicedesk.schemas import CustomerIn, OrganizationIn, RepairTicketIn  # noqa: E402
from devicedesk.services.lifecycle import save_customer, save_organization, save_repair_ticket  # noqa: E402
from devicedesk.store import LocalEntityStore, LocalStorage  # noqa: E402


@pytest.fixture
def remote_settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{(tmp_path / 'remote.db').as_posix()}",
        local_store_path=tmp_path / "local_store.json",
        tracking_delay_seconds=0,
        page_size=10,
    )


@pytest.fixture
def offline_settings(tmp_path):
    return Settings(
        database_url=None,
        db_host="YOUR_DB_HOST",
        db_user="YOUR_DB_USER",
        db_password="YOUR_DB_PASSWORD",
        local_store_path=tmp_path / "local_store.json",
        tracking_delay_seconds=0,
        page_size=10,
    )


def _signed_in(app):
    client = TestClient(app)
    response = client.post("/session/", json={"email": "tech@example.com"})
    assert response.status_code == 201, response.text
    return client


@pytest.fixture
def client(remote_settings):
    app = create_app(remote_settings)
    with _signed_in(app) as test_client:
        yield test_client


@pytest.fixture
def offline_client(offline_settings):
    app = create_app(offline_settings)
    with _signed_in(app) as test_client:
        yield test_client


@pytest.fixture(params=["remote", "offline"])
def any_client(request, remote_settings, offline_settings):
    settings = remote_settings if request.param == "remote" else offline_settings
    app = create_app(settings)
    with _signed_in(app) as test_client:
        yield test_client


@pytest.fixture
def local_store():
    return LocalEntityStore(LocalStorage())


@pytest.fixture
def seeded_store(local_store):
    """One organization, two customers and three tickets sharing a serial number."""
    org = save_organization(local_store, OrganizationIn(name="Hanoi Medical Center"))
    alice = save_customer(local_store, CustomerIn(full_name="Alice Tran", organization_id=org.id, phone="0901"))
    bob = save_customer(local_store, CustomerIn(full_name="Bob Le", organization_id=org.id))
    for customer, serial, received in (
        (alice, "SN-100", date(2024, 1, 5)),
        (bob, "SN-100", date(2024, 3, 2)),
        (alice, None, date(2024, 2, 10)),
        (alice, None, date(2024, 4, 1)),
    ):
        save_repair_ticket(
            local_store,
            RepairTicketIn(
                customer_id=customer.id,
                device_type=DeviceType.CAMERA,
                serial_number=serial,
                receive_date=received,
                status=RepairStatus.RECEIVED,
            ),
        )
    save_repair_ticket(
        local_store,
        RepairTicketIn(customer_id=alice.id, device_type=DeviceType.MIC, receive_date=date(2024, 4, 3)),
    )
    return local_store
