import json
import threading
from datetime import date, datetime, timedelta, timezone

import pytest

from devicedesk.constants import DeviceType
from devicedesk.errors import EntityNotFound, IntegrityViolation, StoreWriteError
from devicedesk.schemas import Customer, Organization, RepairTicket
from devicedesk.store import LocalEntityStore, LocalStorage
from devicedesk.store.columns import CUSTOMERS, LOCAL, REMOTE, TICKETS

NOW = datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc)


def _org(org_id="org-1", created_at=NOW, name="Cho Ray Hospital"):
    return Organization(id=org_id, name=name, created_at=created_at)


def test_records_are_stored_with_camel_case_keys(local_store):
    local_store.organizations.add(_org())
    local_store.customers.add(Customer(id="c-1", full_name="Vo Thi D", organization_id="org-1", created_at=NOW))

    rows = json.loads(local_store.storage.get_item("device_mgr_customers"))
    assert rows[0]["fullName"] == "Vo Thi D"
    assert rows[0]["organizationId"] == "org-1"
    assert "full_name" not in rows[0]


def test_decode_accepts_snake_and_camel_rows():
    snake = {"id": "c-1", "full_name": "A", "organization_id": "o", "created_at": NOW.isoformat()}
    camel = {"id": "c-1", "fullName": "A", "organizationId": "o", "createdAt": NOW.isoformat()}
    assert CUSTOMERS.decode(snake) == CUSTOMERS.decode(camel)


def test_decode_prefers_first_non_empty_candidate():
    row = {"id": "c-1", "full_name": None, "fullName": "Camel Name", "organization_id": "o", "created_at": NOW}
    assert CUSTOMERS.decode(row).full_name == "Camel Name"


def test_encode_styles():
    ticket = RepairTicket(
        id="t-1",
        customer_id="c-1",
        device_type=DeviceType.SOURCE,
        receive_date=date(2024, 5, 1),
        created_at=NOW,
        updated_at=NOW,
    )
    remote = TICKETS.encode(ticket, REMOTE)
    local = TICKETS.encode(ticket, LOCAL)
    assert remote["device_type"] == "Source/Power"
    assert remote["receive_date"] == date(2024, 5, 1)
    assert local["deviceType"] == "Source/Power"
    assert local["receiveDate"] == "2024-05-01"


def test_list_is_newest_first(local_store):
    local_store.organizations.add(_org("old", NOW - timedelta(days=2)))
    local_store.organizations.add(_org("new", NOW))
    local_store.organizations.add(_org("mid", NOW - timedelta(days=1)))
    assert [item.id for item in local_store.organizations.list()] == ["new", "mid", "old"]


def test_customer_needs_existing_organization(local_store):
    with pytest.raises(IntegrityViolation):
        local_store.customers.add(Customer(id="c-1", full_name="X", organization_id="nope", created_at=NOW))
    assert local_store.customers.list() == []


def test_delete_referenced_organization_changes_nothing(local_store):
    local_store.organizations.add(_org())
    local_store.customers.add(Customer(id="c-1", full_name="X", organization_id="org-1", created_at=NOW))
    before = local_store.storage.get_item("device_mgr_orgs")

    with pytest.raises(IntegrityViolation) as excinfo:
        local_store.organizations.delete("org-1")
    assert excinfo.value.operation == "delete organization"
    assert local_store.storage.get_item("device_mgr_orgs") == before


def test_duplicate_id_is_rejected(local_store):
    local_store.organizations.add(_org())
    with pytest.raises(IntegrityViolation):
        local_store.organizations.add(_org())
    assert len(local_store.organizations.list()) == 1


def test_update_keeps_created_at(local_store):
    local_store.organizations.add(_org())
    local_store.organizations.update(_org(created_at=NOW + timedelta(days=3), name="Renamed"))

    stored = local_store.organizations.get("org-1")
    assert stored.name == "Renamed"
    assert stored.created_at == NOW


def test_update_and_delete_missing_record(local_store):
    with pytest.raises(EntityNotFound):
        local_store.organizations.update(_org())
    with pytest.raises(EntityNotFound):
        local_store.organizations.delete("org-1")


def test_corrupt_collection_reads_as_empty(local_store):
    local_store.storage.set_item("device_mgr_orgs", "{not json")
    assert local_store.organizations.list() == []
    assert local_store.organizations.get("anything") is None


def test_corrupt_collection_write_is_reported(local_store):
    local_store.storage.set_item("device_mgr_orgs", "{not json")
    with pytest.raises(StoreWriteError) as excinfo:
        local_store.organizations.add(_org())
    assert str(excinfo.value).startswith("Failed to add organization")


def test_storage_persists_between_instances(tmp_path):
    path = tmp_path / "store.json"
    LocalEntityStore(LocalStorage(path)).organizations.add(_org())

    reopened = LocalEntityStore(LocalStorage(path))
    assert [item.name for item in reopened.organizations.list()] == ["Cho Ray Hospital"]


def test_unreadable_storage_file_starts_empty(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("garbage", encoding="utf-8")
    assert LocalStorage(path).get_item("device_mgr_orgs") is None


def test_concurrent_adds_are_all_kept(tmp_path):
    store = LocalEntityStore(LocalStorage(tmp_path / "store.json"))
    barrier = threading.Barrier(16)

    def worker(worker_id):
        barrier.wait()
        for index in range(10):
            store.organizations.add(_org(f"org-{worker_id}-{index}", NOW, f"Org {worker_id}/{index}"))

    threads = [threading.Thread(target=worker, args=(worker_id,)) for worker_id in range(16)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(store.organizations.list()) == 160
    assert len(LocalEntityStore(LocalStorage(tmp_path / "store.json")).organizations.list()) == 160


def test_concurrent_delete_and_child_add_keep_references(local_store):
    for round_id in range(20):
        org_id = f"org-{round_id}"
        local_store.organizations.add(_org(org_id))
        barrier = threading.Barrier(2)
        errors = []

        def delete_org():
            barrier.wait()
            try:
                local_store.organizations.delete(org_id)
            except IntegrityViolation as exc:
                errors.append(exc)

        def add_customer():
            barrier.wait()
            try:
                local_store.customers.add(
                    Customer(id=f"c-{round_id}", full_name="X", organization_id=org_id, created_at=NOW)
                )
            except IntegrityViolation as exc:
                errors.append(exc)

        threads = [threading.Thread(target=delete_org), threading.Thread(target=add_customer)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        # exactly one side wins; a stored customer always has its organization
        assert len(errors) == 1
        org_ids = {item.id for item in local_store.organizations.list()}
        for customer in local_store.customers.list():
            assert customer.organization_id in org_ids


def test_require_reports_read_failure_as_write_error(local_store):
    local_store.organizations.add(_org())
    assert local_store.organizations.require("org-1", "update organization").name == "Cho Ray Hospital"
    with pytest.raises(EntityNotFound):
        local_store.organizations.require("missing", "update organization")

    local_store.storage.set_item("device_mgr_orgs", "{not json")
    with pytest.raises(StoreWriteError) as excinfo:
        local_store.organizations.require("org-1", "update organization")
    assert excinfo.value.operation == "update organization"
