def _create_org(client, name="Da Nang Hospital"):
    response = client.post("/organizations/", json={"name": name, "address": "12 Tran Phu"})
    assert response.status_code == 201, response.text
    return response.json()


def _create_customer(client, organization_id, name="Nguyen Van A"):
    response = client.post(
        "/customers/",
        json={"full_name": name, "organization_id": organization_id, "phone": "0905123456"},
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_create_and_list_organization(any_client):
    org = _create_org(any_client)

    list_resp = any_client.get("/organizations/")
    assert list_resp.status_code == 200
    body = list_resp.json()
    assert body["total"] == 1
    assert body["page"] == 1
    assert body["items"][0]["id"] == org["id"]


def test_update_changes_only_that_field(any_client):
    org = _create_org(any_client)
    customer = _create_customer(any_client, org["id"])

    before = any_client.get(f"/customers/{customer['id']}").json()
    update_resp = any_client.put(
        f"/customers/{customer['id']}",
        json={
            "full_name": before["full_name"],
            "organization_id": before["organization_id"],
            "phone": "0999888777",
            "address": before["address"],
        },
    )
    assert update_resp.status_code == 200, update_resp.text

    after = any_client.get(f"/customers/{customer['id']}").json()
    assert after["phone"] == "0999888777"
    assert {key: value for key, value in after.items() if key != "phone"} == {
        key: value for key, value in before.items() if key != "phone"
    }


def test_delete_referenced_organization_is_rejected(any_client):
    org = _create_org(any_client)
    customer = _create_customer(any_client, org["id"])

    delete_resp = any_client.delete(f"/organizations/{org['id']}")
    assert delete_resp.status_code == 409
    assert "delete organization" in delete_resp.json()["detail"]

    assert any_client.get(f"/organizations/{org['id']}").status_code == 200
    assert any_client.get(f"/customers/{customer['id']}").json() == customer


def test_delete_unreferenced_organization(any_client):
    org = _create_org(any_client)
    assert any_client.delete(f"/organizations/{org['id']}").status_code == 204
    assert any_client.get(f"/organizations/{org['id']}").status_code == 404


def test_customer_requires_name_and_organization(any_client):
    response = any_client.post("/customers/", json={"full_name": "  "})
    assert response.status_code == 400
    assert set(response.json()["fields"]) == {"full_name", "organization_id"}
    assert any_client.get("/customers/").json()["total"] == 0


def test_customer_with_unknown_organization_is_rejected(any_client):
    response = any_client.post("/customers/", json={"full_name": "Ghost", "organization_id": "missing"})
    assert response.status_code == 409
    assert any_client.get("/customers/").json()["total"] == 0


def test_customer_search_matches_organization_name(any_client):
    hue = _create_org(any_client, "Hue Central Hospital")
    hcm = _create_org(any_client, "Saigon Clinic")
    _create_customer(any_client, hue["id"], "Tran Thi B")
    _create_customer(any_client, hcm["id"], "Le Van C")

    body = any_client.get("/customers/", params={"search": "hue"}).json()
    assert [item["full_name"] for item in body["items"]] == ["Tran Thi B"]


def test_customer_list_pages(client):
    org = _create_org(client)
    for index in range(12):
        _create_customer(client, org["id"], f"Customer {index:02d}")

    first = client.get("/customers/").json()
    second = client.get("/customers/", params={"page": 2}).json()
    assert first["total"] == 12
    assert first["pages"] == 2
    assert len(first["items"]) == 10
    assert len(second["items"]) == 2


def test_missing_customer_returns_404(client):
    assert client.get("/customers/does-not-exist").status_code == 404
    update_resp = client.put("/customers/does-not-exist", json={"full_name": "X", "organization_id": "Y"})
    assert update_resp.status_code == 404
