from devicedesk.constants import ShippingMethod
from devicedesk.services.shipping import is_trackable, track


def test_short_code_is_only_received():
    info = track(ShippingMethod.VIETTEL_POST, "ABC", delay=0)
    assert len(info.steps) == 1
    assert info.current_status == "Received at origin"


def test_long_code_is_in_transit():
    info = track(ShippingMethod.GHN, "ABCDEF", delay=0)
    assert len(info.steps) == 2
    assert info.current_status == "In transit"
    # newest step first
    assert [step.status for step in info.steps] == ["In transit", "Received at origin"]


def test_done_code_is_delivered():
    info = track(ShippingMethod.GHTK, "ABCDEFdone", delay=0)
    assert len(info.steps) == 3
    assert info.current_status == "Delivered"
    assert info.last_update == "2024-03-21 10:15"


def test_empty_code_has_no_result():
    assert track(ShippingMethod.GHTK, "", delay=0) is None


def test_only_postal_carriers_are_trackable():
    assert is_trackable(ShippingMethod.VIETTEL_POST)
    assert not is_trackable(ShippingMethod.TAXI)
    assert not is_trackable(None)


def test_track_endpoint(client):
    response = client.get("/shipping/track", params={"carrier": "Viettel Post", "code": "VTP123done"})
    assert response.status_code == 200
    body = response.json()
    assert body["trackable"] is True
    assert body["info"]["current_status"] == "Delivered"


def test_track_endpoint_for_untracked_carrier(client):
    body = client.get("/shipping/track", params={"carrier": "Bus", "code": "BUS-1"}).json()
    assert body == {"trackable": False, "tracking_number": "BUS-1", "info": None}
