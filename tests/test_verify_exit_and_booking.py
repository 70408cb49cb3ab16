from tests.conftest import read_path


def _book_and_pay(client, payload):
    external_id = client.post("/api/create-invoice", json=payload).json()["externalId"]
    client.post(
        "/api/xendit-webhook",
        json={"external_id": external_id, "status": "PAID", "amount": payload["amount"], "id": "inv_9"},
    )
    return external_id


def test_verify_exit_finds_paid_reservation(client, website_payload):
    _book_and_pay(client, website_payload)

    res = client.post("/api/verify-exit", json={"plate": "XYZ789"})
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["slot"] == "02"
    assert body["message"] == "Reservation verified"
    assert body["reservation"]["status"] == "Paid"


def test_verify_exit_ignores_pending_reservations(client, website_payload):
    client.post("/api/create-invoice", json=website_payload)

    res = client.post("/api/verify-exit", json={"plate": "XYZ789"})
    assert res.status_code == 404
    assert res.json()["error"] == "No active reservation found for this plate number"


def test_verify_exit_without_any_reservation(client):
    res = client.post("/api/verify-exit", json={"plate": "XYZ789"})
    assert res.status_code == 404
    assert res.json()["error"] == "No active reservations found"


def test_verify_exit_requires_plate(client):
    res = client.post("/api/verify-exit", json={})
    assert res.status_code == 400
    assert res.json()["error"] == "Missing plate parameter"


def test_verify_exit_picks_lowest_slot_for_duplicate_plate(client, store):
    store.root["reservations"] = {
        "03": {"plate": "DUP111", "status": "Paid"},
        "01": {"plate": "DUP111", "status": "Paid"},
    }
    res = client.post("/api/verify-exit", json={"plate": "DUP111"})
    assert res.json()["slot"] == "01"


def test_verify_exit_is_read_only(client, store, website_payload):
    _book_and_pay(client, website_payload)
    before = read_path(store, "reservations")
    client.post("/api/verify-exit", json={"plate": "XYZ789"})
    assert read_path(store, "reservations") == before


def test_lookup_walk_in_booking(client, walk_in_payload):
    external_id = _book_and_pay(client, walk_in_payload)

    res = client.get(f"/api/booking/{external_id}")
    assert res.status_code == 200
    booking = res.json()["booking"]
    assert booking["externalId"] == external_id
    assert booking["status"] == "Paid"
    assert booking["plate"] == "ABC123"


def test_lookup_reservation_by_slot_key(client, website_payload):
    _book_and_pay(client, website_payload)

    res = client.get("/api/booking/02")
    assert res.status_code == 200
    assert res.json()["booking"]["plate"] == "XYZ789"


def test_lookup_unknown_booking(client):
    res = client.get("/api/booking/WALKIN_01_123")
    assert res.status_code == 404
    assert res.json() == {"error": "Booking not found"}

    res = client.get("/api/booking/WEBSITE_01_123")
    assert res.status_code == 404
