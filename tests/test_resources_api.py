from fastapi.testclient import TestClient


def _ids(client: TestClient, resource: str) -> list:
    return [record["id"] for record in client.get(f"/api/{resource}").json()]


def test_list_seeded_rooms(client) -> None:
    response = client.get("/api/rooms")

    assert response.status_code == 200
    assert _ids(client, "rooms") == ["R101", "R102", "R103"]


def test_room_lifecycle(client) -> None:
    room_body = {
        "id": "R201",
        "name": "Test Room",
        "price": 1000,
        "status": "available",
    }
    created = client.post("/api/rooms", json=room_body)
    assert created.status_code == 200
    assert created.json() == room_body

    room = next(r for r in client.get("/api/rooms").json() if r["id"] == "R201")
    assert room["name"] == "Test Room"
    assert room["price"] == 1000
    assert room["image"] is None

    updated = client.put("/api/rooms/R201", json={"status": "occupied"})
    assert updated.status_code == 200
    assert updated.json() == {"success": True}

    room = next(r for r in client.get("/api/rooms").json() if r["id"] == "R201")
    assert room["status"] == "occupied"
    assert room["price"] == 1000

    deleted = client.delete("/api/rooms/R201")
    assert deleted.status_code == 200
    assert deleted.json() == {"success": True}
    assert "R201" not in _ids(client, "rooms")


def test_booking_partial_update_leaves_other_fields(client) -> None:
    booking = {
        "id": "B1",
        "roomId": "R101",
        "roomName": "Deluxe Garden",
        "checkin": "2024-05-01",
        "checkout": "2024-05-03",
        "guest": "Somchai",
        "phone": "0812345678",
        "total": 5000,
        "status": "pending",
        "slip": "data:image/png;base64,AAAA",
        "created": "2024-04-20T10:00:00Z",
    }
    assert client.post("/api/bookings", json=booking).status_code == 200

    client.put("/api/bookings/B1", json={"status": "confirmed"})

    (stored,) = client.get("/api/bookings").json()
    assert stored == {**booking, "total": 5000.0, "status": "confirmed"}


def test_settings_post_replaces_document(client) -> None:
    default = client.get("/api/settings").json()
    assert default["brand"]["name_th"] == "SERENITY"

    document = {"brand": {"name_th": "X"}}
    response = client.post("/api/settings", json=document)

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert client.get("/api/settings").json() == document


def test_delete_missing_record_succeeds(client) -> None:
    response = client.delete("/api/rooms/R999")

    assert response.status_code == 200
    assert response.json() == {"success": True}


def test_unknown_resource_returns_404(client) -> None:
    response = client.get("/api/sqlite_master")

    assert response.status_code == 404
    body = response.json()
    assert body["code"] == "RESOURCE_UNKNOWN"
    assert body["error"] == "Unknown resource: sqlite_master"
    assert body["path"] == "/api/sqlite_master"
    assert body["method"] == "GET"


def test_unknown_field_returns_400(client) -> None:
    response = client.post("/api/rooms", json={"id": "R9", "colour": "red"})

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "VALIDATION_UNKNOWN_FIELD"
    assert body["details"]["unknown_fields"] == ["colour"]
    assert "R9" not in _ids(client, "rooms")


def test_invalid_value_returns_400(client) -> None:
    response = client.put("/api/rooms/R101", json={"price": "cheap"})

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_INVALID_INPUT"


def test_create_without_id_returns_400(client) -> None:
    response = client.post("/api/payments", json={"amount": 100})

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_MISSING_FIELD"


def test_changing_id_returns_400(client) -> None:
    response = client.put("/api/rooms/R101", json={"id": "R555"})

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_IMMUTABLE_FIELD"


def test_duplicate_id_returns_500_with_driver_message(client) -> None:
    response = client.post("/api/rooms", json={"id": "R101", "name": "Again"})

    assert response.status_code == 500
    body = response.json()
    assert body["code"] == "DATABASE_QUERY_FAILED"
    assert "UNIQUE constraint failed" in body["error"]


def test_settings_update_and_delete_return_405(client) -> None:
    assert client.put("/api/settings/1", json={"brand": {}}).status_code == 405
    assert client.delete("/api/settings/1").status_code == 405
    assert client.get("/api/settings").json()["brand"]["name_th"] == "SERENITY"


def test_unrouted_method_returns_405(client) -> None:
    response = client.put("/api/rooms", json={})

    assert response.status_code == 405
    assert response.json()["code"] == "HTTP_405"


def test_non_object_body_returns_422(client) -> None:
    response = client.post("/api/rooms", json=[{"id": "R9"}])

    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_INVALID_INPUT"


def test_malformed_json_returns_422(client) -> None:
    response = client.post(
        "/api/rooms",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 422


def test_notifications_store_read_flag_as_integer(client) -> None:
    client.post(
        "/api/notifications",
        json={"id": "N1", "msg": "New booking", "date": "2024-05-01", "read": 0},
    )
    client.put("/api/notifications/N1", json={"read": True})

    (notification,) = client.get("/api/notifications").json()
    assert notification["read"] == 1


def test_payments_round_trip_amount(client) -> None:
    client.post(
        "/api/payments",
        json={"id": "P1", "bookingId": "B1", "amount": 2500.5, "method": "bank"},
    )

    (payment,) = client.get("/api/payments").json()
    assert payment["bookingId"] == "B1"
    assert payment["amount"] == 2500.5
    assert payment["date"] is None


def test_repeated_list_returns_same_records(client) -> None:
    first = client.get("/api/rooms")
    second = client.get("/api/rooms")

    assert first.status_code == second.status_code == 200
    assert first.json() == second.json()
