import pytest

from src.core.error_codes import DatabaseErrorCode
from src.core.exceptions import DatabaseException
from src.stores.record_store import RecordStore


@pytest.fixture
def store(provisioned) -> RecordStore:
    return RecordStore(provisioned)


def test_list_records_returns_rows_as_dicts(store, registry) -> None:
    rooms = store.list_records(registry.get("rooms"))

    assert [room["id"] for room in rooms] == ["R101", "R102", "R103"]
    assert rooms[0]["price"] == 2500
    assert rooms[0]["amenities"] == "WiFi,King Bed"


def test_insert_record_writes_only_supplied_columns(store, registry) -> None:
    bookings = registry.get("bookings")

    created = store.insert_record(bookings, {"id": "B1", "guest": "Somchai"})

    assert created == {"id": "B1", "guest": "Somchai"}
    (row,) = store.list_records(bookings)
    assert row["guest"] == "Somchai"
    assert row["roomId"] is None
    assert row["total"] is None


def test_insert_duplicate_id_reports_driver_message(store, registry) -> None:
    rooms = registry.get("rooms")

    with pytest.raises(DatabaseException) as exc_info:
        store.insert_record(rooms, {"id": "R101", "name": "Copy"})

    exc = exc_info.value
    assert exc.error_code == DatabaseErrorCode.QUERY_FAILED
    assert exc.http_status == 500
    assert "UNIQUE constraint failed" in exc.message
    assert exc.details == {"resource": "rooms"}


def test_failed_insert_leaves_no_partial_row(store, registry) -> None:
    rooms = registry.get("rooms")

    with pytest.raises(DatabaseException):
        store.insert_record(rooms, {"id": "R101"})

    assert store.count_records(rooms) == 3


def test_update_record_touches_only_given_fields(store, registry) -> None:
    rooms = registry.get("rooms")

    matched = store.update_record(rooms, "R102", {"status": "maintenance"})

    assert matched == 1
    room = next(r for r in store.list_records(rooms) if r["id"] == "R102")
    assert room["status"] == "maintenance"
    assert room["name"] == "Pool Villa"
    assert room["price"] == 5900


def test_update_missing_record_matches_nothing(store, registry) -> None:
    assert store.update_record(registry.get("rooms"), "R999", {"status": "x"}) == 0


def test_delete_record_is_idempotent(store, registry) -> None:
    rooms = registry.get("rooms")

    assert store.delete_record(rooms, "R103") == 1
    assert store.delete_record(rooms, "R103") == 0
    assert store.count_records(rooms) == 2


def test_values_are_bound_not_interpolated(store, registry) -> None:
    users = registry.get("users")
    hostile = "x'); DROP TABLE users; --"

    store.insert_record(users, {"id": "U9", "name": hostile})

    names = {user["id"]: user["name"] for user in store.list_records(users)}
    assert names["U9"] == hostile
    assert len(names) == 3
