import pytest

from src.core.error_codes import ResourceErrorCode, ValidationErrorCode
from src.core.exceptions import ResourceNotFoundException, ValidationException
from src.models import (
    SETTINGS_RESOURCE,
    ResourceDescriptor,
    SettingsDescriptor,
    build_registry,
)


def test_registry_exposes_every_provisioned_resource(registry) -> None:
    assert registry.names() == [
        "bookings",
        "notifications",
        "payments",
        "rooms",
        "settings",
        "users",
    ]
    assert isinstance(registry.get(SETTINGS_RESOURCE), SettingsDescriptor)
    assert isinstance(registry.get("rooms"), ResourceDescriptor)


def test_booking_fields_use_wire_names(registry) -> None:
    bookings = registry.get("bookings")

    assert bookings.id_field == "id"
    assert bookings.field_names == (
        "id",
        "roomId",
        "roomName",
        "checkin",
        "checkout",
        "guest",
        "phone",
        "total",
        "status",
        "slip",
        "created",
    )


def test_unknown_resource_raises_not_found(registry) -> None:
    with pytest.raises(ResourceNotFoundException) as exc_info:
        registry.get("sqlite_master")

    assert exc_info.value.error_code == ResourceErrorCode.UNKNOWN_RESOURCE
    assert exc_info.value.http_status == 404
    assert "sqlite_master" not in exc_info.value.details["available"]


def test_parse_record_keeps_only_supplied_fields(registry) -> None:
    rooms = registry.get("rooms")

    assert rooms.parse_record({"status": "cleaning"}) == {"status": "cleaning"}


def test_parse_record_coerces_to_column_types(registry) -> None:
    rooms = registry.get("rooms")
    bookings = registry.get("bookings")

    assert rooms.parse_record({"id": "R9", "price": "2500"}) == {
        "id": "R9",
        "price": 2500,
    }
    assert bookings.parse_record({"phone": 812345678, "total": 3}) == {
        "phone": "812345678",
        "total": 3.0,
    }


def test_parse_record_rejects_unknown_fields(registry) -> None:
    rooms = registry.get("rooms")

    with pytest.raises(ValidationException) as exc_info:
        rooms.parse_record({"id": "R9", "name": "x", "price; DROP TABLE rooms": 1})

    exc = exc_info.value
    assert exc.error_code == ValidationErrorCode.UNKNOWN_FIELD
    assert exc.details["unknown_fields"] == ["price; DROP TABLE rooms"]
    assert "amenities" in exc.details["allowed_fields"]


def test_parse_record_rejects_wrong_types(registry) -> None:
    rooms = registry.get("rooms")

    with pytest.raises(ValidationException) as exc_info:
        rooms.parse_record({"price": "expensive"})

    exc = exc_info.value
    assert exc.error_code == ValidationErrorCode.INVALID_INPUT
    assert exc.details["validation_errors"][0]["loc"] == ["price"]


def test_parse_record_allows_null_values(registry) -> None:
    assert registry.get("rooms").parse_record({"image": None}) == {"image": None}


def test_build_registry_from_custom_metadata() -> None:
    from sqlalchemy import Column, Integer, MetaData, String, Table

    metadata = MetaData()
    Table(
        "guests",
        metadata,
        Column("code", String, primary_key=True),
        Column("visits", Integer),
    )

    registry = build_registry(metadata)

    guests = registry.get("guests")
    assert len(registry) == 1
    assert guests.id_field == "code"
    assert guests.parse_record({"visits": "4"}) == {"visits": 4}
