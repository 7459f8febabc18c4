import pytest
from fastapi.testclient import TestClient

from src.api.factory import create_api
from src.core.config import settings
from src.core.error_codes import (
    APIErrorCode,
    DatabaseErrorCode,
    ResourceErrorCode,
    ValidationErrorCode,
    get_http_status_code,
)
from src.core.exceptions import DatabaseException, ValidationException


@pytest.mark.parametrize(
    ("code", "status"),
    [
        (ValidationErrorCode.UNKNOWN_FIELD, 400),
        (ResourceErrorCode.UNKNOWN_RESOURCE, 404),
        (ResourceErrorCode.UNSUPPORTED_OPERATION, 405),
        (APIErrorCode.PAYLOAD_TOO_LARGE, 413),
        (DatabaseErrorCode.QUERY_FAILED, 500),
        (DatabaseErrorCode.CONNECTION_FAILED, 503),
        ("VALIDATION_IMMUTABLE_FIELD", 400),
        ("SOMETHING_ELSE", 500),
    ],
)
def test_http_status_for_error_codes(code, status) -> None:
    assert get_http_status_code(code) == status


def test_exception_to_dict_includes_cause() -> None:
    try:
        try:
            raise ValueError("bad")
        except ValueError as cause:
            raise DatabaseException(
                "Failed", DatabaseErrorCode.QUERY_FAILED, details={"resource": "rooms"}
            ) from cause
    except DatabaseException as exc:
        data = exc.to_dict()

    assert data["code"] == "DATABASE_QUERY_FAILED"
    assert data["details"] == {"resource": "rooms"}
    assert data["cause"] == {"type": "ValueError", "message": "bad"}


def test_exception_str_includes_code() -> None:
    exc = ValidationException("Nope", ValidationErrorCode.MISSING_FIELD)

    assert "Nope" in str(exc)
    assert "MISSING_FIELD" in str(exc)


def _app_with_failing_route(database, registry):
    app = create_api(database=database, registry=registry, serve_frontend=False)

    @app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    return app


def test_unexpected_error_returns_500(monkeypatch, database, registry) -> None:
    monkeypatch.setattr(settings, "debug", False)
    app = _app_with_failing_route(database, registry)

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/boom")

    assert response.status_code == 500
    body = response.json()
    assert body["code"] == "API_INTERNAL_ERROR"
    assert body["error"] == "An unexpected error occurred"
    assert body["debug"] is None


def test_unexpected_error_includes_debug_info(monkeypatch, database, registry) -> None:
    monkeypatch.setattr(settings, "debug", True)
    app = _app_with_failing_route(database, registry)

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/boom")

    debug = response.json()["debug"]
    assert debug["exception_type"] == "RuntimeError"
    assert debug["exception_message"] == "kaboom"
