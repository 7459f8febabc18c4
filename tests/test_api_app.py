from concurrent.futures import ThreadPoolExecutor

from fastapi.testclient import TestClient

from src.api import factory
from src.api.factory import create_api
from src.api.static import mount_frontend
from src.core.config import settings
from src.stores.database import Database


def test_request_id_is_echoed(client) -> None:
    response = client.get("/api/rooms", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"


def test_request_id_is_generated_and_reported_on_errors(client) -> None:
    response = client.get("/api/unknown")

    request_id = response.headers["X-Request-ID"]
    assert request_id
    assert response.json()["request_id"] == request_id


def test_health_reports_database(client) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["components"]["database"]["status"] == "healthy"


def test_oversized_body_returns_413(monkeypatch, database, registry) -> None:
    monkeypatch.setattr(settings, "api__max_body_bytes", 64)
    app = create_api(database=database, registry=registry, serve_frontend=False)

    with TestClient(app) as client:
        response = client.post("/api/rooms", json={"id": "R9", "image": "x" * 500})
        small = client.post("/api/rooms", json={"id": "R9"})

    assert response.status_code == 413
    assert response.json()["code"] == "API_PAYLOAD_TOO_LARGE"
    assert small.status_code == 200


def test_chunked_oversized_body_returns_413(monkeypatch, database, registry) -> None:
    monkeypatch.setattr(settings, "api__max_body_bytes", 100)
    app = create_api(database=database, registry=registry, serve_frontend=False)

    def chunks():
        yield b'{"id": "B9", "slip": "'
        for _ in range(50):
            yield b"A" * 100
        yield b'"}'

    with TestClient(app) as client:
        response = client.post(
            "/api/bookings",
            content=chunks(),
            headers={"Content-Type": "application/json"},
        )
        bookings = client.get("/api/bookings").json()

    assert response.status_code == 413
    assert response.json()["code"] == "API_PAYLOAD_TOO_LARGE"
    assert bookings == []


def test_chunked_body_within_limit_is_accepted(client) -> None:
    def chunks():
        yield b'{"id": "B10", '
        yield b'"guest": "Somchai"}'

    response = client.post(
        "/api/bookings",
        content=chunks(),
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 200
    assert response.json() == {"id": "B10", "guest": "Somchai"}


def test_large_base64_slip_is_accepted(client) -> None:
    slip = "data:image/jpeg;base64," + "A" * (2 * 1024 * 1024)

    response = client.post("/api/bookings", json={"id": "B2", "slip": slip})

    assert response.status_code == 200
    (booking,) = client.get("/api/bookings").json()
    assert booking["slip"] == slip


def test_startup_provisioning_can_be_disabled(database, registry) -> None:
    app = create_api(
        database=database,
        registry=registry,
        auto_provision=False,
        serve_frontend=False,
    )

    with TestClient(app) as client:
        response = client.get("/api/rooms")

    assert response.status_code == 500
    assert "no such table" in response.json()["error"]


def test_injected_database_is_not_disposed(monkeypatch, database, registry) -> None:
    disposed = []
    monkeypatch.setattr(database, "dispose", lambda: disposed.append(True))

    app = create_api(database=database, registry=registry, serve_frontend=False)
    with TestClient(app):
        pass

    assert disposed == []


def test_owned_database_is_disposed(monkeypatch, tmp_path) -> None:
    disposed = []
    original = Database

    def tracking_database():
        db = original(f"sqlite:///{tmp_path / 'owned.db'}")
        monkeypatch.setattr(db, "dispose", lambda: disposed.append(True))
        return db

    monkeypatch.setattr(factory, "Database", tracking_database)

    app = create_api(serve_frontend=False)
    with TestClient(app) as client:
        assert client.get("/api/rooms").status_code == 200

    assert disposed == [True]


def test_frontend_is_served_next_to_api(tmp_path, database, registry) -> None:
    (tmp_path / "index.html").write_text("<h1>Serenity</h1>")
    app = create_api(database=database, registry=registry, serve_frontend=False)
    assert mount_frontend(app, str(tmp_path)) is True

    with TestClient(app) as client:
        page = client.get("/")
        rooms = client.get("/api/rooms")

    assert page.status_code == 200
    assert "Serenity" in page.text
    assert rooms.status_code == 200


def test_missing_frontend_directory_is_skipped(tmp_path, database, registry) -> None:
    app = create_api(database=database, registry=registry, serve_frontend=False)

    assert mount_frontend(app, str(tmp_path / "missing")) is False


def test_concurrent_writes_are_all_applied(tmp_path, registry) -> None:
    database = Database(f"sqlite:///{tmp_path / 'hotel.db'}")
    app = create_api(database=database, registry=registry, serve_frontend=False)

    with TestClient(app) as client:

        def create(number: int) -> int:
            return client.post(
                "/api/payments", json={"id": f"P{number}", "amount": number}
            ).status_code

        with ThreadPoolExecutor(max_workers=8) as pool:
            statuses = list(pool.map(create, range(40)))

        payments = client.get("/api/payments").json()

    database.dispose()
    assert statuses == [200] * 40
    assert len(payments) == 40


def test_each_app_gets_its_own_router(database, registry) -> None:
    from src.api import router as router_module

    first = create_api(database=database, registry=registry, serve_frontend=False)
    second = create_api(database=database, registry=registry, serve_frontend=False)

    assert not hasattr(router_module, "router")
    assert first.router.routes is not second.router.routes
    assert "/api/{resource}" in {getattr(r, "path", None) for r in first.routes}
