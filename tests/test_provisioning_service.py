import pytest
from sqlalchemy import inspect

from src.core.error_codes import DatabaseErrorCode
from src.core.exceptions import DatabaseException
from src.services.provisioning_service import (
    DEFAULT_SETTINGS_DOCUMENT,
    ProvisioningService,
)
from src.services.resource_service import ResourceService


def test_provision_creates_tables_and_seeds(database, registry) -> None:
    summary = ProvisioningService(database, registry).provision(seed_demo_data=True)

    assert summary == {
        "settings_seeded": True,
        "records_seeded": {"users": 2, "rooms": 3},
    }
    assert set(inspect(database.engine).get_table_names()) == set(registry.names())


def test_provision_is_idempotent(database, registry) -> None:
    provisioning = ProvisioningService(database, registry)
    provisioning.provision(seed_demo_data=True)

    summary = provisioning.provision(seed_demo_data=True)

    assert summary == {"settings_seeded": False, "records_seeded": {}}
    service = ResourceService(database, registry)
    assert len(service.list_resource("rooms")) == 3
    assert len(service.list_resource("users")) == 2


def test_provision_without_demo_data(database, registry) -> None:
    summary = ProvisioningService(database, registry).provision(seed_demo_data=False)

    service = ResourceService(database, registry)
    assert summary["records_seeded"] == {}
    assert service.list_resource("rooms") == []
    assert service.list_resource("settings") == DEFAULT_SETTINGS_DOCUMENT


def test_existing_settings_document_is_preserved(database, registry) -> None:
    provisioning = ProvisioningService(database, registry)
    provisioning.provision(seed_demo_data=False)
    ResourceService(database, registry).create("settings", {"seo": {"title": "Mine"}})

    provisioning.provision(seed_demo_data=False)

    assert ResourceService(database, registry).list_resource("settings") == {
        "seo": {"title": "Mine"}
    }


def test_seed_skips_tables_with_rows(database, registry) -> None:
    provisioning = ProvisioningService(database, registry)
    provisioning.create_tables()
    ResourceService(database, registry).create("rooms", {"id": "R1"})

    assert provisioning.seed_demo_data() == {"users": 2}


def test_create_tables_failure_is_wrapped(monkeypatch, database, registry) -> None:
    from sqlalchemy import Table
    from sqlalchemy.exc import OperationalError

    def failing_create(*_args, **_kwargs):
        raise OperationalError("CREATE TABLE", {}, Exception("disk I/O error"))

    monkeypatch.setattr(Table, "create", failing_create)

    with pytest.raises(DatabaseException) as exc_info:
        ProvisioningService(database, registry).create_tables()

    assert exc_info.value.error_code == DatabaseErrorCode.PROVISIONING_FAILED
    assert "disk I/O error" in exc_info.value.message
