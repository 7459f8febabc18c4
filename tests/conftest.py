from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from src.api.factory import create_api
from src.models import ResourceRegistry, build_registry
from src.services.provisioning_service import ProvisioningService
from src.stores.database import Database


@pytest.fixture
def database() -> Iterator[Database]:
    db = Database("sqlite://")
    yield db
    db.dispose()


@pytest.fixture
def registry() -> ResourceRegistry:
    return build_registry()


@pytest.fixture
def provisioned(database: Database, registry: ResourceRegistry) -> Database:
    ProvisioningService(database, registry).provision(seed_demo_data=True)
    return database


@pytest.fixture
def client(database: Database, registry: ResourceRegistry) -> Iterator[TestClient]:
    app = create_api(
        database=database,
        registry=registry,
        auto_provision=True,
        serve_frontend=False,
    )
    with TestClient(app) as test_client:
        yield test_client
