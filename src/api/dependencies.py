"""
API Dependencies

FastAPI dependencies handing the application-owned datastore handle and
resource registry to request handlers.
"""

from fastapi import Depends, Request

from src.models.registry import ResourceRegistry
from src.services.resource_service import ResourceService
from src.stores.database import Database


def get_database(request: Request) -> Database:
    """Return the Database created for this application."""
    return request.app.state.database


def get_registry(request: Request) -> ResourceRegistry:
    """Return the resource registry resolved at startup."""
    return request.app.state.registry


def get_resource_service(
    database: Database = Depends(get_database),
    registry: ResourceRegistry = Depends(get_registry),
) -> ResourceService:
    """Build the resource service for one request."""
    return ResourceService(database, registry)


__all__ = ["get_database", "get_registry", "get_resource_service"]
