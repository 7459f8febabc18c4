"""
FastAPI router for the hotel-api API.

Combines the health check with the generic resource routes.
"""

from fastapi import APIRouter

from src.api.endpoints import health_router, resources_router
from src.core.config import settings


def build_router(prefix: str = settings.api__prefix) -> APIRouter:
    """Return the application router with resources mounted under ``prefix``."""
    router = APIRouter()
    router.include_router(health_router)
    router.include_router(resources_router, prefix=prefix)
    return router


__all__ = ["build_router"]
