"""
API Endpoints Package

FastAPI endpoint definitions for hotel-api.
"""

from .health import router as health_router
from .resources import router as resources_router

__all__ = ["health_router", "resources_router"]
