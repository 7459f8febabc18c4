"""
API Package

Main API package for hotel-api.
"""

from .factory import create_api
from .router import build_router

__all__ = ["build_router", "create_api"]
