"""
Stores Package

Data persistence for hotel-api.
Provides clean interfaces for the relational records and the settings document.

This package follows fast-failing import strategy - missing dependencies will
cause immediate import errors rather than graceful degradation.
"""

from .database import Database, PoolStatus, describe_error
from .record_store import RecordStore
from .settings_store import SettingsDocumentStore

# Stores package exports - only components from this package
__all__ = [
    # Database
    "Database",
    "PoolStatus",
    "describe_error",
    # Stores
    "RecordStore",
    "SettingsDocumentStore",
]
