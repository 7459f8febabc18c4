"""
Models Package

SQLAlchemy table models for hotel-api and the resource registry built from
them. Importing this package registers every table on ``Base.metadata``.
"""

from .app_setting import SETTINGS_ROW_ID, SettingsRow
from .base import Base, BaseRecordModel
from .hotel import Booking, Notification, Payment, Room, User
from .registry import (
    SETTINGS_RESOURCE,
    Descriptor,
    FieldSpec,
    ResourceDescriptor,
    ResourceRegistry,
    SettingsDescriptor,
    build_registry,
    describe_table,
)

__all__ = [
    # Base classes
    "Base",
    "BaseRecordModel",
    # Database models
    "User",
    "Room",
    "Booking",
    "Payment",
    "Notification",
    "SettingsRow",
    "SETTINGS_ROW_ID",
    # Registry
    "SETTINGS_RESOURCE",
    "FieldSpec",
    "ResourceDescriptor",
    "SettingsDescriptor",
    "Descriptor",
    "ResourceRegistry",
    "build_registry",
    "describe_table",
]
