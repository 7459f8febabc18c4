"""
Provisioning Service

One-time setup of the table layout, the singleton settings document and the
demo rows the frontend expects on a fresh install.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from src.core.config import settings
from src.core.error_codes import DatabaseErrorCode
from src.core.exceptions import DatabaseException
from src.core.logger import get_logger
from src.models.registry import (
    SETTINGS_RESOURCE,
    ResourceDescriptor,
    ResourceRegistry,
    SettingsDescriptor,
)
from src.stores.database import Database, describe_error
from src.stores.record_store import RecordStore
from src.stores.settings_store import SettingsDocumentStore

logger = get_logger(__name__)

DEFAULT_SETTINGS_DOCUMENT: Dict[str, Any] = {
    "brand": {
        "name_th": "SERENITY",
        "name_en": "Experience Luxury",
        "slogan": "พักผ่อนในบรรยากาศสุดพิเศษ",
        "address": "123 Beach Road, Phuket",
        "phone": "02-123-4567",
        "email": "info@serenity.com",
        "logo": "",
        "lat": "",
        "lng": "",
        "line_oa": "",
        "checkin": "14:00",
        "checkout": "12:00",
        "policy": "No refund",
        "currency": "THB",
        "lang": "TH",
    },
    "social": {"facebook": "", "line": "", "instagram": ""},
    "theme": {
        "primary": "#c5a028",
        "secondary": "#1a202c",
        "font": "Prompt",
        "size": "16",
    },
    "seo": {
        "title": "Serenity Hotel",
        "desc": "Luxury Hotel",
        "keywords": "hotel, travel",
    },
    "payment_methods": [
        {
            "id": "bank",
            "name": "โอนเงิน",
            "enabled": True,
            "details": "กสิกรไทย 123-4-56789-0",
        },
        {
            "id": "card",
            "name": "บัตรเครดิต",
            "enabled": True,
            "details": "Stripe/Omise",
        },
    ],
}

# Seeded only into empty tables.
DEMO_RECORDS: Dict[str, List[Dict[str, Any]]] = {
    "users": [
        {
            "id": "U1",
            "username": "admin",
            "password": "1234",
            "name": "General Manager",
            "role": "admin",
        },
        {
            "id": "U2",
            "username": "user",
            "password": "1234",
            "name": "Receptionist",
            "role": "staff",
        },
    ],
    "rooms": [
        {
            "id": "R101",
            "name": "Deluxe Garden",
            "price": 2500,
            "status": "available",
            "image": "https://images.unsplash.com/photo-1611892440504-42a792e24d32?w=500",
            "amenities": "WiFi,King Bed",
        },
        {
            "id": "R102",
            "name": "Pool Villa",
            "price": 5900,
            "status": "available",
            "image": "https://images.unsplash.com/photo-1582719478250-c89cae4dc85b?w=500",
            "amenities": "Pool,Jacuzzi",
        },
        {
            "id": "R103",
            "name": "Ocean Suite",
            "price": 8500,
            "status": "available",
            "image": "https://images.unsplash.com/photo-1566665797739-1674de7a421a?w=500",
            "amenities": "Sea View,Butler",
        },
    ],
}


class ProvisioningService:
    """Creates tables and seed data for a registry on a database."""

    def __init__(
        self,
        database: Database,
        registry: ResourceRegistry,
        record_store: Optional[RecordStore] = None,
        settings_store: Optional[SettingsDocumentStore] = None,
    ) -> None:
        self.database = database
        self.registry = registry
        self.record_store = record_store or RecordStore(database)
        self.settings_store = settings_store or SettingsDocumentStore(database)

    def create_tables(self) -> None:
        """Create every registered table that does not exist yet."""
        try:
            for descriptor in self.registry:
                descriptor.table.create(bind=self.database.engine, checkfirst=True)
        except SQLAlchemyError as e:
            logger.error("Failed to create tables: %s", e)
            raise DatabaseException(
                f"Failed to create tables: {describe_error(e)}",
                DatabaseErrorCode.PROVISIONING_FAILED,
            ) from e
        logger.info("Tables ready: %s", ", ".join(self.registry.names()))

    def ensure_settings_document(self) -> bool:
        """Store the default settings document if none exists. Returns True if seeded."""
        descriptor = self.registry.get(SETTINGS_RESOURCE)
        if not isinstance(descriptor, SettingsDescriptor):
            raise TypeError(f"'{SETTINGS_RESOURCE}' is not registered as a document")
        return self.settings_store.ensure_document(
            descriptor, DEFAULT_SETTINGS_DOCUMENT
        )

    def seed_demo_data(self) -> Dict[str, int]:
        """
        Insert the demo rows into tables that are still empty.

        Returns:
            Number of rows seeded per resource
        """
        seeded: Dict[str, int] = {}
        for name, records in DEMO_RECORDS.items():
            if name not in self.registry:
                continue
            descriptor = self.registry.get(name)
            if not isinstance(descriptor, ResourceDescriptor):
                continue
            if self.record_store.count_records(descriptor):
                continue

            logger.info("Seeding %s...", name)
            for record in records:
                self.record_store.insert_record(descriptor, record)
            seeded[name] = len(records)
        return seeded

    def provision(self, seed_demo_data: Optional[bool] = None) -> Dict[str, Any]:
        """
        Run the full provisioning sequence. Safe to run on every startup.

        Args:
            seed_demo_data: Seed demo rows; defaults to the configured value

        Returns:
            Summary of what was created
        """
        if seed_demo_data is None:
            seed_demo_data = settings.provisioning__seed_demo_data

        self.create_tables()
        summary: Dict[str, Any] = {
            "settings_seeded": self.ensure_settings_document(),
            "records_seeded": self.seed_demo_data() if seed_demo_data else {},
        }
        logger.info("Provisioning complete: %s", summary)
        return summary


__all__ = ["DEFAULT_SETTINGS_DOCUMENT", "DEMO_RECORDS", "ProvisioningService"]
