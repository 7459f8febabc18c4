"""
Resource Service

The generic store adapter: resolves a resource name through the registry and
turns list/create/update/remove calls into store operations. Relational
resources go through the field whitelist; the settings document is stored and
replaced as one opaque JSON value.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from src.core.error_codes import ValidationErrorCode
from src.core.exceptions import UnsupportedOperationException, ValidationException
from src.core.logger import get_logger
from src.models.registry import (
    Descriptor,
    ResourceDescriptor,
    ResourceRegistry,
    SettingsDescriptor,
)
from src.stores.database import Database
from src.stores.record_store import RecordStore
from src.stores.settings_store import SettingsDocumentStore

logger = get_logger(__name__)

ACKNOWLEDGEMENT: Dict[str, Any] = {"success": True}


class ResourceService:
    """Generic CRUD over every registered resource."""

    def __init__(
        self,
        database: Database,
        registry: ResourceRegistry,
        record_store: Optional[RecordStore] = None,
        settings_store: Optional[SettingsDocumentStore] = None,
    ) -> None:
        self.registry = registry
        self.record_store = record_store or RecordStore(database)
        self.settings_store = settings_store or SettingsDocumentStore(database)

    def _resolve(self, resource: str) -> Descriptor:
        return self.registry.get(resource)

    def list_resource(
        self, resource: str
    ) -> Union[List[Dict[str, Any]], Dict[str, Any]]:
        """
        Return all records of a resource, or the settings document.

        A missing settings row reads as an empty document.
        """
        descriptor = self._resolve(resource)
        if isinstance(descriptor, SettingsDescriptor):
            return self.settings_store.get_document(descriptor) or {}
        return self.record_store.list_records(descriptor)

    def create(self, resource: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a record built from the body's fields.

        For the settings document the body replaces the stored document
        (create-or-replace) and an acknowledgement is returned.
        """
        descriptor = self._resolve(resource)
        if isinstance(descriptor, SettingsDescriptor):
            self._replace_settings(descriptor, body)
            return dict(ACKNOWLEDGEMENT)

        values = descriptor.parse_record(body)
        if values.get(descriptor.id_field) in (None, ""):
            raise ValidationException(
                f"Field '{descriptor.id_field}' is required to create a "
                f"{descriptor.name} record",
                ValidationErrorCode.MISSING_FIELD,
                details={"resource": descriptor.name, "field": descriptor.id_field},
            )
        return self.record_store.insert_record(descriptor, values)

    def update(self, resource: str, record_id: str, body: Dict[str, Any]) -> None:
        """
        Patch exactly the fields present in the body; others stay untouched.

        An empty body is a no-op. The id may be repeated in the body but not
        changed.
        """
        descriptor = self._resolve(resource)
        if isinstance(descriptor, SettingsDescriptor):
            # Unlike other tables, the settings row is never patched per field;
            # POST replaces the whole document.
            raise UnsupportedOperationException(
                "The settings document is replaced with POST, not updated by id",
                details={"resource": descriptor.name, "operation": "update"},
            )

        values = self._patch_values(descriptor, record_id, body)
        if not values:
            logger.debug("Empty update for %s/%s ignored", descriptor.name, record_id)
            return
        self.record_store.update_record(descriptor, record_id, values)

    def remove(self, resource: str, record_id: str) -> None:
        """Delete a record by id; deleting a missing id still succeeds."""
        descriptor = self._resolve(resource)
        if isinstance(descriptor, SettingsDescriptor):
            raise UnsupportedOperationException(
                "The settings document cannot be deleted",
                details={"resource": descriptor.name, "operation": "delete"},
            )
        self.record_store.delete_record(descriptor, record_id)

    def _replace_settings(
        self, descriptor: SettingsDescriptor, document: Dict[str, Any]
    ) -> None:
        if not isinstance(document, dict):
            raise ValidationException(
                "The settings document must be a JSON object",
                ValidationErrorCode.INVALID_INPUT,
                details={"resource": descriptor.name},
            )
        self.settings_store.replace_document(descriptor, document)

    @staticmethod
    def _patch_values(
        descriptor: ResourceDescriptor, record_id: str, body: Dict[str, Any]
    ) -> Dict[str, Any]:
        values = descriptor.parse_record(body)
        if descriptor.id_field in values:
            supplied = values.pop(descriptor.id_field)
            if supplied != record_id:
                raise ValidationException(
                    f"Field '{descriptor.id_field}' cannot be changed",
                    ValidationErrorCode.IMMUTABLE_FIELD,
                    details={
                        "resource": descriptor.name,
                        "record_id": record_id,
                        "supplied": supplied,
                    },
                )
        return values


__all__ = ["ACKNOWLEDGEMENT", "ResourceService"]
