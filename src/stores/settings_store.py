"""Store for the settings document persisted as one JSON text row."""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from sqlalchemy import insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from src.core.error_codes import DatabaseErrorCode
from src.core.exceptions import DatabaseException
from src.core.logger import get_logger
from src.models.registry import SettingsDescriptor
from src.stores.database import Database, describe_error

logger = get_logger(__name__)


def _failure(exc: SQLAlchemyError, action: str) -> DatabaseException:
    logger.error("Failed to %s settings document: %s", action, exc)
    return DatabaseException(
        f"Failed to {action} settings document: {describe_error(exc)}",
        DatabaseErrorCode.QUERY_FAILED,
    )


class SettingsDocumentStore:
    """Read and replace the singleton settings document."""

    def __init__(self, database: Database) -> None:
        self.database = database

    def get_document(self, descriptor: SettingsDescriptor) -> Optional[Dict[str, Any]]:
        """Return the parsed document, or None when no row exists."""
        table = descriptor.table
        with self.database.session() as db:
            try:
                data = db.execute(
                    select(table.c.data).where(table.c.id == descriptor.row_id)
                ).scalar_one_or_none()
            except SQLAlchemyError as exc:
                raise _failure(exc, "load") from exc

        if data is None:
            return None
        try:
            return json.loads(data)
        except ValueError as exc:
            logger.error("Stored settings document is not valid JSON: %s", exc)
            raise DatabaseException(
                f"Stored settings document is not valid JSON: {exc}",
                DatabaseErrorCode.CORRUPT_DOCUMENT,
            ) from exc

    def replace_document(
        self, descriptor: SettingsDescriptor, document: Dict[str, Any]
    ) -> bool:
        """
        Replace the whole document, creating the row if it is missing.

        Returns:
            True if the row had to be created
        """
        table = descriptor.table
        payload = json.dumps(document, ensure_ascii=False)
        with self.database.transaction() as db:
            try:
                replaced = db.execute(
                    update(table)
                    .where(table.c.id == descriptor.row_id)
                    .values(data=payload)
                ).rowcount
                if not replaced:
                    db.execute(insert(table).values(id=descriptor.row_id, data=payload))
            except SQLAlchemyError as exc:
                raise _failure(exc, "persist") from exc

        logger.info(
            "Persisted settings document (%s)", "replaced" if replaced else "created"
        )
        return not replaced

    def ensure_document(
        self, descriptor: SettingsDescriptor, default: Dict[str, Any]
    ) -> bool:
        """
        Insert ``default`` when no settings row exists yet.

        Returns:
            True if the row was created
        """
        table = descriptor.table
        with self.database.transaction() as db:
            try:
                exists = db.execute(
                    select(table.c.id).where(table.c.id == descriptor.row_id)
                ).first()
                if exists is not None:
                    return False
                db.execute(
                    insert(table).values(
                        id=descriptor.row_id,
                        data=json.dumps(default, ensure_ascii=False),
                    )
                )
            except SQLAlchemyError as exc:
                raise _failure(exc, "seed") from exc

        logger.info("Seeded default settings document")
        return True


__all__ = ["SettingsDocumentStore"]
