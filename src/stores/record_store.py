"""
Record Store

Data access for relational resources. Statements are built with SQLAlchemy
Core from a resource descriptor and the caller's field set, so column lists
come from validated keys and every value is a bound parameter.
"""

from typing import Any, Dict, List

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from src.core.error_codes import DatabaseErrorCode
from src.core.exceptions import DatabaseException
from src.core.logger import get_logger
from src.models.registry import ResourceDescriptor
from src.stores.database import Database, describe_error

logger = get_logger(__name__)


class RecordStore:
    """Store class for generic record operations."""

    def __init__(self, database: Database) -> None:
        self.database = database

    def _failure(
        self, exc: SQLAlchemyError, action: str, descriptor: ResourceDescriptor
    ) -> DatabaseException:
        logger.error("Failed to %s %s: %s", action, descriptor.name, exc)
        return DatabaseException(
            f"Failed to {action} {descriptor.name}: {describe_error(exc)}",
            DatabaseErrorCode.QUERY_FAILED,
            details={"resource": descriptor.name},
        )

    def list_records(self, descriptor: ResourceDescriptor) -> List[Dict[str, Any]]:
        """
        Return every row of a resource in the datastore's natural order.

        Raises:
            DatabaseException: If the query fails
        """
        with self.database.session() as db:
            try:
                rows = db.execute(select(descriptor.table)).mappings().all()
            except SQLAlchemyError as e:
                raise self._failure(e, "list", descriptor) from e

        logger.debug("Retrieved %d %s", len(rows), descriptor.name)
        return [dict(row) for row in rows]

    def count_records(self, descriptor: ResourceDescriptor) -> int:
        with self.database.session() as db:
            try:
                return db.execute(
                    select(func.count()).select_from(descriptor.table)
                ).scalar_one()
            except SQLAlchemyError as e:
                raise self._failure(e, "count", descriptor) from e

    def insert_record(
        self, descriptor: ResourceDescriptor, values: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Insert one row whose columns are exactly the keys of ``values``.

        Columns not supplied keep their storage defaults.

        Returns:
            The inserted values merged with any datastore-assigned identifier

        Raises:
            DatabaseException: If the insert fails (e.g. duplicate id)
        """
        with self.database.transaction() as db:
            try:
                result = db.execute(insert(descriptor.table).values(**values))
                primary_key = result.inserted_primary_key
            except SQLAlchemyError as e:
                raise self._failure(e, "create record in", descriptor) from e

        created = dict(values)
        if primary_key and primary_key[0] is not None:
            created.setdefault(descriptor.id_field, primary_key[0])

        logger.info(
            "Created %s record: %s", descriptor.name, created.get(descriptor.id_field)
        )
        return created

    def update_record(
        self, descriptor: ResourceDescriptor, record_id: str, values: Dict[str, Any]
    ) -> int:
        """
        Assign exactly the given fields on one row, as a single statement.

        Returns:
            Number of rows matched

        Raises:
            DatabaseException: If the update fails
        """
        id_column = descriptor.table.c[descriptor.id_field]
        stmt = update(descriptor.table).where(id_column == record_id).values(**values)

        with self.database.transaction() as db:
            try:
                rowcount = db.execute(stmt).rowcount
            except SQLAlchemyError as e:
                raise self._failure(e, "update record in", descriptor) from e

        logger.info(
            "Updated %s record %s (%s), %d row(s) matched",
            descriptor.name,
            record_id,
            ", ".join(values),
            rowcount,
        )
        return rowcount

    def delete_record(self, descriptor: ResourceDescriptor, record_id: str) -> int:
        """
        Delete one row by id. A missing id is not an error.

        Returns:
            Number of rows deleted

        Raises:
            DatabaseException: If the delete fails
        """
        id_column = descriptor.table.c[descriptor.id_field]
        stmt = delete(descriptor.table).where(id_column == record_id)

        with self.database.transaction() as db:
            try:
                rowcount = db.execute(stmt).rowcount
            except SQLAlchemyError as e:
                raise self._failure(e, "delete record from", descriptor) from e

        logger.info(
            "Deleted %s record %s, %d row(s) removed",
            descriptor.name,
            record_id,
            rowcount,
        )
        return rowcount


__all__ = ["RecordStore"]
