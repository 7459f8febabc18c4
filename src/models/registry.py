"""
Resource Registry

Maps each API resource name to a descriptor resolved once at startup from the
provisioned table layout. Relational resources carry an ordered, typed field
whitelist; the settings document is its own descriptor variant.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict, ValidationError, create_model
from sqlalchemy import Column, MetaData, Table

from src.core.error_codes import ValidationErrorCode
from src.core.exceptions import ResourceNotFoundException, ValidationException
from src.models.app_setting import SETTINGS_ROW_ID
from src.models.base import Base

SETTINGS_RESOURCE = "settings"


@dataclass(frozen=True)
class FieldSpec:
    """One allowed field of a relational resource."""

    name: str
    python_type: type
    primary_key: bool = False


@dataclass(frozen=True)
class ResourceDescriptor:
    """A relational resource backed by one table."""

    name: str
    table: Table
    id_field: str
    fields: Tuple[FieldSpec, ...]
    record_model: Type[BaseModel]

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(spec.name for spec in self.fields)

    def parse_record(self, body: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate a record body against the field whitelist.

        Only fields present in ``body`` are returned, coerced to the column
        types; unknown fields and wrongly typed values are rejected.

        Raises:
            ValidationException: If the body does not fit the resource
        """
        try:
            record = self.record_model.model_validate(body)
        except ValidationError as exc:
            errors = exc.errors(include_url=False, include_context=False)
            unknown = [
                str(err["loc"][0]) for err in errors if err["type"] == "extra_forbidden"
            ]
            if unknown:
                raise ValidationException(
                    f"Unknown fields for resource '{self.name}': {', '.join(unknown)}",
                    ValidationErrorCode.UNKNOWN_FIELD,
                    details={
                        "resource": self.name,
                        "unknown_fields": unknown,
                        "allowed_fields": list(self.field_names),
                    },
                ) from exc
            raise ValidationException(
                f"Invalid field values for resource '{self.name}'",
                ValidationErrorCode.INVALID_INPUT,
                details={
                    "resource": self.name,
                    "validation_errors": [
                        {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
                        for err in errors
                    ],
                },
            ) from exc
        return record.model_dump(exclude_unset=True)


@dataclass(frozen=True)
class SettingsDescriptor:
    """The singleton settings document stored as one serialized row."""

    name: str
    table: Table
    row_id: int = SETTINGS_ROW_ID


Descriptor = Union[ResourceDescriptor, SettingsDescriptor]


class ResourceRegistry:
    """Lookup of resource descriptors by name."""

    def __init__(self, descriptors: List[Descriptor]) -> None:
        self._descriptors: Dict[str, Descriptor] = {d.name: d for d in descriptors}

    def get(self, name: str) -> Descriptor:
        """
        Resolve a resource name.

        Raises:
            ResourceNotFoundException: If the name is not provisioned
        """
        descriptor = self._descriptors.get(name)
        if descriptor is None:
            raise ResourceNotFoundException(
                f"Unknown resource: {name}",
                details={"resource": name, "available": self.names()},
            )
        return descriptor

    def names(self) -> List[str]:
        return sorted(self._descriptors)

    def __contains__(self, name: object) -> bool:
        return name in self._descriptors

    def __iter__(self) -> Iterator[Descriptor]:
        return iter(self._descriptors.values())

    def __len__(self) -> int:
        return len(self._descriptors)


def _python_type(column: Column) -> type:
    try:
        return column.type.python_type
    except NotImplementedError:
        return str


def _record_model_name(table_name: str) -> str:
    return "".join(part.capitalize() for part in table_name.split("_")) + "Record"


def describe_table(table: Table) -> ResourceDescriptor:
    """Build the descriptor of a relational table."""
    primary_keys = [column.key for column in table.primary_key.columns]
    if len(primary_keys) != 1:
        raise ValueError(f"Table '{table.name}' needs exactly one primary key column")

    fields = tuple(
        FieldSpec(
            name=column.key,
            python_type=_python_type(column),
            primary_key=column.primary_key,
        )
        for column in table.columns
    )
    record_model = create_model(
        _record_model_name(table.name),
        __config__=ConfigDict(extra="forbid", coerce_numbers_to_str=True),
        **{spec.name: (Optional[spec.python_type], None) for spec in fields},
    )
    return ResourceDescriptor(
        name=table.name,
        table=table,
        id_field=primary_keys[0],
        fields=fields,
        record_model=record_model,
    )


def build_registry(metadata: Optional[MetaData] = None) -> ResourceRegistry:
    """
    Build the registry from table metadata (defaults to the application's).

    The ``settings`` table becomes the settings-document variant; every other
    table becomes a relational resource.
    """
    metadata = metadata if metadata is not None else Base.metadata
    descriptors: List[Descriptor] = []
    for name, table in metadata.tables.items():
        if name == SETTINGS_RESOURCE:
            descriptors.append(SettingsDescriptor(name=name, table=table))
        else:
            descriptors.append(describe_table(table))
    return ResourceRegistry(descriptors)


__all__ = [
    "SETTINGS_RESOURCE",
    "FieldSpec",
    "ResourceDescriptor",
    "SettingsDescriptor",
    "Descriptor",
    "ResourceRegistry",
    "describe_table",
    "build_registry",
]
