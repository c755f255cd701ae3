# =============================================================================
# core/models/resource.py - Resource Descriptor
# =============================================================================
# Declarative, immutable definition of one business entity:
# - name: plural entity name used for paths and the default tag ("tasks")
# - fields: explicit list of business columns (name, type, nullable, default)
# - relations: dependents that receive cascade soft-delete
# - schema_overrides: hand-written pydantic models replacing derivation
# - disabled: operations that must not be registered
#
# Every table additionally carries the common columns below. They are
# implied by the descriptor and never declared per entity.
#
# Descriptors are built once at import time and never mutated. Deriving
# schemas and routes from them is an explicit, separate step
# (see core/services/schema_deriver.py and core/services/route_config.py).
# =============================================================================

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel


# =============================================================================
# Common Columns
# =============================================================================

ID_COLUMN = "id"
TENANT_COLUMN = "organizationId"
CREATED_AT = "created_at"
UPDATED_AT = "updated_at"
DELETED_AT = "deleted_at"
CREATED_BY = "created_by"
UPDATED_BY = "updated_by"
DELETED_BY = "deleted_by"

# Never returned to clients
SELECT_OMITTED_COLUMNS: frozenset[str] = frozenset({
    TENANT_COLUMN,
    CREATED_AT,
    UPDATED_AT,
    DELETED_AT,
    CREATED_BY,
    UPDATED_BY,
    DELETED_BY,
})

# Never client-writable
INSERT_OMITTED_COLUMNS: frozenset[str] = SELECT_OMITTED_COLUMNS | {ID_COLUMN}

COMMON_COLUMNS: frozenset[str] = INSERT_OMITTED_COLUMNS

_ENTITY_NAME = re.compile(r"^[a-z][a-z0-9_-]*$")


class _Missing:
    """Sentinel for 'no default declared' (None is a legitimate default)."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


# =============================================================================
# Field Specification
# =============================================================================

class FieldType(str, Enum):
    """
    Semantic column types a business field can declare.

    Each maps to the Python type used in the derived pydantic models.
    """
    TEXT = "text"
    INTEGER = "integer"
    NUMERIC = "numeric"
    BOOLEAN = "boolean"
    DATE = "date"
    TIMESTAMP = "timestamp"
    UUID = "uuid"
    JSON = "json"

    @property
    def python_type(self) -> type:
        return _PYTHON_TYPES[self]


_PYTHON_TYPES: dict[FieldType, type] = {
    FieldType.TEXT: str,
    FieldType.INTEGER: int,
    FieldType.NUMERIC: Decimal,
    FieldType.BOOLEAN: bool,
    FieldType.DATE: date,
    FieldType.TIMESTAMP: datetime,
    FieldType.UUID: UUID,
    FieldType.JSON: dict,
}


@dataclass(frozen=True)
class FieldSpec:
    """
    One business column.

    A field that is nullable or has a default is optional on insert.

    Example:
        FieldSpec("completed", FieldType.BOOLEAN, default=False)
    """
    name: str
    type: FieldType
    nullable: bool = False
    default: Any = MISSING
    description: str | None = None
    example: Any = None

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    @property
    def required_on_insert(self) -> bool:
        return not (self.nullable or self.has_default)


# =============================================================================
# Relations
# =============================================================================

@dataclass(frozen=True)
class Relation:
    """
    Declared parent -> dependent link used for cascade soft-delete.

    Attributes:
        parent: Entity name of the parent (must equal the owning descriptor's name)
        child_table: Storage table holding the dependent rows
        foreign_key: Column on child_table referencing the parent id,
            conventionally "<parent-singular>Id" (see lib.utils.foreign_key_for)
    """
    parent: str
    child_table: str
    foreign_key: str


# =============================================================================
# Operations & Overrides
# =============================================================================

class Operation(str, Enum):
    """The five generated operations."""
    LIST = "list"
    GET = "get"
    CREATE = "create"
    PATCH = "patch"
    DELETE = "delete"


@dataclass(frozen=True)
class SchemaOverrides:
    """
    Hand-written models that replace derivation.

    The override is authoritative: fields it names are not cross-checked
    against the declared columns.
    """
    select: type[BaseModel] | None = None
    insert: type[BaseModel] | None = None
    patch: type[BaseModel] | None = None


# =============================================================================
# Resource Descriptor
# =============================================================================

@dataclass(frozen=True)
class ResourceDescriptor:
    """
    Immutable declaration of one entity.

    Raises:
        ValueError: On an invalid name, a field colliding with a common
            column, duplicate field names, or a relation owned by another
            entity.

    Example:
        tasks = ResourceDescriptor(
            name="tasks",
            fields=(
                FieldSpec("title", FieldType.TEXT),
                FieldSpec("completed", FieldType.BOOLEAN, default=False),
            ),
            tags=("Tasks",),
        )
    """
    name: str
    fields: tuple[FieldSpec, ...] = ()
    table: str | None = None
    relations: tuple[Relation, ...] = ()
    tags: tuple[str, ...] = ()
    disabled: frozenset[Operation] = field(default_factory=frozenset)
    schema_overrides: SchemaOverrides = field(default_factory=SchemaOverrides)
    description: str | None = None

    def __post_init__(self) -> None:
        if not _ENTITY_NAME.match(self.name):
            raise ValueError(
                f"Invalid entity name {self.name!r}: use lowercase letters, digits, '-' or '_'"
            )

        names = [f.name for f in self.fields]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate field names in {self.name}: {names}")

        reserved = COMMON_COLUMNS.intersection(names)
        if reserved:
            raise ValueError(
                f"Fields {sorted(reserved)} of {self.name} collide with common columns"
            )

        for relation in self.relations:
            if relation.parent != self.name:
                raise ValueError(
                    f"Relation {relation} is declared on {self.name} but names parent {relation.parent!r}"
                )

        # Accept lists for convenience while keeping the value hashable
        object.__setattr__(self, "fields", tuple(self.fields))
        object.__setattr__(self, "relations", tuple(self.relations))
        object.__setattr__(self, "tags", tuple(self.tags))
        object.__setattr__(self, "disabled", frozenset(Operation(op) for op in self.disabled))

    @property
    def table_name(self) -> str:
        return self.table or self.name

    @property
    def title(self) -> str:
        """Capitalized entity name, the default documentation tag."""
        return self.name[:1].upper() + self.name[1:]

    @property
    def enabled_operations(self) -> list[Operation]:
        return [op for op in Operation if op not in self.disabled]

    def is_enabled(self, operation: Operation) -> bool:
        return operation not in self.disabled

    def get_field(self, name: str) -> FieldSpec | None:
        return next((f for f in self.fields if f.name == name), None)
