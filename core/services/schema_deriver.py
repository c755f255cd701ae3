# =============================================================================
# core/services/schema_deriver.py - Select / Insert / Patch Schema Derivation
# =============================================================================
# Builds the three pydantic models every resource exposes from its
# ResourceDescriptor's explicit field list:
#
#   Select: id + business fields       (what clients read)
#   Insert: business fields only       (what clients may create)
#   Patch:  Insert, every field optional (what clients may update)
#
# Tenant, audit and soft-delete columns never appear in any of them, so
# they can neither leak out nor be written by a client.
#
# Overrides: a descriptor may supply hand-written models. An override
# replaces derivation entirely and is NOT cross-checked against the
# declared fields - a field named only in the override is accepted as-is.
#
# Usage:
#   schemas = derive_schemas(tasks_descriptor)
#   schemas.insert.model_validate({"title": "Buy milk"})
# =============================================================================

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any, Optional, Union, get_args, get_origin
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError, create_model
from pydantic_core import PydanticUndefined

from core.models.resource import (
    ID_COLUMN,
    INSERT_OMITTED_COLUMNS,
    SELECT_OMITTED_COLUMNS,
    FieldSpec,
    ResourceDescriptor,
)
from lib.utils import ApplicationError, singularize

logger = logging.getLogger(__name__)


class SchemaDerivationError(ApplicationError):
    """Raised at startup when a descriptor cannot produce valid schemas."""

    def __init__(self, message: str, **kwargs: Any):
        kwargs.setdefault("code", "SCHEMA_DERIVATION_ERROR")
        super().__init__(message, **kwargs)


@dataclass(frozen=True)
class ResourceSchemas:
    """The three models derived for one resource."""
    select: type[BaseModel]
    insert: type[BaseModel]
    patch: type[BaseModel]


# Rows coming back from storage carry every column; extras are dropped.
_SELECT_CONFIG = ConfigDict(extra="ignore", from_attributes=True)

# Unknown or server-owned keys in a request body are stripped, not rejected.
_WRITE_CONFIG = ConfigDict(extra="ignore")


def model_base_name(descriptor: ResourceDescriptor) -> str:
    """tasks -> Task, expense-reports -> ExpenseReport"""
    parts = re.split(r"[-_]", singularize(descriptor.name))
    return "".join(part.capitalize() for part in parts if part)


def _field_kwargs(column: FieldSpec) -> dict[str, Any]:
    kwargs: dict[str, Any] = {}
    if column.description:
        kwargs["description"] = column.description
    if column.example is not None:
        kwargs["examples"] = [column.example]
    return kwargs


def _annotation(column: FieldSpec) -> Any:
    python_type = column.type.python_type
    return Optional[python_type] if column.nullable else python_type


def _column_field(column: FieldSpec) -> tuple[Any, Any]:
    # Same optionality rules as a column on INSERT: a default or nullable
    # column may be omitted.
    kwargs = _field_kwargs(column)
    if column.has_default:
        return _annotation(column), Field(default=column.default, **kwargs)
    if column.nullable:
        return _annotation(column), Field(default=None, **kwargs)
    return _annotation(column), Field(..., **kwargs)


def derive_select(
    descriptor: ResourceDescriptor,
    override: type[BaseModel] | None = None,
) -> type[BaseModel]:
    """
    Model returned to clients: id plus every business field.

    Args:
        descriptor: The resource declaration
        override: Hand-written model used verbatim instead of derivation

    Returns:
        A pydantic model class named "<Entity>Select"
    """
    if override is not None:
        return override

    fields: dict[str, Any] = {
        ID_COLUMN: (int, Field(..., ge=1, examples=[1], description="Unique identifier")),
    }
    for column in descriptor.fields:
        if column.name in SELECT_OMITTED_COLUMNS:
            continue
        fields[column.name] = _column_field(column)

    return create_model(
        f"{model_base_name(descriptor)}Select",
        __config__=_SELECT_CONFIG,
        **fields,
    )


def derive_insert(
    descriptor: ResourceDescriptor,
    override: type[BaseModel] | None = None,
) -> type[BaseModel]:
    """
    Model accepted on create: business fields only.

    id, tenant, audit and soft-delete columns are never part of it.
    """
    if override is not None:
        return override

    fields = {
        column.name: _column_field(column)
        for column in descriptor.fields
        if column.name not in INSERT_OMITTED_COLUMNS
    }

    return create_model(
        f"{model_base_name(descriptor)}Insert",
        __config__=_WRITE_CONFIG,
        **fields,
    )


def derive_patch(
    insert_schema: type[BaseModel],
    override: type[BaseModel] | None = None,
    name: str | None = None,
) -> type[BaseModel]:
    """
    Model accepted on update: the insert model with every field optional.

    Field constraints (lengths, bounds) are preserved. A field's type is
    NOT widened to accept null, so `{"title": null}` is still rejected for
    a non-nullable column; only omission is allowed.

    Raises:
        SchemaDerivationError: If the resulting model rejects `{}`
            (a no-op update must always be legal).
    """
    if override is not None:
        patch = override
    else:
        fields: dict[str, Any] = {}
        for field_name, info in insert_schema.model_fields.items():
            annotation = info.annotation
            if info.metadata:
                annotation = Annotated[(annotation, *info.metadata)]
            fields[field_name] = (
                annotation,
                Field(
                    default=None,
                    alias=info.alias,
                    description=info.description,
                    examples=info.examples,
                ),
            )

        patch_name = name or re.sub(r"Insert$", "", insert_schema.__name__) + "Patch"
        patch = create_model(patch_name, __config__=_WRITE_CONFIG, **fields)

    try:
        patch.model_validate({})
    except ValidationError as e:
        raise SchemaDerivationError(
            f"Patch schema {patch.__name__} rejects an empty object",
            suggestion="Every field of a patch schema must be optional",
            details={"errors": e.errors(include_url=False)},
        ) from e

    return patch


def derive_schemas(descriptor: ResourceDescriptor) -> ResourceSchemas:
    """
    Derive (or take from overrides) all three models for a descriptor.

    The patch model is derived from the effective insert model, so an
    insert override also shapes the default patch model.
    """
    overrides = descriptor.schema_overrides

    select = derive_select(descriptor, overrides.select)
    insert = derive_insert(descriptor, overrides.insert)
    patch = derive_patch(
        insert,
        overrides.patch,
        name=f"{model_base_name(descriptor)}Patch",
    )

    logger.debug(
        f"Derived schemas for {descriptor.name}: "
        f"{select.__name__}, {insert.__name__}, {patch.__name__}"
    )
    return ResourceSchemas(select=select, insert=insert, patch=patch)


# =============================================================================
# Documentation Examples
# =============================================================================

_PLACEHOLDERS: dict[type, Any] = {
    str: "string",
    int: 1,
    float: 1.5,
    Decimal: "9.99",
    bool: False,
    date: "2024-01-15",
    datetime: "2024-01-15T10:30:00Z",
    UUID: "550e8400-e29b-41d4-a716-446655440000",
    dict: {},
    list: [],
}


def _placeholder(annotation: Any) -> Any:
    origin = get_origin(annotation)

    if origin is Annotated:
        return _placeholder(get_args(annotation)[0])
    if origin is Union or (origin is not None and type(None) in get_args(annotation)):
        non_null = [a for a in get_args(annotation) if a is not type(None)]
        return _placeholder(non_null[0]) if non_null else None
    if origin in (list, tuple, set):
        return []
    if origin is dict:
        return {}
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return example_payload(annotation)

    return _PLACEHOLDERS.get(annotation, "string")


def example_payload(model: type[BaseModel]) -> dict[str, Any]:
    """
    Literal example object for a model, used in generated documentation.

    Preference order per field: declared example, declared default,
    placeholder for the field type.
    """
    example: dict[str, Any] = {}
    for field_name, info in model.model_fields.items():
        key = info.alias or field_name
        if info.examples:
            example[key] = info.examples[0]
        elif info.default is not PydanticUndefined and info.default is not None:
            example[key] = info.default
        else:
            example[key] = _placeholder(info.annotation)
    return example
