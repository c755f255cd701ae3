# =============================================================================
# tests/test_schema_deriver.py - Schema Derivation Tests
# =============================================================================
# Unit tests for Select / Insert / Patch derivation:
# - Server-owned columns never appear in any schema
# - Insert optionality follows nullable / default
# - Patch accepts {} and keeps field constraints
# - Overrides replace derivation
#
# Run with: pytest tests/test_schema_deriver.py -v
# =============================================================================

from datetime import date
from typing import Optional

import pytest
from pydantic import BaseModel, Field, ValidationError

from core.models.resource import (
    INSERT_OMITTED_COLUMNS,
    SELECT_OMITTED_COLUMNS,
    FieldSpec,
    FieldType,
    ResourceDescriptor,
    SchemaOverrides,
)
from core.resources import REGISTERED_RESOURCES, expenses, tasks
from core.services.schema_deriver import (
    SchemaDerivationError,
    derive_patch,
    derive_schemas,
    example_payload,
    model_base_name,
)

from tests.conftest import TEST_RESOURCES


# =============================================================================
# Column Exclusion
# =============================================================================

class TestServerOwnedColumns:
    """Tenant, audit and soft-delete columns are never client-visible."""

    @pytest.mark.parametrize("descriptor", TEST_RESOURCES, ids=lambda d: d.name)
    def test_select_omits_tenant_and_audit_columns(self, descriptor):
        select = derive_schemas(descriptor).select

        assert "id" in select.model_fields
        assert not SELECT_OMITTED_COLUMNS & set(select.model_fields)

    @pytest.mark.parametrize("descriptor", TEST_RESOURCES, ids=lambda d: d.name)
    def test_insert_omits_id_and_server_columns(self, descriptor):
        insert = derive_schemas(descriptor).insert

        assert not INSERT_OMITTED_COLUMNS & set(insert.model_fields)

    def test_select_drops_extra_row_columns(self, task_schemas):
        """Rows from storage carry every column; only the Select fields survive."""
        row = {
            "id": 3,
            "title": "Buy milk",
            "description": None,
            "completed": False,
            "organizationId": "org-a",
            "created_by": "user-a",
            "deleted_at": None,
        }

        dumped = task_schemas.select.model_validate(row).model_dump()

        assert dumped == {"id": 3, "title": "Buy milk", "description": None, "completed": False}

    def test_insert_strips_server_owned_keys(self, task_schemas):
        body = task_schemas.insert.model_validate({
            "title": "Buy milk",
            "id": 99,
            "organizationId": "someone-else",
        })

        assert "organizationId" not in body.model_dump()
        assert "id" not in body.model_dump()


# =============================================================================
# Insert Schema
# =============================================================================

class TestInsertSchema:
    """Tests for insert optionality rules."""

    def test_required_field(self, task_schemas):
        with pytest.raises(ValidationError) as exc_info:
            task_schemas.insert.model_validate({})

        errors = exc_info.value.errors()
        assert [e["loc"] for e in errors] == [("title",)]
        assert errors[0]["type"] == "missing"

    def test_nullable_and_default_fields_are_optional(self, task_schemas):
        body = task_schemas.insert.model_validate({"title": "Buy milk"})

        assert body.model_dump() == {"title": "Buy milk", "description": None, "completed": False}

    def test_date_field_parses_iso_string(self):
        insert = derive_schemas(expenses).insert

        body = insert.model_validate({
            "title": "Team lunch",
            "amount": "42.50",
            "category": "Meals",
            "date": "2024-01-15",
        })

        assert body.date == date(2024, 1, 15)
        assert body.model_dump(mode="json")["date"] == "2024-01-15"


# =============================================================================
# Patch Schema
# =============================================================================

class TestPatchSchema:
    """Tests for the partial update schema."""

    @pytest.mark.parametrize("descriptor", REGISTERED_RESOURCES, ids=lambda d: d.name)
    def test_accepts_empty_object(self, descriptor):
        patch = derive_schemas(descriptor).patch

        assert patch.model_validate({}).model_dump(exclude_unset=True) == {}

    def test_tracks_only_present_fields(self, task_schemas):
        body = task_schemas.patch.model_validate({"completed": True})

        assert body.model_dump(exclude_unset=True) == {"completed": True}

    def test_null_rejected_for_non_nullable_field(self, task_schemas):
        with pytest.raises(ValidationError):
            task_schemas.patch.model_validate({"title": None})

    def test_null_accepted_for_nullable_field(self, task_schemas):
        body = task_schemas.patch.model_validate({"description": None})

        assert body.model_dump(exclude_unset=True) == {"description": None}

    def test_constraints_are_preserved(self):
        class ScoreInsert(BaseModel):
            score: int = Field(..., ge=0, le=10)

        patch = derive_patch(ScoreInsert)

        assert patch.model_validate({"score": 5}).score == 5
        with pytest.raises(ValidationError):
            patch.model_validate({"score": 11})

    def test_override_rejecting_empty_object_fails(self):
        class StrictPatch(BaseModel):
            title: str

        class StrictInsert(BaseModel):
            title: str

        with pytest.raises(SchemaDerivationError) as exc_info:
            derive_patch(StrictInsert, override=StrictPatch)

        assert exc_info.value.code == "SCHEMA_DERIVATION_ERROR"


# =============================================================================
# Overrides & Naming
# =============================================================================

class TestOverrides:
    """Hand-written models replace derivation verbatim."""

    def test_insert_override_shapes_patch(self):
        class NoteInsert(BaseModel):
            body: str = Field(..., max_length=5)
            pinned: Optional[bool] = None

        notes = ResourceDescriptor(
            name="notes",
            fields=(FieldSpec("body", FieldType.TEXT),),
            schema_overrides=SchemaOverrides(insert=NoteInsert),
        )

        schemas = derive_schemas(notes)

        assert schemas.insert is NoteInsert
        # pinned is not a declared field; the override is authoritative
        assert set(schemas.patch.model_fields) == {"body", "pinned"}
        with pytest.raises(ValidationError):
            schemas.patch.model_validate({"body": "too long"})

    def test_select_override_used_verbatim(self):
        class NoteSelect(BaseModel):
            id: int

        notes = ResourceDescriptor(
            name="notes",
            fields=(FieldSpec("body", FieldType.TEXT),),
            schema_overrides=SchemaOverrides(select=NoteSelect),
        )

        assert derive_schemas(notes).select is NoteSelect

    @pytest.mark.parametrize("name,expected", [
        ("tasks", "Task"),
        ("categories", "Category"),
        ("expense-reports", "ExpenseReport"),
        ("line_items", "LineItem"),
    ])
    def test_model_base_name(self, name, expected):
        assert model_base_name(ResourceDescriptor(name=name)) == expected

    def test_model_names(self, task_schemas):
        assert task_schemas.select.__name__ == "TaskSelect"
        assert task_schemas.insert.__name__ == "TaskInsert"
        assert task_schemas.patch.__name__ == "TaskPatch"


# =============================================================================
# Documentation Examples
# =============================================================================

class TestExamplePayload:
    """Tests for generated documentation examples."""

    def test_prefers_declared_examples_then_defaults(self, task_schemas):
        example = example_payload(task_schemas.select)

        assert example == {
            "id": 1,
            "title": "Buy milk",
            "description": "Two litres, semi-skimmed",
            "completed": False,
        }

    def test_placeholder_for_undocumented_fields(self):
        schemas = derive_schemas(ResourceDescriptor(
            name="events",
            fields=(
                FieldSpec("starts_on", FieldType.DATE),
                FieldSpec("note", FieldType.TEXT, nullable=True),
            ),
        ))

        example = example_payload(schemas.insert)

        assert example == {"starts_on": "2024-01-15", "note": "string"}

    def test_registered_resources_cover_tasks(self):
        assert tasks in REGISTERED_RESOURCES
