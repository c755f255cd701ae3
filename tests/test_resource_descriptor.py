# =============================================================================
# tests/test_resource_descriptor.py - Resource Descriptor Tests
# =============================================================================
# Run with: pytest tests/test_resource_descriptor.py -v
# =============================================================================

import dataclasses

import pytest

from core.models.resource import (
    FieldSpec,
    FieldType,
    Operation,
    Relation,
    ResourceDescriptor,
)
from lib.utils import foreign_key_for, singularize


class TestValidation:
    """Invalid declarations fail at import time."""

    @pytest.mark.parametrize("name", ["Tasks", "1tasks", "tasks/archive", ""])
    def test_invalid_names(self, name):
        with pytest.raises(ValueError):
            ResourceDescriptor(name=name)

    def test_common_column_collision(self):
        with pytest.raises(ValueError, match="common columns"):
            ResourceDescriptor(name="tasks", fields=(FieldSpec("organizationId", FieldType.TEXT),))

    def test_duplicate_fields(self):
        with pytest.raises(ValueError, match="Duplicate"):
            ResourceDescriptor(
                name="tasks",
                fields=(FieldSpec("title", FieldType.TEXT), FieldSpec("title", FieldType.TEXT)),
            )

    def test_relation_must_belong_to_parent(self):
        with pytest.raises(ValueError):
            ResourceDescriptor(name="tasks", relations=(Relation("projects", "milestones", "projectId"),))


class TestDescriptor:
    """Tests for derived properties."""

    def test_is_immutable(self):
        descriptor = ResourceDescriptor(name="tasks")

        with pytest.raises(dataclasses.FrozenInstanceError):
            descriptor.name = "other"

    def test_lists_are_normalized(self):
        descriptor = ResourceDescriptor(
            name="tasks",
            fields=[FieldSpec("title", FieldType.TEXT)],
            disabled=["delete"],
        )

        assert isinstance(descriptor.fields, tuple)
        assert descriptor.disabled == frozenset({Operation.DELETE})
        assert not descriptor.is_enabled(Operation.DELETE)
        assert descriptor.get_field("title").type is FieldType.TEXT
        assert descriptor.get_field("missing") is None

    def test_table_defaults_to_name(self):
        assert ResourceDescriptor(name="tasks").table_name == "tasks"
        assert ResourceDescriptor(name="tasks", table="todo_items").table_name == "todo_items"

    def test_field_optionality(self):
        assert FieldSpec("title", FieldType.TEXT).required_on_insert
        assert not FieldSpec("note", FieldType.TEXT, nullable=True).required_on_insert
        assert not FieldSpec("done", FieldType.BOOLEAN, default=False).required_on_insert
        # None is a real default, distinct from "no default"
        assert FieldSpec("note", FieldType.TEXT, default=None).has_default


class TestNaming:
    """Tests for naming helpers."""

    @pytest.mark.parametrize("plural,singular", [
        ("tasks", "task"),
        ("categories", "category"),
        ("address", "address"),
        ("data", "data"),
    ])
    def test_singularize(self, plural, singular):
        assert singularize(plural) == singular

    def test_foreign_key_for(self):
        assert foreign_key_for("projects") == "projectId"
