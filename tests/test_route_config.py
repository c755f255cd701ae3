# =============================================================================
# tests/test_route_config.py - Route Config Builder Tests
# =============================================================================
# The builder is pure, so these tests need no app or storage.
#
# Run with: pytest tests/test_route_config.py -v
# =============================================================================

import pytest
from pydantic import ValidationError

from core.models.envelopes import ErrorResponse, ValidationErrorResponse
from core.models.resource import Operation, ResourceDescriptor
from core.resources import tasks
from core.services.route_config import (
    build_route_configs,
    list_query_model,
    resource_tags,
    route_name,
    validation_example,
)
from core.services.schema_deriver import derive_schemas

from tests.conftest import projects


@pytest.fixture
def task_configs(task_schemas):
    return {c.operation: c for c in build_route_configs(tasks, task_schemas)}


class TestRouteTable:
    """Method, path and status of the five operations."""

    def test_five_routes_in_order(self, task_schemas):
        configs = build_route_configs(tasks, task_schemas)

        assert [(c.method, c.path, c.status_code) for c in configs] == [
            ("GET", "/tasks", 200),
            ("GET", "/tasks/{id}", 200),
            ("POST", "/tasks", 201),
            ("PATCH", "/tasks/{id}", 200),
            ("DELETE", "/tasks/{id}", 204),
        ]

    def test_disabled_operations_are_skipped(self):
        read_only = ResourceDescriptor(
            name="audit-logs",
            disabled={Operation.CREATE, Operation.PATCH, "delete"},
        )

        configs = build_route_configs(read_only, derive_schemas(read_only))

        assert [c.operation for c in configs] == [Operation.LIST, Operation.GET]

    def test_route_names(self):
        assert route_name(Operation.LIST, tasks) == "list_tasks"
        assert route_name(Operation.PATCH, ResourceDescriptor(name="expense-reports")) == "patch_expense_reports"


class TestRouteModels:
    """The same models drive validation and documentation."""

    def test_bodies_are_the_derived_schemas(self, task_configs, task_schemas):
        assert task_configs[Operation.CREATE].body_model is task_schemas.insert
        assert task_configs[Operation.PATCH].body_model is task_schemas.patch
        assert task_configs[Operation.LIST].body_model is None

    def test_id_param_only_on_item_routes(self, task_configs):
        with_id = {op for op, c in task_configs.items() if c.has_id_param}

        assert with_id == {Operation.GET, Operation.PATCH, Operation.DELETE}

    def test_delete_has_no_response_model(self, task_configs):
        assert task_configs[Operation.DELETE].response_model is None

    def test_list_response_is_paginated(self, task_configs, task_schemas):
        model = task_configs[Operation.LIST].response_model

        assert set(model.model_fields) == {"success", "data", "pagination"}

    def test_list_query_bounds(self):
        query = list_query_model(50, 100)

        assert query.model_validate({}).model_dump() == {"limit": 50, "pageNumber": 1}
        for bad in ({"limit": 0}, {"limit": 101}, {"pageNumber": 0}):
            with pytest.raises(ValidationError):
                query.model_validate(bad)


class TestRouteDocumentation:
    """Tags, per-status responses and examples."""

    def test_tags_start_with_capitalized_name(self):
        tagged = ResourceDescriptor(name="tasks", tags=("Productivity", "Tasks"))

        assert resource_tags(tagged) == ("Tasks", "Productivity")

    def test_error_statuses_documented(self, task_configs):
        assert set(task_configs[Operation.LIST].responses) == {200, 401, 422}
        assert set(task_configs[Operation.GET].responses) == {200, 401, 404, 422}
        assert set(task_configs[Operation.CREATE].responses) == {201, 401, 422}
        assert set(task_configs[Operation.PATCH].responses) == {200, 401, 404, 422}
        assert set(task_configs[Operation.DELETE].responses) == {204, 401, 404, 422}

    def test_not_found_example(self, task_configs):
        not_found = task_configs[Operation.GET].responses[404]

        assert not_found["model"] is ErrorResponse
        assert not_found["content"]["application/json"]["example"] == {
            "success": False,
            "error": "tasks not found",
        }

    def test_create_validation_example_is_real(self, task_configs):
        unprocessable = task_configs[Operation.CREATE].responses[422]
        example = unprocessable["content"]["application/json"]["example"]

        assert unprocessable["model"] is ValidationErrorResponse
        assert example["message"] == "Validation Error"
        assert example["errors"]["issues"] == [
            {"code": "missing", "path": ["title"], "message": "Field required"},
        ]

    def test_patch_validation_example_rejects_body(self, task_configs):
        unprocessable = task_configs[Operation.PATCH].responses[422]
        example = unprocessable["content"]["application/json"]["example"]

        assert example["errors"]["issues"] == [
            {"code": "string_type", "path": ["title"], "message": "Input should be a valid string"},
        ]

    def test_validation_example_falls_back_for_valid_input(self):
        example = validation_example(list_query_model(), {})

        assert example["success"] is False
        assert len(example["errors"]["issues"]) == 1

    def test_delete_description_mentions_dependents(self, project_schemas):
        configs = {c.operation: c for c in build_route_configs(projects, project_schemas)}

        assert "milestones" in configs[Operation.DELETE].description
