# =============================================================================
# core/services/route_config.py - Route Config Builder
# =============================================================================
# Turns a ResourceDescriptor and its derived schemas into machine-readable
# route configs - one per enabled operation:
#
#   | Op     | Method | Path      | Success                  |
#   |--------|--------|-----------|--------------------------|
#   | list   | GET    | /e        | 200 paginated envelope   |
#   | get    | GET    | /e/{id}   | 200 envelope             |
#   | create | POST   | /e        | 201 envelope             |
#   | patch  | PATCH  | /e/{id}   | 200 envelope             |
#   | delete | DELETE | /e/{id}   | 204 empty                |
#
# A RouteConfig is the single source of truth for BOTH request validation
# (query / path / body models) and API documentation (tags, summaries,
# per-status response models and literal examples). The controller hands
# the same object to FastAPI for both purposes.
#
# build_route_configs is a pure function: no router, no storage, no I/O.
# =============================================================================

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, create_model

from core.models.envelopes import (
    UNAUTHORIZED_MESSAGE,
    ErrorResponse,
    PaginatedResponse,
    SuccessResponse,
    ValidationErrorResponse,
)
from core.models.resource import Operation, ResourceDescriptor
from core.services.schema_deriver import ResourceSchemas, example_payload

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100

# Path ids are positive integers
ID_MIN = 1
ID_EXAMPLE = 42


@dataclass(frozen=True)
class RouteConfig:
    """
    One generated endpoint.

    Attributes:
        operation: Which of the five operations this is
        method: HTTP method (upper case)
        path: Path relative to the API prefix, e.g. "/tasks/{id}"
        name: Route name, also the OpenAPI operationId ("list_tasks")
        status_code: Success status
        tags: Documentation tags
        summary / description: Human-readable documentation
        response_model: Success envelope model (None for 204)
        responses: Per-status documentation (FastAPI `responses` format)
        query_model: Query parameter model (list only)
        has_id_param: Whether the path carries {id}
        body_model: Request body model (create / patch)
        body_description: Documentation for the body
    """
    operation: Operation
    method: str
    path: str
    name: str
    status_code: int
    tags: tuple[str, ...]
    summary: str
    description: str
    response_model: type[BaseModel] | None
    responses: dict[int, dict[str, Any]] = field(default_factory=dict)
    query_model: type[BaseModel] | None = None
    has_id_param: bool = False
    body_model: type[BaseModel] | None = None
    body_description: str | None = None


# =============================================================================
# Shared Request Models
# =============================================================================

@lru_cache
def list_query_model(
    default_limit: int = DEFAULT_PAGE_SIZE,
    max_limit: int = MAX_PAGE_SIZE,
) -> type[BaseModel]:
    """
    Query parameters accepted by every list endpoint.

    pageNumber starts at 1; 0 is rejected (it would produce a negative
    offset) rather than silently treated as page 1.
    """
    return create_model(
        "ListQuery",
        __config__=ConfigDict(extra="ignore"),
        limit=(
            int,
            Field(
                default=default_limit,
                ge=1,
                le=max_limit,
                examples=[default_limit],
                description=f"Items per page (1-{max_limit})",
            ),
        ),
        pageNumber=(
            int,
            Field(
                default=1,
                ge=1,
                examples=[1],
                description="Page number, starting at 1",
            ),
        ),
    )


def resource_tags(descriptor: ResourceDescriptor) -> tuple[str, ...]:
    """Capitalized entity name first, then extra tags, without duplicates."""
    return tuple(dict.fromkeys((descriptor.title, *descriptor.tags)))


def route_name(operation: Operation, descriptor: ResourceDescriptor) -> str:
    return f"{operation.value}_{descriptor.name.replace('-', '_')}"


# =============================================================================
# Documentation Helpers
# =============================================================================

def _json_example(example: Any) -> dict[str, Any]:
    return {"application/json": {"example": example}}


def _error_response(description: str, message: str) -> dict[str, Any]:
    return {
        "model": ErrorResponse,
        "description": description,
        "content": _json_example({"success": False, "error": message}),
    }


def _unauthorized() -> dict[str, Any]:
    return _error_response("Unauthorized", UNAUTHORIZED_MESSAGE)


def _not_found(descriptor: ResourceDescriptor) -> dict[str, Any]:
    return _error_response("Not Found", f"{descriptor.name} not found")


def validation_example(model: type[BaseModel], invalid_input: Any) -> dict[str, Any]:
    """
    Example 422 body produced by actually validating bad input.

    Falls back to a generic issue when the input happens to be valid.
    """
    try:
        model.model_validate(invalid_input)
    except ValidationError as e:
        return ValidationErrorResponse.from_errors(e.errors(include_url=False)).model_dump()

    return ValidationErrorResponse.from_errors([{
        "type": "invalid_type",
        "loc": ("fieldName",),
        "msg": "Input should be a valid string",
    }]).model_dump()


def _unprocessable(model: type[BaseModel], invalid_input: Any) -> dict[str, Any]:
    return {
        "model": ValidationErrorResponse,
        "description": "The validation error(s)",
        "content": _json_example(validation_example(model, invalid_input)),
    }


def invalid_patch_body(descriptor: ResourceDescriptor) -> dict[str, Any]:
    """Null for the first non-nullable field, the typical rejected patch."""
    for spec in descriptor.fields:
        if not spec.nullable:
            return {spec.name: None}
    return {}


@lru_cache
def _id_param_model() -> type[BaseModel]:
    return create_model("IdParams", id=(int, Field(..., ge=ID_MIN)))


# =============================================================================
# Builder
# =============================================================================

def build_route_configs(
    descriptor: ResourceDescriptor,
    schemas: ResourceSchemas,
    default_limit: int = DEFAULT_PAGE_SIZE,
    max_limit: int = MAX_PAGE_SIZE,
) -> tuple[RouteConfig, ...]:
    """
    Build the route configs for every enabled operation of a resource.

    Args:
        descriptor: The resource declaration
        schemas: Output of derive_schemas(descriptor)
        default_limit: Default list page size
        max_limit: Largest accepted list page size

    Returns:
        RouteConfigs in registration order (list, get, create, patch, delete),
        skipping operations listed in descriptor.disabled.
    """
    entity = descriptor.name
    tags = resource_tags(descriptor)
    collection_path = f"/{entity}"
    item_path = f"/{entity}/{{id}}"

    select_example = example_payload(schemas.select)
    query_model = list_query_model(default_limit, max_limit)

    builders = {
        Operation.LIST: lambda: RouteConfig(
            operation=Operation.LIST,
            method="GET",
            path=collection_path,
            name=route_name(Operation.LIST, descriptor),
            status_code=200,
            tags=tags,
            summary=f"Get all {entity}",
            description=f"Retrieve a paginated list of all {entity}",
            response_model=PaginatedResponse[schemas.select],
            query_model=query_model,
            responses={
                200: {
                    "description": f"List of {entity}",
                    "content": _json_example({
                        "success": True,
                        "data": [select_example],
                        "pagination": {"totalPages": 1, "page": 1, "limit": default_limit},
                    }),
                },
                401: _unauthorized(),
                422: _unprocessable(query_model, {"limit": 0, "pageNumber": 0}),
            },
        ),
        Operation.GET: lambda: RouteConfig(
            operation=Operation.GET,
            method="GET",
            path=item_path,
            name=route_name(Operation.GET, descriptor),
            status_code=200,
            tags=tags,
            summary=f"Get {entity} by ID",
            description=f"Retrieve a single {entity} by its ID",
            response_model=SuccessResponse[schemas.select],
            has_id_param=True,
            responses={
                200: {
                    "description": f"The requested {entity}",
                    "content": _json_example({"success": True, "data": select_example}),
                },
                401: _unauthorized(),
                404: _not_found(descriptor),
                422: _unprocessable(_id_param_model(), {"id": 0}),
            },
        ),
        Operation.CREATE: lambda: RouteConfig(
            operation=Operation.CREATE,
            method="POST",
            path=collection_path,
            name=route_name(Operation.CREATE, descriptor),
            status_code=201,
            tags=tags,
            summary=f"Create a new {entity}",
            description=f"Create a new {entity}",
            response_model=SuccessResponse[schemas.select],
            body_model=schemas.insert,
            body_description=f"The {entity} to create",
            responses={
                201: {
                    "description": f"The created {entity}",
                    "content": _json_example({"success": True, "data": select_example}),
                },
                401: _unauthorized(),
                422: _unprocessable(schemas.insert, {}),
            },
        ),
        Operation.PATCH: lambda: RouteConfig(
            operation=Operation.PATCH,
            method="PATCH",
            path=item_path,
            name=route_name(Operation.PATCH, descriptor),
            status_code=200,
            tags=tags,
            summary=f"Update {entity} by ID",
            description=(
                f"Update a single {entity} by its ID. "
                "Omitted fields keep their current value."
            ),
            response_model=SuccessResponse[schemas.select],
            has_id_param=True,
            body_model=schemas.patch,
            body_description=f"Patch data for {entity}",
            responses={
                200: {
                    "description": f"The updated {entity}",
                    "content": _json_example({"success": True, "data": select_example}),
                },
                401: _unauthorized(),
                404: _not_found(descriptor),
                422: _unprocessable(schemas.patch, invalid_patch_body(descriptor)),
            },
        ),
        Operation.DELETE: lambda: RouteConfig(
            operation=Operation.DELETE,
            method="DELETE",
            path=item_path,
            name=route_name(Operation.DELETE, descriptor),
            status_code=204,
            tags=tags,
            summary=f"Delete {entity} by ID",
            description=_delete_description(descriptor),
            response_model=None,
            has_id_param=True,
            responses={
                204: {"description": "No Content"},
                401: _unauthorized(),
                404: _not_found(descriptor),
                422: _unprocessable(_id_param_model(), {"id": 0}),
            },
        ),
    }

    return tuple(builders[op]() for op in descriptor.enabled_operations)


def _delete_description(descriptor: ResourceDescriptor) -> str:
    description = f"Soft-delete a single {descriptor.name} by its ID"
    if descriptor.relations:
        dependents = ", ".join(r.child_table for r in descriptor.relations)
        description += f". Dependent {dependents} rows are soft-deleted as well"
    return description
