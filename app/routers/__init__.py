# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains the FastAPI routers:
# - health.py: Health check endpoints (public)
# - resources.py: Generated CRUD endpoints for one entity
#
# build_resource_router() aggregates every registered entity into one
# router guarded by the identity gate. It is mounted in main.py under
# API_PREFIX.
# =============================================================================

import logging
from collections.abc import Iterable

from fastapi import APIRouter, Depends

from app.auth import get_current_identity
from core.models.resource import ResourceDescriptor
from core.services.route_config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, build_route_configs
from core.services.schema_deriver import derive_schemas

from . import health
from .resources import ResourceController

logger = logging.getLogger(__name__)


def build_resource_router(
    descriptors: Iterable[ResourceDescriptor],
    default_limit: int = DEFAULT_PAGE_SIZE,
    max_limit: int = MAX_PAGE_SIZE,
) -> APIRouter:
    """
    Derive and register the routes of every entity.

    Args:
        descriptors: Entities to serve
        default_limit: Default list page size
        max_limit: Largest accepted list page size

    Returns:
        APIRouter: One router with the identity gate as a router-level
        dependency, so no generated handler runs unauthenticated.

    Raises:
        ValueError: If two descriptors share a name
        SchemaDerivationError: If a descriptor yields an invalid patch schema
    """
    router = APIRouter(dependencies=[Depends(get_current_identity)])
    seen: set[str] = set()

    for descriptor in descriptors:
        if descriptor.name in seen:
            raise ValueError(f"Resource {descriptor.name!r} is registered twice")
        seen.add(descriptor.name)

        schemas = derive_schemas(descriptor)
        configs = build_route_configs(descriptor, schemas, default_limit, max_limit)
        ResourceController(descriptor, schemas, configs).register(router)

        logger.info(
            f"Mounted {descriptor.name}: "
            + ", ".join(c.operation.value for c in configs)
        )

    return router


__all__ = [
    "build_resource_router",
    "health",
    "ResourceController",
]
