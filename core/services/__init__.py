# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .schema_deriver import ResourceSchemas, SchemaDerivationError, derive_schemas
from .route_config import RouteConfig, build_route_configs
from .resource_service import ResourceService

__all__ = [
    "ResourceSchemas",
    "SchemaDerivationError",
    "derive_schemas",
    "RouteConfig",
    "build_route_configs",
    "ResourceService",
]
