# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Tenant CRUD API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Every route is mounted under API_PREFIX (default /api):
#   {prefix}/health, {prefix}/health/ready   public
#   {prefix}/auth/me                         identity of the current token
#   {prefix}/<entity>[/{id}]                 generated CRUD, identity-gated
#   {prefix}/openapi.json, /docs, /redoc     API documentation
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
import time
from collections.abc import Sequence
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.auth import routes as auth_routes
from app.config import Settings, get_settings
from app.exceptions import register_exception_handlers
from app.routers import build_resource_router, health
from core.models.resource import ResourceDescriptor
from core.resources import REGISTERED_RESOURCES
from lib.memory_store import InMemoryRecordStore
from lib.record_store import RecordStore
from lib.supabase_client import SupabaseRecordStore

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"

API_DESCRIPTION = """
## Multi-tenant CRUD API

Every entity gets the same five endpoints, generated from its table declaration:

| Method | Path | Description |
|--------|------|-------------|
| GET | `/<entity>` | Paginated list (`limit`, `pageNumber`) |
| GET | `/<entity>/{id}` | Single item |
| POST | `/<entity>` | Create |
| PATCH | `/<entity>/{id}` | Partial update |
| DELETE | `/<entity>/{id}` | Soft delete (cascades to dependents) |

### Conventions

- **Authentication**: send `Authorization: Bearer <session token>`
- **Tenancy**: rows are scoped to the organization of the session
- **Envelopes**: every body carries `success`; errors carry `error`
  (or `message` + `errors` for validation failures)
"""


def configure_logging(settings: Settings) -> None:
    """Root logging setup; a no-op when logging is already configured."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def build_record_store(settings: Settings) -> RecordStore:
    """Instantiate the record store selected by STORAGE_BACKEND."""
    if settings.STORAGE_BACKEND == "memory":
        if settings.is_production:
            logger.warning("Using the in-memory record store in production: data is not persisted")
        return InMemoryRecordStore()
    return SupabaseRecordStore()


def create_app(
    settings: Settings | None = None,
    store: RecordStore | None = None,
    resources: Sequence[ResourceDescriptor] | None = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Configuration (defaults to the cached global settings)
        store: Record store (defaults to the one selected by STORAGE_BACKEND)
        resources: Entities to serve (defaults to REGISTERED_RESOURCES)

    Returns:
        FastAPI: The configured application
    """
    settings = settings or get_settings()
    resources = tuple(REGISTERED_RESOURCES if resources is None else resources)
    prefix = settings.API_PREFIX

    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Log startup and shutdown; the app holds no background tasks."""
        logger.info(f"Starting Tenant CRUD API in {settings.ENVIRONMENT} mode")
        logger.info(f"Storage backend: {settings.STORAGE_BACKEND}")
        logger.info(f"Serving entities: {', '.join(r.name for r in resources)}")
        yield
        logger.info("Shutting down Tenant CRUD API")

    app = FastAPI(
        title="Tenant CRUD API",
        description=API_DESCRIPTION,
        version=API_VERSION,
        openapi_url=f"{prefix}/openapi.json",
        docs_url=f"{prefix}/docs",
        redoc_url=f"{prefix}/redoc",
        lifespan=lifespan,
        openapi_tags=[
            *(
                {"name": r.title, "description": r.description or f"Manage {r.name}"}
                for r in resources
            ),
            {
                "name": "Auth",
                "description": "Inspect the identity of the current session token",
            },
            {
                "name": "Health",
                "description": "API health and readiness checks",
            },
        ],
    )

    app.state.record_store = store if store is not None else build_record_store(settings)
    app.state.probe_table = resources[0].table_name if resources else "tasks"

    # Routes resolve settings through Depends(get_settings)
    app.dependency_overrides[get_settings] = lambda: settings

    # =========================================================================
    # Middleware
    # =========================================================================

    # CORS middleware - allows cross-origin requests
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"{request.method} {request.url.path} - {response.status_code} - {elapsed_ms:.1f}ms"
        )
        return response

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    register_exception_handlers(app, include_stack=not settings.is_production)

    # =========================================================================
    # Routers
    # =========================================================================

    # Health check endpoints (public)
    app.include_router(health.router, prefix=prefix)

    # Identity of the current token
    app.include_router(auth_routes.router, prefix=prefix)

    # Generated entity endpoints (identity-gated)
    app.include_router(
        build_resource_router(
            resources,
            default_limit=settings.DEFAULT_PAGE_SIZE,
            max_limit=settings.MAX_PAGE_SIZE,
        ),
        prefix=prefix,
    )

    return app


app = create_app()
