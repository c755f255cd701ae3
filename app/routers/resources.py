# =============================================================================
# app/routers/resources.py - Resource Controller
# =============================================================================
# Binds the RouteConfigs of one resource to FastAPI handlers:
#
#   configs = build_route_configs(descriptor, schemas)
#   ResourceController(descriptor, schemas, configs).register(router)
#
# Each handler's signature is built from its RouteConfig (query model,
# {id} path param, body model), so FastAPI validates requests with the
# exact models the OpenAPI document describes. The handlers themselves
# only translate HTTP to ResourceService calls and wrap results in the
# success envelopes.
#
# Authentication is NOT attached here: the aggregating router carries the
# identity gate as a router-level dependency (see app/routers/__init__.py).
# =============================================================================

import logging
from typing import Annotated, Callable

from fastapi import APIRouter, Body, Path, Query, Response, status

from app.auth import IdentityDep
from app.dependencies import RecordStoreDep
from core.models.resource import Operation, ResourceDescriptor
from core.services.resource_service import ResourceService
from core.services.route_config import ID_EXAMPLE, ID_MIN, RouteConfig
from core.services.schema_deriver import ResourceSchemas
from lib.record_store import RecordStore

logger = logging.getLogger(__name__)


class ResourceController:
    """
    HTTP adapter for one resource.

    Args:
        descriptor: The resource declaration
        schemas: Its derived models
        configs: Output of build_route_configs for the same descriptor
    """

    def __init__(
        self,
        descriptor: ResourceDescriptor,
        schemas: ResourceSchemas,
        configs: tuple[RouteConfig, ...],
    ) -> None:
        self.descriptor = descriptor
        self.schemas = schemas
        self.configs = configs

    def service(self, store: RecordStore) -> ResourceService:
        return ResourceService(self.descriptor, self.schemas, store)

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register(self, router: APIRouter) -> None:
        """Add one route per config to the router."""
        for config in self.configs:
            endpoint = self._build_endpoint(config)
            extra = {"response_class": Response} if config.status_code == status.HTTP_204_NO_CONTENT else {}

            router.add_api_route(
                config.path,
                endpoint,
                methods=[config.method],
                status_code=config.status_code,
                response_model=config.response_model,
                responses=config.responses,
                summary=config.summary,
                description=config.description,
                tags=list(config.tags),
                name=config.name,
                operation_id=config.name,
                **extra,
            )
            logger.debug(f"Registered {config.method} {config.path} ({config.name})")

    def _build_endpoint(self, config: RouteConfig) -> Callable:
        builders = {
            Operation.LIST: self._list_endpoint,
            Operation.GET: self._get_endpoint,
            Operation.CREATE: self._create_endpoint,
            Operation.PATCH: self._patch_endpoint,
            Operation.DELETE: self._delete_endpoint,
        }
        endpoint = builders[config.operation](config)
        endpoint.__name__ = config.name
        endpoint.__doc__ = config.description
        return endpoint

    # -------------------------------------------------------------------------
    # Endpoint Factories
    # -------------------------------------------------------------------------
    # Annotations below reference per-resource models held in closure
    # variables; they are evaluated when each def runs, which is what
    # FastAPI inspects.

    def _list_endpoint(self, config: RouteConfig) -> Callable:
        query_model = config.query_model
        response_model = config.response_model

        async def endpoint(
            query: Annotated[query_model, Query()],
            identity: IdentityDep,
            store: RecordStoreDep,
        ):
            items, pagination = await self.service(store).list_page(
                identity.organization_id,
                limit=query.limit,
                page_number=query.pageNumber,
            )
            return response_model(data=items, pagination=pagination)

        return endpoint

    def _get_endpoint(self, config: RouteConfig) -> Callable:
        response_model = config.response_model

        async def endpoint(
            id: Annotated[int, Path(ge=ID_MIN, examples=[ID_EXAMPLE], description=f"{self.descriptor.name} id")],
            identity: IdentityDep,
            store: RecordStoreDep,
        ):
            item = await self.service(store).get(id, identity.organization_id)
            return response_model(data=item)

        return endpoint

    def _create_endpoint(self, config: RouteConfig) -> Callable:
        body_model = config.body_model
        response_model = config.response_model

        async def endpoint(
            body: Annotated[body_model, Body(description=config.body_description)],
            identity: IdentityDep,
            store: RecordStoreDep,
        ):
            item = await self.service(store).create(
                body,
                organization_id=identity.organization_id,
                actor_id=identity.user_id,
            )
            return response_model(data=item)

        return endpoint

    def _patch_endpoint(self, config: RouteConfig) -> Callable:
        body_model = config.body_model
        response_model = config.response_model

        async def endpoint(
            id: Annotated[int, Path(ge=ID_MIN, examples=[ID_EXAMPLE], description=f"{self.descriptor.name} id")],
            body: Annotated[body_model, Body(description=config.body_description)],
            identity: IdentityDep,
            store: RecordStoreDep,
        ):
            item = await self.service(store).patch(
                id,
                body,
                organization_id=identity.organization_id,
                actor_id=identity.user_id,
            )
            return response_model(data=item)

        return endpoint

    def _delete_endpoint(self, config: RouteConfig) -> Callable:

        async def endpoint(
            id: Annotated[int, Path(ge=ID_MIN, examples=[ID_EXAMPLE], description=f"{self.descriptor.name} id")],
            identity: IdentityDep,
            store: RecordStoreDep,
        ):
            await self.service(store).delete(
                id,
                organization_id=identity.organization_id,
                actor_id=identity.user_id,
            )
            return Response(status_code=status.HTTP_204_NO_CONTENT)

        return endpoint
