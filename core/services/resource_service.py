# =============================================================================
# core/services/resource_service.py - Generic Resource Business Logic
# =============================================================================
# Applies the same policy to every declared entity:
# - Tenancy: every query is scoped to the caller's organizationId
# - Soft delete: rows with deleted_at set are invisible to every operation
# - Cascade: deleting a row soft-deletes dependents one relation level deep
# - Pagination: limit / pageNumber with a concurrent count query
#
# Concurrency notes:
# - List runs the page query and the count query concurrently, so
#   totalPages may briefly disagree with the page under concurrent writes.
# - Patch is read-merge-write without a lock: concurrent patches to the
#   same row are last-write-wins.
# - Delete issues the parent update and each cascade update concurrently
#   as independent writes. A failure in one is not rolled back in the others.
#
# Separates HTTP concerns (app/routers/resources.py) from storage policy.
# =============================================================================

import asyncio
import logging
import math
from typing import Any

from pydantic import BaseModel

from app.exceptions import ResourceNotFoundError
from core.models.envelopes import Pagination
from core.models.resource import (
    CREATED_BY,
    DELETED_AT,
    DELETED_BY,
    ID_COLUMN,
    TENANT_COLUMN,
    UPDATED_AT,
    UPDATED_BY,
    ResourceDescriptor,
)
from core.services.schema_deriver import ResourceSchemas
from lib.record_store import Filter, RecordStore
from lib.utils import utc_now_iso

logger = logging.getLogger(__name__)


def active_scope(organization_id: str) -> list[Filter]:
    """Filters shared by every query: not soft-deleted, owned by the tenant."""
    return [Filter.is_null(DELETED_AT), Filter.eq(TENANT_COLUMN, organization_id)]


async def gather_all(*aws):
    """
    Run awaitables concurrently and wait for every one of them.

    The first failure is re-raised only after every branch has settled, so no
    branch is left running with an unretrieved exception.
    """
    results = await asyncio.gather(*aws, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results


class ResourceService:
    """
    Storage policy for one resource.

    Args:
        descriptor: The resource declaration
        schemas: Its derived Select / Insert / Patch models
        store: Storage collaborator
    """

    def __init__(
        self,
        descriptor: ResourceDescriptor,
        schemas: ResourceSchemas,
        store: RecordStore,
    ) -> None:
        self.descriptor = descriptor
        self.schemas = schemas
        self.store = store

    @property
    def table(self) -> str:
        return self.descriptor.table_name

    def _item_scope(self, item_id: int, organization_id: str) -> list[Filter]:
        return [Filter.eq(ID_COLUMN, item_id), *active_scope(organization_id)]

    def _to_select(self, row: dict[str, Any]) -> BaseModel:
        return self.schemas.select.model_validate(row)

    async def _load_active(self, item_id: int, organization_id: str) -> dict[str, Any]:
        """
        Fetch one active row of the caller's tenant.

        Raises:
            ResourceNotFoundError: If the id is unknown, soft-deleted or owned
                by another tenant
        """
        rows = await self.store.select(
            self.table,
            self._item_scope(item_id, organization_id),
            limit=1,
        )
        if not rows:
            raise ResourceNotFoundError(self.descriptor.name, item_id)
        return rows[0]

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def list_page(
        self,
        organization_id: str,
        limit: int,
        page_number: int,
    ) -> tuple[list[BaseModel], Pagination]:
        """
        One page of active rows plus pagination metadata.

        No ordering is guaranteed; pages are not stable under concurrent writes.
        """
        scope = active_scope(organization_id)
        offset = (page_number - 1) * limit

        rows, total = await gather_all(
            self.store.select(self.table, scope, offset=offset, limit=limit),
            self.store.count(self.table, scope),
        )

        pagination = Pagination(
            totalPages=math.ceil(total / limit),
            page=page_number,
            limit=limit,
        )
        return [self._to_select(row) for row in rows], pagination

    async def get(self, item_id: int, organization_id: str) -> BaseModel:
        row = await self._load_active(item_id, organization_id)
        return self._to_select(row)

    async def create(
        self,
        body: BaseModel,
        organization_id: str,
        actor_id: str,
    ) -> BaseModel:
        """Insert a validated body; tenant and audit columns come from the caller."""
        values = body.model_dump(mode="json")
        values.update({
            TENANT_COLUMN: organization_id,
            CREATED_BY: actor_id,
            UPDATED_BY: actor_id,
        })

        row = await self.store.insert(self.table, values)
        logger.info(f"Created {self.descriptor.name}#{row.get(ID_COLUMN)} in org {organization_id}")
        return self._to_select(row)

    async def patch(
        self,
        item_id: int,
        body: BaseModel,
        organization_id: str,
        actor_id: str,
    ) -> BaseModel:
        """
        Merge a partial body into the stored row.

        Fields present in the body overwrite, absent fields keep the loaded
        value. Explicit nulls count as present.
        """
        row = await self._load_active(item_id, organization_id)
        changes = body.model_dump(mode="json", exclude_unset=True)

        merged = {
            name: row[name]
            for name in self.schemas.patch.model_fields
            if name in row
        }
        merged.update(changes)
        merged.update({UPDATED_BY: actor_id, UPDATED_AT: utc_now_iso()})

        updated = await self.store.update(
            self.table,
            merged,
            self._item_scope(item_id, organization_id),
        )
        if not updated:
            # Soft-deleted between the load and the write
            raise ResourceNotFoundError(self.descriptor.name, item_id)

        logger.info(
            f"Updated {self.descriptor.name}#{item_id} fields={sorted(changes)}"
        )
        return self._to_select(updated[0])

    async def delete(
        self,
        item_id: int,
        organization_id: str,
        actor_id: str,
    ) -> None:
        """
        Soft-delete a row and, one level deep, its declared dependents.

        Best effort: the writes run concurrently without a transaction.
        """
        await self._load_active(item_id, organization_id)

        now = utc_now_iso()
        stamp = {DELETED_AT: now, DELETED_BY: actor_id, UPDATED_AT: now}

        writes = [
            self.store.update(
                self.table,
                stamp,
                self._item_scope(item_id, organization_id),
            )
        ]
        for relation in self.descriptor.relations:
            writes.append(
                self.store.update(
                    relation.child_table,
                    stamp,
                    [Filter.eq(relation.foreign_key, item_id), *active_scope(organization_id)],
                )
            )

        _, *cascaded = await gather_all(*writes)

        logger.info(f"Soft-deleted {self.descriptor.name}#{item_id} in org {organization_id}")
        for relation, rows in zip(self.descriptor.relations, cascaded):
            if rows:
                logger.info(
                    f"Cascade soft-deleted {len(rows)} {relation.child_table} "
                    f"row(s) via {relation.foreign_key}={item_id}"
                )
