# =============================================================================
# lib/supabase_client.py - Supabase Record Store
# =============================================================================
# This module provides the production RecordStore backed by Supabase
# (PostgREST). It implements the singleton pattern to reuse a single client
# connection and maps the storage contract onto the PostgREST query builder:
# - Filter.eq       -> .eq(column, value)
# - Filter.is_null  -> .is_(column, "null")
# - offset/limit    -> .range(offset, offset + limit - 1)
# - count           -> .select("id", count="exact", head=True)
#
# The supabase client is synchronous, so every query runs through
# run_in_threadpool to keep the event loop free. Concurrent queries issued
# with asyncio.gather therefore really do run in parallel.
#
# Usage:
#   from lib.supabase_client import SupabaseRecordStore
#   store = SupabaseRecordStore()
#   rows = await store.select("tasks", [Filter.is_null("deleted_at")], 0, 50)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from fastapi.concurrency import run_in_threadpool
from supabase import create_client, Client

from app.config import settings
from lib.record_store import Filter, FilterOperator, RecordStore, RecordStoreError

# Set up logging for this module
logger = logging.getLogger(__name__)


class SupabaseClientError(RecordStoreError):
    """
    Error during Supabase operations.

    Provides actionable error messages following the principle:
    "Errors should tell HOW to fix, not just WHAT failed."
    """

    def __init__(self, message: str, code: str = "SUPABASE_ERROR", **kwargs: Any):
        super().__init__(message, code=code, **kwargs)


class SupabaseClient:
    """
    Singleton holder for the Supabase client.

    One client instance is shared across the application. All methods are
    class methods for easy access without instantiation.
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        Tenant isolation is enforced by the resource layer filters instead.

        Returns:
            Client: Supabase client instance

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_KEY:
                raise SupabaseClientError(
                    message="Supabase is not configured",
                    code="CLIENT_NOT_CONFIGURED",
                    suggestion="Set SUPABASE_URL and SUPABASE_SERVICE_KEY, or use STORAGE_BACKEND=memory",
                )
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                ) from e
        return cls._instance


def apply_filters(query: Any, filters: list[Filter]) -> Any:
    """Chain every filter onto a PostgREST query builder (AND semantics)."""
    for f in filters:
        if f.operator is FilterOperator.IS_NULL:
            query = query.is_(f.column, "null")
        else:
            query = query.eq(f.column, f.value)
    return query


class SupabaseRecordStore(RecordStore):
    """
    RecordStore over a Supabase project.

    Args:
        client: Optional pre-built client. Defaults to the shared singleton,
            resolved lazily on first query.
    """

    def __init__(self, client: Client | None = None) -> None:
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = SupabaseClient.get_client()
        return self._client

    async def _execute(self, query: Any, operation: str, table: str) -> Any:
        try:
            return await run_in_threadpool(query.execute)
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to {operation} {table}: {e}",
                code=f"{operation.upper()}_FAILED",
                details={"table": table},
            ) from e

    async def select(
        self,
        table: str,
        filters: list[Filter],
        offset: int | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        query = apply_filters(self.client.table(table).select("*"), filters)

        if limit is not None:
            start = offset or 0
            query = query.range(start, start + limit - 1)
        elif offset:
            query = query.offset(offset)

        response = await self._execute(query, "select", table)
        return response.data or []

    async def count(self, table: str, filters: list[Filter]) -> int:
        query = apply_filters(
            self.client.table(table).select("id", count="exact", head=True),
            filters,
        )
        response = await self._execute(query, "count", table)
        return response.count or 0

    async def insert(self, table: str, values: dict[str, Any]) -> dict[str, Any]:
        query = self.client.table(table).insert(values)
        response = await self._execute(query, "insert", table)

        if response.data:
            return response.data[0]
        raise SupabaseClientError(
            message="Insert returned no data",
            code="INSERT_NO_DATA",
            details={"table": table},
        )

    async def update(
        self,
        table: str,
        values: dict[str, Any],
        filters: list[Filter],
    ) -> list[dict[str, Any]]:
        query = apply_filters(self.client.table(table).update(values), filters)
        response = await self._execute(query, "update", table)
        return response.data or []

    async def ping(self, table: str) -> None:
        query = self.client.table(table).select("id").limit(1)
        await self._execute(query, "ping", table)
