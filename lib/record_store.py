# =============================================================================
# lib/record_store.py - Storage Collaborator Contract
# =============================================================================
# Defines the minimal storage interface the resource layer depends on:
# - Filtered select with offset/limit paging
# - Filtered count
# - Insert returning the inserted row
# - Filtered update returning the modified rows
#
# Filters are AND-composed equality / IS NULL conditions. Anything richer
# (ordering, joins, full-text search) is not supported.
#
# Implementations:
# - lib/supabase_client.py: SupabaseRecordStore (production, PostgREST)
# - lib/memory_store.py: InMemoryRecordStore (local development, tests)
# =============================================================================

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any

from lib.utils import ApplicationError


class FilterOperator(str, Enum):
    """Supported filter comparisons."""
    EQ = "eq"
    IS_NULL = "is_null"


@dataclass(frozen=True)
class Filter:
    """
    A single column condition.

    A list of filters is always interpreted as their conjunction (AND).
    """
    column: str
    operator: FilterOperator
    value: Any = None

    @classmethod
    def eq(cls, column: str, value: Any) -> "Filter":
        return cls(column=column, operator=FilterOperator.EQ, value=value)

    @classmethod
    def is_null(cls, column: str) -> "Filter":
        return cls(column=column, operator=FilterOperator.IS_NULL)

    def matches(self, row: dict[str, Any]) -> bool:
        """Evaluate this condition against a row dict."""
        if self.operator is FilterOperator.IS_NULL:
            return row.get(self.column) is None
        return row.get(self.column) == self.value


class RecordStoreError(ApplicationError):
    """
    Error raised by a record store when a storage operation fails.

    Surfaces to clients as a 500 through the generic error boundary.
    """

    def __init__(self, message: str, **kwargs: Any):
        kwargs.setdefault("code", "RECORD_STORE_ERROR")
        super().__init__(message, **kwargs)


class RecordStore(ABC):
    """
    Abstract storage collaborator.

    All methods are coroutines so implementations backed by blocking
    clients can offload work to a thread pool.
    """

    @abstractmethod
    async def select(
        self,
        table: str,
        filters: list[Filter],
        offset: int | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Return rows matching every filter, optionally paged."""

    @abstractmethod
    async def count(self, table: str, filters: list[Filter]) -> int:
        """Return the number of rows matching every filter."""

    @abstractmethod
    async def insert(self, table: str, values: dict[str, Any]) -> dict[str, Any]:
        """Insert one row and return it as stored (with generated columns)."""

    @abstractmethod
    async def update(
        self,
        table: str,
        values: dict[str, Any],
        filters: list[Filter],
    ) -> list[dict[str, Any]]:
        """Update every row matching the filters and return the modified rows."""

    async def ping(self, table: str) -> None:
        """Readiness probe against one table. Raises RecordStoreError when unreachable."""
        return None
