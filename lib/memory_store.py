# =============================================================================
# lib/memory_store.py - In-Memory Record Store
# =============================================================================
# Process-local implementation of the RecordStore contract.
#
# Emulates the column defaults a real table provides:
# - id: auto-incrementing integer per table
# - created_at / updated_at: set on insert, updated_at refreshed on update
# - deleted_at and the *_by audit columns default to null
#
# Used when STORAGE_BACKEND=memory and by the test-suite. Data is lost when
# the process exits.
#
# Usage:
#   store = InMemoryRecordStore()
#   row = await store.insert("tasks", {"title": "Buy milk"})
# =============================================================================

from __future__ import annotations

import copy
import logging
from collections import defaultdict
from itertools import islice
from typing import Any

from lib.record_store import Filter, RecordStore, RecordStoreError
from lib.utils import utc_now_iso

logger = logging.getLogger(__name__)

# Columns a freshly inserted row carries even when the caller omits them
_NULL_DEFAULTS = ("deleted_at", "created_by", "updated_by", "deleted_by")


class InMemoryRecordStore(RecordStore):
    """Dict-backed record store. Every method returns copies, never live rows."""

    def __init__(self) -> None:
        self._tables: dict[str, dict[int, dict[str, Any]]] = defaultdict(dict)
        self._sequences: dict[str, int] = defaultdict(int)

    def _matching(self, table: str, filters: list[Filter]):
        for row in self._tables[table].values():
            if all(f.matches(row) for f in filters):
                yield row

    async def select(
        self,
        table: str,
        filters: list[Filter],
        offset: int | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        if offset is not None and offset < 0:
            raise RecordStoreError(
                f"Negative offset: {offset}",
                suggestion="Page numbers start at 1",
                details={"table": table, "offset": offset},
            )

        start = offset or 0
        stop = None if limit is None else start + limit
        rows = islice(self._matching(table, filters), start, stop)
        return [copy.deepcopy(row) for row in rows]

    async def count(self, table: str, filters: list[Filter]) -> int:
        return sum(1 for _ in self._matching(table, filters))

    async def insert(self, table: str, values: dict[str, Any]) -> dict[str, Any]:
        if "id" in values:
            raise RecordStoreError(
                "Column 'id' is generated and cannot be inserted",
                details={"table": table},
            )

        self._sequences[table] += 1
        row_id = self._sequences[table]
        now = utc_now_iso()

        row: dict[str, Any] = {name: None for name in _NULL_DEFAULTS}
        row.update({"created_at": now, "updated_at": now})
        row.update(copy.deepcopy(values))
        row["id"] = row_id

        self._tables[table][row_id] = row
        logger.debug(f"Inserted {table}#{row_id}")
        return copy.deepcopy(row)

    async def update(
        self,
        table: str,
        values: dict[str, Any],
        filters: list[Filter],
    ) -> list[dict[str, Any]]:
        values = {k: v for k, v in values.items() if k != "id"}
        touched = list(self._matching(table, filters))
        now = utc_now_iso()

        for row in touched:
            row.update(copy.deepcopy(values))
            if "updated_at" not in values:
                row["updated_at"] = now

        logger.debug(f"Updated {len(touched)} row(s) in {table}")
        return [copy.deepcopy(row) for row in touched]

    def clear(self) -> None:
        """Drop every table and reset id sequences."""
        self._tables.clear()
        self._sequences.clear()
