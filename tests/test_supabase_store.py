# =============================================================================
# tests/test_supabase_store.py - Supabase Record Store Tests
# =============================================================================
# Verifies the mapping of the storage contract onto the PostgREST query
# builder, using a recording stand-in for the client (no network).
#
# Run with: pytest tests/test_supabase_store.py -v
# =============================================================================

from types import SimpleNamespace

import pytest

from lib.record_store import Filter
from lib.supabase_client import SupabaseClientError, SupabaseRecordStore


class RecordingQuery:
    """Chains every builder call and records it."""

    def __init__(self, response=None, error=None):
        self.calls = []
        self.response = response or SimpleNamespace(data=[], count=None)
        self.error = error

    def __getattr__(self, name):
        def method(*args, **kwargs):
            self.calls.append((name, args))
            return self
        return method

    def execute(self):
        if self.error:
            raise self.error
        return self.response


class RecordingClient:
    def __init__(self, query):
        self.query = query
        self.tables = []

    def table(self, name):
        self.tables.append(name)
        return self.query


def store_with(**kwargs):
    query = RecordingQuery(**kwargs)
    return SupabaseRecordStore(client=RecordingClient(query)), query


SCOPE = [Filter.is_null("deleted_at"), Filter.eq("organizationId", "org-a")]


class TestQueries:
    """Tests for builder calls per operation."""

    @pytest.mark.asyncio
    async def test_select_page(self):
        store, query = store_with(response=SimpleNamespace(data=[{"id": 3}], count=None))

        rows = await store.select("tasks", SCOPE, offset=50, limit=50)

        assert rows == [{"id": 3}]
        assert query.calls == [
            ("select", ("*",)),
            ("is_", ("deleted_at", "null")),
            ("eq", ("organizationId", "org-a")),
            ("range", (50, 99)),
        ]

    @pytest.mark.asyncio
    async def test_count_uses_head_request(self):
        store, query = store_with(response=SimpleNamespace(data=[], count=7))

        assert await store.count("tasks", SCOPE) == 7
        assert query.calls[0] == ("select", ("id",))

    @pytest.mark.asyncio
    async def test_insert_returns_first_row(self):
        store, query = store_with(response=SimpleNamespace(data=[{"id": 1, "title": "x"}], count=None))

        row = await store.insert("tasks", {"title": "x"})

        assert row == {"id": 1, "title": "x"}
        assert query.calls == [("insert", ({"title": "x"},))]

    @pytest.mark.asyncio
    async def test_insert_without_data_fails(self):
        store, _ = store_with(response=SimpleNamespace(data=[], count=None))

        with pytest.raises(SupabaseClientError) as exc_info:
            await store.insert("tasks", {"title": "x"})

        assert exc_info.value.code == "INSERT_NO_DATA"

    @pytest.mark.asyncio
    async def test_update_is_filtered(self):
        store, query = store_with(response=SimpleNamespace(data=[{"id": 2}], count=None))

        rows = await store.update("tasks", {"title": "y"}, [Filter.eq("id", 2)])

        assert rows == [{"id": 2}]
        assert query.calls == [("update", ({"title": "y"},)), ("eq", ("id", 2))]

    @pytest.mark.asyncio
    async def test_client_errors_are_wrapped(self):
        store, _ = store_with(error=ConnectionError("refused"))

        with pytest.raises(SupabaseClientError) as exc_info:
            await store.select("tasks", SCOPE)

        assert exc_info.value.code == "SELECT_FAILED"
        assert exc_info.value.details == {"table": "tasks"}
