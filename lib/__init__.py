# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - record_store.py: Storage collaborator contract (filters, select/count/insert/update)
# - memory_store.py: In-process RecordStore for local development and tests
# - supabase_client.py: Supabase-backed RecordStore (import it directly; it
#   reads app settings)
# - utils.py: Shared utilities (error base class, time, naming)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.memory_store import InMemoryRecordStore
from lib.record_store import Filter, FilterOperator, RecordStore, RecordStoreError
from lib.utils import ApplicationError, foreign_key_for, singularize, utc_now_iso

__all__ = [
    # Storage
    "Filter",
    "FilterOperator",
    "InMemoryRecordStore",
    "RecordStore",
    "RecordStoreError",
    # Utils
    "ApplicationError",
    "foreign_key_for",
    "singularize",
    "utc_now_iso",
]
