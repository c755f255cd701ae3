# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Tenant CRUD API:
# - test_resource_descriptor.py / test_schema_deriver.py / test_route_config.py:
#   the pure entity-to-route pipeline
# - test_memory_store.py / test_supabase_store.py: record store contract
# - test_resource_service.py: tenancy, soft delete, cascade, pagination
# - test_api.py / test_auth.py / test_exceptions.py: HTTP end-to-end
#
# Run tests with: pytest
# =============================================================================
