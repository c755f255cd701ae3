# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the entity-to-REST compiler and its policy:
# - models/: Resource descriptors and response envelopes
# - services/: Schema derivation, route config building, resource policy
# - resources/: The entity declarations served by the API
#
# Code in this package does not build routers or handle requests; the
# app/ layer binds its output to FastAPI.
# =============================================================================
