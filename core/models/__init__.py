# =============================================================================
# core/models/ - Declarations & Envelopes
# =============================================================================
# This package contains:
# - resource.py: ResourceDescriptor, FieldSpec, Relation and the common columns
# - envelopes.py: Success / paginated / error / validation response bodies
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Resource Declarations
# -----------------------------------------------------------------------------
from .resource import (
    COMMON_COLUMNS,
    INSERT_OMITTED_COLUMNS,
    SELECT_OMITTED_COLUMNS,
    FieldSpec,
    FieldType,
    Operation,
    Relation,
    ResourceDescriptor,
    SchemaOverrides,
)

# -----------------------------------------------------------------------------
# Response Envelopes
# -----------------------------------------------------------------------------
from .envelopes import (
    ErrorResponse,
    PaginatedResponse,
    Pagination,
    SuccessResponse,
    ValidationErrorResponse,
    ValidationIssue,
)

__all__ = [
    # Resource
    "COMMON_COLUMNS",
    "INSERT_OMITTED_COLUMNS",
    "SELECT_OMITTED_COLUMNS",
    "FieldSpec",
    "FieldType",
    "Operation",
    "Relation",
    "ResourceDescriptor",
    "SchemaOverrides",
    # Envelopes
    "ErrorResponse",
    "PaginatedResponse",
    "Pagination",
    "SuccessResponse",
    "ValidationErrorResponse",
    "ValidationIssue",
]
