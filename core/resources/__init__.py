# =============================================================================
# core/resources/ - Entity Declarations
# =============================================================================
# One module per business entity, each exporting a ResourceDescriptor.
# Adding an entity means adding a module here and listing it below; no
# routes or schemas are written by hand.
# =============================================================================

from .expenses import expenses
from .tasks import tasks

# Every entity served by the API, in documentation order
REGISTERED_RESOURCES = (tasks, expenses)

__all__ = [
    "REGISTERED_RESOURCES",
    "expenses",
    "tasks",
]
