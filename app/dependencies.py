# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
# =============================================================================

from typing import Annotated

from fastapi import Depends, Request

from lib.record_store import RecordStore


def get_record_store(request: Request) -> RecordStore:
    """
    Get the record store of the running application.

    The store is created once by the app factory and kept on app.state.
    """
    return request.app.state.record_store


# Type alias for dependency injection
RecordStoreDep = Annotated[RecordStore, Depends(get_record_store)]
