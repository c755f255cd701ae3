# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# Both are public (no identity gate).
# =============================================================================

import logging
from typing import Literal

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.dependencies import RecordStoreDep
from lib.record_store import RecordStoreError
from lib.utils import utc_now_iso

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Basic health check response."""
    success: bool = True
    status: Literal["OK"] = "OK"


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    success: bool
    status: Literal["ready", "degraded"]
    storage: str
    timestamp: str


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Returns basic health status for load balancers and monitoring.
    """
    return HealthResponse()


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    responses={503: {"model": ReadinessResponse, "description": "Storage unreachable"}},
)
async def readiness_check(request: Request, store: RecordStoreDep):
    """
    Readiness check endpoint.

    Probes the record store with a trivial query against the first
    registered table. Returns 503 when the store cannot be reached.
    """
    try:
        await store.ping(request.app.state.probe_table)
    except RecordStoreError as e:
        logger.warning(f"Readiness probe failed: {e.message}")
        body = ReadinessResponse(
            success=False,
            status="degraded",
            storage=f"unhealthy: {e.message[:50]}",
            timestamp=utc_now_iso(),
        )
        return JSONResponse(status_code=503, content=body.model_dump())

    return ReadinessResponse(
        success=True,
        status="ready",
        storage="healthy",
        timestamp=utc_now_iso(),
    )
