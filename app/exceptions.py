# =============================================================================
# app/exceptions.py - Custom Exceptions & Handlers
# =============================================================================
# Centralized exception handling for the API. Every failure leaves the
# service in one of the envelopes below, so clients can branch on `success`:
#
#   404 / 401 / domain: {"success": false, "error": "<message>"}
#   422 validation:     {"success": false, "message": "Validation Error",
#                        "errors": {"name": "ValidationError", "issues": [...]}}
#   500 unexpected:     {"success": false, "error": "<Name>: <message>",
#                        "stack": "<traceback>" | null}
#
# Handlers are registered in app/main.py via register_exception_handlers().
# =============================================================================

import logging
import traceback
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.models.envelopes import UNAUTHORIZED_MESSAGE, ValidationErrorResponse

logger = logging.getLogger(__name__)


class CrudApiException(Exception):
    """
    Base exception for the CRUD API.

    All domain exceptions inherit from this class and are rendered as
    the `{"success": false, "error": message}` envelope.
    """

    def __init__(
        self,
        message: str,
        code: str = "CRUD_API_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        return {"success": False, "error": self.message}


# =============================================================================
# Resource Exceptions
# =============================================================================

class ResourceNotFoundError(CrudApiException):
    """
    Raised when a row does not exist, is soft-deleted, or belongs to
    another tenant. The three cases share one response.
    """

    def __init__(self, entity: str, item_id: Any):
        super().__init__(
            message=f"{entity} not found",
            code="RESOURCE_NOT_FOUND",
            status_code=404,
            suggestion=f"Check that the {entity} id is correct and has not been deleted",
            details={"entity": entity, "id": item_id},
        )


# =============================================================================
# Auth Exceptions
# =============================================================================

class UnauthorizedError(CrudApiException):
    """Raised when the request carries no valid session token."""

    def __init__(self, reason: str | None = None):
        super().__init__(
            message=UNAUTHORIZED_MESSAGE,
            code="UNAUTHORIZED",
            status_code=401,
            suggestion="Send a valid Bearer token in the Authorization header",
            details={"reason": reason} if reason else None,
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def crud_api_exception_handler(
    request: Request,
    exc: CrudApiException
) -> JSONResponse:
    """Convert CrudApiException to its JSON envelope."""
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.warning(
            f"{exc.code} on {request.method} {request.url.path}: {exc.message}"
            + (f" {exc.details}" if exc.details else "")
        )

    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=headers,
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request validation errors (body, query and path).

    Converts FastAPI's error list into itemized issues whose path is the
    field path only (the "body" / "query" / "path" prefix is dropped).
    """
    envelope = ValidationErrorResponse.from_errors(exc.errors(), strip_location=True)
    logger.warning(
        f"VALIDATION_ERROR on {request.method} {request.url.path}: "
        f"{len(envelope.errors.issues)} issue(s)"
    )
    return JSONResponse(status_code=422, content=envelope.model_dump(mode="json"))


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """
    Render framework HTTP errors (unknown route, wrong method) in the
    error envelope instead of FastAPI's {"detail": ...} shape.
    """
    message = "Not Found" if exc.status_code == 404 else str(exc.detail)
    logger.warning(f"HTTP {exc.status_code} on {request.method} {request.url.path}: {message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": message},
        headers=getattr(exc, "headers", None),
    )


def build_unexpected_error_handler(include_stack: bool):
    """
    Create the last-resort handler.

    Args:
        include_stack: Whether the traceback is returned to the client
            (False in production)
    """

    async def unexpected_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc}")
        stack = (
            "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
            if include_stack
            else None
        )
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": f"{type(exc).__name__}: {getattr(exc, 'message', exc)}",
                "stack": stack,
            },
        )

    return unexpected_exception_handler


def register_exception_handlers(app: FastAPI, include_stack: bool) -> None:
    """Attach every handler above to the application."""
    app.add_exception_handler(CrudApiException, crud_api_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, build_unexpected_error_handler(include_stack))
