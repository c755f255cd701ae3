# =============================================================================
# core/models/envelopes.py - Response Envelope Schemas
# =============================================================================
# Every response body produced by the generated resource routes is wrapped
# in one of these envelopes, so clients can branch on `success` alone:
#
#   {"success": true,  "data": ...}
#   {"success": true,  "data": [...], "pagination": {...}}
#   {"success": false, "error": "tasks not found"}
#   {"success": false, "message": "Validation Error", "errors": {...}}
#
# The generic models are parametrized per entity (SuccessResponse[TaskSelect])
# so the OpenAPI document shows the concrete data shape.
# =============================================================================

from collections.abc import Mapping, Sequence
from typing import Any, Generic, Literal, TypeVar, Union

from pydantic import BaseModel, Field

DataT = TypeVar("DataT")

UNAUTHORIZED_MESSAGE = "Unauthorized. You are not logged in."


class Pagination(BaseModel):
    """Page metadata returned by list endpoints."""
    totalPages: int = Field(..., ge=0, examples=[10], description="ceil(total / limit)")
    page: int = Field(..., ge=1, examples=[1], description="Current page number (1-indexed)")
    limit: int = Field(..., ge=1, examples=[50], description="Items per page")


class SuccessResponse(BaseModel, Generic[DataT]):
    """Successful single-object (or plain list) response."""
    success: bool = Field(default=True, examples=[True])
    data: DataT


class PaginatedResponse(BaseModel, Generic[DataT]):
    """Successful list response with pagination metadata."""
    success: bool = Field(default=True, examples=[True])
    data: list[DataT]
    pagination: Pagination


class ErrorResponse(BaseModel):
    """Domain error (not found, unauthorized, unexpected)."""
    success: Literal[False] = False
    error: str = Field(..., examples=["tasks not found"])


class ValidationIssue(BaseModel):
    """One failed constraint."""
    code: str = Field(..., examples=["missing"])
    path: list[Union[str, int]] = Field(..., examples=[["title"]])
    message: str = Field(..., examples=["Field required"])


class ValidationErrors(BaseModel):
    name: str = Field(default="ValidationError")
    issues: list[ValidationIssue]


class ValidationErrorResponse(BaseModel):
    """422 body: itemized issues for body, query or path input."""
    success: Literal[False] = False
    message: str = Field(default="Validation Error")
    errors: ValidationErrors

    @classmethod
    def from_errors(
        cls,
        errors: Sequence[Mapping[str, Any]],
        strip_location: bool = False,
    ) -> "ValidationErrorResponse":
        """
        Build the envelope from pydantic / FastAPI error dicts.

        Args:
            errors: Output of ValidationError.errors() or RequestValidationError.errors()
            strip_location: Drop the leading "body" / "query" / "path" element
                FastAPI prepends to every loc, leaving the field path only
        """
        issues = []
        for error in errors:
            path = list(error.get("loc", ()))
            if strip_location and path and path[0] in _REQUEST_LOCATIONS:
                path = path[1:]
            issues.append(ValidationIssue(
                code=str(error.get("type", "invalid")),
                path=path,
                message=str(error.get("msg", "Invalid value")),
            ))
        return cls(errors=ValidationErrors(issues=issues))


_REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}
