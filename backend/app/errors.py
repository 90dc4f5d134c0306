"""
Application error hierarchy and FastAPI exception handlers.

Every error response carries a machine-readable `code` so clients can
branch on it without parsing English messages:

    {"code": "CONFLICT", "message": "...", "details": {...}}
"""

import logging
from typing import Any
from uuid import UUID

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette import status

from app.config import sanitize_error

logger = logging.getLogger(__name__)


# =============================================================================
# EXCEPTION CLASSES
# =============================================================================


class JournalError(Exception):
    """Base class for all application-level errors."""

    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class NotFoundError(JournalError):
    http_status = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: UUID):
        super().__init__(
            message=f"{resource} {resource_id} not found.",
            details={"resource": resource, "id": str(resource_id)},
        )


class AccessDeniedError(JournalError):
    http_status = status.HTTP_403_FORBIDDEN
    code = "ACCESS_DENIED"

    def __init__(self, message: str = "You do not have permission to access this resource."):
        super().__init__(message=message)


class ConflictError(JournalError):
    http_status = status.HTTP_409_CONFLICT
    code = "CONFLICT"


class ValidationError(JournalError):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "VALIDATION_ERROR"


class UnauthenticatedError(JournalError):
    http_status = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHENTICATED"

    def __init__(self, message: str = "Could not validate credentials."):
        super().__init__(message=message)


class StoreFailureError(JournalError):
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "STORE_FAILURE"


# =============================================================================
# FASTAPI EXCEPTION HANDLERS
# =============================================================================


async def journal_exception_handler(request: Request, exc: JournalError) -> JSONResponse:
    headers = None
    if isinstance(exc, UnauthenticatedError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
        headers=headers,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def store_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
    error = StoreFailureError(sanitize_error(exc, generic_message="The data store is unavailable."))
    return JSONResponse(status_code=error.http_status, content=error.to_dict())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": sanitize_error(exc, generic_message="An unexpected error occurred."),
        },
    )
