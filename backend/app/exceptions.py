"""
Structured exceptions and error responses for Taskboard.

Services raise the exception classes below; the handlers registered on the
FastAPI app render them (and request validation or persistence failures)
in one response shape:

    {"error": "<code>", "message": "<human readable>", "details": [...] | null}
"""

from typing import Any, Dict, Optional, List
from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from app.logging_config import get_logger

logger = get_logger("errors")


# =============================================================================
# Error Response Schema
# =============================================================================

class ErrorDetail(BaseModel):
    """Detail of a single error."""
    loc: Optional[List[str]] = None  # e.g. ["body", "assigned_to", "0"]
    msg: str
    type: str


class ErrorResponse(BaseModel):
    """Structured error response format."""
    error: str  # Error code (e.g., "not_found", "conflict")
    message: str
    details: Optional[List[ErrorDetail]] = None


# =============================================================================
# Custom Exceptions
# =============================================================================

class TaskboardException(Exception):
    """Base exception for all Taskboard errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "internal_error",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[List[Dict[str, Any]]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class NotFoundError(TaskboardException):
    """Referenced project, task or user does not exist."""

    def __init__(self, resource: str, resource_id: Any):
        super().__init__(
            message=f"{resource} with id {resource_id} not found",
            error_code="not_found",
            status_code=status.HTTP_404_NOT_FOUND,
        )
        self.resource = resource
        self.resource_id = str(resource_id)


class ConflictError(TaskboardException):
    """A membership or assignment precondition does not hold."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            error_code="conflict",
            status_code=status.HTTP_409_CONFLICT,
        )


class BadRequestError(TaskboardException):
    """Malformed or unusable input."""

    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(
            message=message,
            error_code="bad_request",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
        )


class UnauthorizedError(TaskboardException):
    """Missing, invalid or expired credentials."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(
            message=message,
            error_code="unauthorized",
            status_code=status.HTTP_401_UNAUTHORIZED,
        )


class InternalError(TaskboardException):
    """Unexpected failure in a collaborator (token signing, persistence)."""

    def __init__(self, message: str = "An unexpected error occurred"):
        super().__init__(message=message)


# =============================================================================
# Exception Handlers
# =============================================================================

async def taskboard_exception_handler(request: Request, exc: TaskboardException) -> JSONResponse:
    """Handle TaskboardException and return structured response."""
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.error_code,
            "message": exc.message,
            "details": exc.details,
        },
        headers=headers,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request-shape failures as bad_request with per-field details."""
    details = [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": error.get("msg", ""),
            "type": error.get("type", "value_error"),
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder({
            "error": "bad_request",
            "message": "Request validation failed",
            "details": details,
        }),
    )


async def persistence_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Persistence failures surface as internal errors, never retried."""
    logger.exception(f"Persistence failure on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred",
            "details": None,
        },
    )


def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(TaskboardException, taskboard_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, persistence_exception_handler)
