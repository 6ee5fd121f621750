"""Custom exception hierarchy and handlers."""

from __future__ import annotations

import logging

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base application exception."""

    status_code = 400
    code = "app_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UnauthenticatedException(AppException):
    """Raised when no caller identity can be resolved."""

    status_code = 401
    code = "unauthenticated"


class ForbiddenException(AppException):
    """Raised when the caller lacks a capability or territory access.

    ``reason`` distinguishes a missing capability (``role``), a territory
    mismatch (``territory``) and a non-owner caller (``ownership``). It is
    logged but never returned to the client.
    """

    status_code = 403
    code = "forbidden"

    def __init__(self, message: str, *, reason: str = "role") -> None:
        self.reason = reason
        super().__init__(message)


class NotFoundException(AppException):
    """Raised when entity is not found."""

    status_code = 404
    code = "not_found"


class ValidationException(AppException):
    """Raised when a request or a requested transition breaks a rule."""

    status_code = 400
    code = "validation_error"


class ConflictException(AppException):
    """Raised when entity conflicts with current state."""

    status_code = 409
    code = "conflict"


class StorageFailureException(AppException):
    """Raised when the underlying write failed; safe to retry."""

    status_code = 500
    code = "storage_failure"


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handle custom domain exceptions."""
    if isinstance(exc, ForbiddenException):
        logger.info(
            "Forbidden %s %s (reason=%s): %s",
            request.method,
            request.url.path,
            exc.reason,
            exc.message,
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": {"code": exc.code, "message": exc.message}},
    )


async def http_exception_handler(_: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTP exceptions in unified shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": {"code": "http_error", "message": str(exc.detail)}},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_exception_handler(
    _: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Report malformed request bodies as 400 validation errors."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return JSONResponse(
        status_code=400,
        content={"error": {"code": "validation_error", "message": "; ".join(messages)}},
    )


async def unhandled_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception("Unhandled error: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"error": {"code": "internal_error", "message": "Internal server error"}},
    )


def register_exception_handlers(app) -> None:
    """Register global exception handlers."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
