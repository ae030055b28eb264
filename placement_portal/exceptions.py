"""
Domain exceptions and the FastAPI handlers that turn them into JSON errors.
"""

import logging

from fastapi import Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class PortalError(Exception):
    """Base exception for placement operations."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PortalError):
    """Raised when input is malformed or a value is not allowed."""

    status_code = 400


class EligibilityError(PortalError):
    """Raised when a student does not satisfy a job's constraints."""

    status_code = 400

    def __init__(self, reason):
        super().__init__(reason.message)
        self.reason = reason


class ConflictError(PortalError):
    """Raised when a record already exists (duplicate application)."""

    status_code = 409


class NotFoundError(PortalError):
    """Raised when a referenced job, student or application is missing."""

    status_code = 404


class PermissionDeniedError(PortalError):
    """Raised when the caller may not act on the target record."""

    status_code = 403


async def portal_exception_handler(request: Request, exc: PortalError) -> JSONResponse:
    logger.info(f"{exc.__class__.__name__} in {request.url.path}: {exc.message}")

    content = {
        "success": False,
        "error": exc.message,
        "type": exc.__class__.__name__
    }
    if isinstance(exc, EligibilityError):
        content["reason"] = exc.reason.value

    return JSONResponse(status_code=exc.status_code, content=content)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report body/query validation failures the same way as ValidationError."""
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", message)

    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": message,
            "type": "ValidationError"
        }
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "type": "HTTPException"
        },
        headers=getattr(exc, "headers", None)
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unexpected error in {request.url.path}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "type": "InternalError"
        }
    )
