"""Exception handlers rendering the uniform ``{success: false, ...}`` envelope."""

from typing import Any

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from clinic_api.core.exceptions import AppException

logger = structlog.get_logger(__name__)

# Request sections that are not part of the field name shown to clients
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


def error_content(message: str, errors: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    """Build the failure envelope."""
    content: dict[str, Any] = {"success": False, "message": message}
    if errors:
        content["errors"] = errors
    return content


def _field_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in _LOCATION_PREFIXES]
        message = str(error.get("msg", "Invalid value")).removeprefix("Value error, ")
        errors.append({"field": ".".join(loc), "message": message})
    return errors


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Handle custom application exceptions.

    Args:
        request: Request object
        exc: Application exception

    Returns:
        JSON error response
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=error_content(exc.message, exc.errors),
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """
    Handle HTTP exceptions.

    Args:
        request: Request object
        exc: HTTP exception

    Returns:
        JSON error response
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=error_content(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Handle validation errors.

    The first field message becomes the top-level message so simple clients
    can show it directly.

    Args:
        request: Request object
        exc: Validation exception

    Returns:
        JSON error response with per-field messages
    """
    errors = _field_errors(exc)
    message = errors[0]["message"] if errors else "Validation failed"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_content(message, errors),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions.

    Args:
        request: Request object
        exc: Exception

    Returns:
        JSON error response
    """
    logger.exception(
        "unhandled_exception",
        method=request.method,
        path=request.url.path,
        error=str(exc),
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_content("Internal server error"),
    )
