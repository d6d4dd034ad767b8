"""
Exception handlers for the FastAPI application.

Converts application exceptions to JSON responses of the form
{"error": {"code": ..., "message": ...}}.
"""

import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from ridegroups.exceptions import ErrorCode, ProviderError, RideGroupsError

logger = logging.getLogger(__name__)


def create_error_response(
    status_code: int,
    code: str,
    message: str,
    details: Dict[str, Any] | None = None,
) -> JSONResponse:
    """Create a standardized error response."""
    content: Dict[str, Any] = {
        "error": {
            "code": code,
            "message": message,
        }
    }
    if details:
        content["error"]["details"] = details
    return JSONResponse(status_code=status_code, content=content)


async def ridegroups_error_handler(
    request: Request,
    exc: RideGroupsError,
) -> JSONResponse:
    return create_error_response(
        status_code=exc.status_code,
        code=exc.code.value,
        message=exc.message,
        details=exc.details if exc.details else None,
    )


async def provider_error_handler(
    request: Request,
    exc: ProviderError,
) -> JSONResponse:
    """Provider failures: upstream detail stays in the log."""
    logger.warning(f"{request.method} {request.url.path}: {exc!r}")
    return create_error_response(
        status_code=exc.status_code,
        code=exc.code.value,
        message=f"{exc.provider.capitalize()} request failed",
    )


async def database_error_handler(
    request: Request,
    exc: SQLAlchemyError,
) -> JSONResponse:
    logger.exception(f"Database error on {request.method} {request.url.path}")
    return create_error_response(
        status_code=500,
        code=ErrorCode.INTERNAL_ERROR.value,
        message="Internal server error",
    )


async def generic_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
    return create_error_response(
        status_code=500,
        code=ErrorCode.INTERNAL_ERROR.value,
        message="An unexpected error occurred",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    # Most specific class wins, so ProviderError overrides the base handler
    app.add_exception_handler(RideGroupsError, ridegroups_error_handler)
    app.add_exception_handler(ProviderError, provider_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)

    # Catch-all, surfaced through ServerErrorMiddleware
    app.add_exception_handler(Exception, generic_exception_handler)
