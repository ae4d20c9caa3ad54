"""Error Handlers — global exception handlers for the Photobooth API.

Invariants:
    - PhotoboothError → structured JSON envelope with its own HTTP status
    - RequestValidationError → field-level error details
    - Framework HTTP errors (unknown route, wrong method) → same envelope, own status
    - Exception (catch-all) → never leaks internal details

Design Decisions:
    - Three-layer handler: domain (PhotoboothError), validation (Pydantic), catch-all (Exception)
    - Extracted from main.py: keeps the app module down to wiring
    - Domain rule violations (ValidationFailedError) reuse the "details" list of
      schema errors, so clients parse a single shape for both
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from photobooth.core.errors import (
    ErrorCategory, ErrorSeverity, PhotoboothError, ValidationFailedError,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_photobooth_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_photobooth_error_handler(app: FastAPI) -> None:
    """Register domain/infrastructure error handler."""

    @app.exception_handler(PhotoboothError)
    async def photobooth_error_handler(request: Request, exc: PhotoboothError):
        """Handle all Photobooth domain/infrastructure errors."""
        log = logger.warning if exc.http_status < 500 else logger.error
        log(
            f"{type(exc).__name__}: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        content = exc.to_response()
        if isinstance(exc, ValidationFailedError):
            content["error"]["details"] = [
                {"field": exc.field, "message": exc.message, "type": "domain_rule"},
            ]
        return JSONResponse(status_code=exc.http_status, content=content)


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


_HTTP_CODES = {
    401: ("AUTHENTICATION_REQUIRED", ErrorCategory.AUTHENTICATION),
    403: ("PERMISSION_DENIED", ErrorCategory.AUTHORIZATION),
    404: ("RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND),
    405: ("METHOD_NOT_ALLOWED", ErrorCategory.VALIDATION),
}


def _register_http_error_handler(app: FastAPI) -> None:
    """Register handler for errors raised by routing itself."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        code, category = _HTTP_CODES.get(
            exc.status_code, ("HTTP_ERROR", ErrorCategory.INTERNAL),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": {
                    "code": code,
                    "message": str(exc.detail),
                    "category": category.value,
                    "severity": ErrorSeverity.WARNING.value,
                },
            },
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }
