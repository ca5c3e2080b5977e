# =============================================================================
# app/error_handlers.py - Boundary Error Normalization
# =============================================================================
# handle_error() is the single catch-all every route funnels through:
#
#   1. PlatformError                 -> platform translator
#   2. Other taxonomy errors         -> their declared code/status
#   3. Recognised third-party errors -> wrapped as PlatformError, translated
#   4. Anything else                 -> INTERNAL_ERROR, 500, generic message
#
# register_exception_handlers() wires it into FastAPI so no exception
# reaches the ASGI server unnormalized.
# =============================================================================

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.exceptions import (
    ErrorKind,
    InternalError,
    PropertyAfricaException,
)
from app.platform_errors import (
    classify_external_error,
    is_platform_error,
    translate_platform_error,
)
from core.models.errors import NormalizedError

logger = logging.getLogger(__name__)


# Log level per error kind. Must cover every ErrorKind.
KIND_LOG_LEVELS: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: logging.INFO,
    ErrorKind.AUTHENTICATION: logging.INFO,
    ErrorKind.AUTHORIZATION: logging.WARNING,
    ErrorKind.NOT_FOUND: logging.INFO,
    ErrorKind.CONFLICT: logging.INFO,
    ErrorKind.PAYMENT: logging.WARNING,
    ErrorKind.PLATFORM: logging.ERROR,
    ErrorKind.INTERNAL: logging.ERROR,
}

# Kinds whose traceback is worth keeping in the server log
_KINDS_WITH_TRACEBACK = frozenset({ErrorKind.PLATFORM, ErrorKind.INTERNAL})

# Codes for framework HTTPExceptions that don't come from our taxonomy
_HTTP_STATUS_CODES: dict[int, str] = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "INVALID_REQUEST_METHOD",
    409: "CONFLICT",
    413: "REQUEST_ENTITY_TOO_LARGE",
    415: "UNSUPPORTED_MEDIA_TYPE",
    429: "RATE_LIMIT_EXCEEDED",
}


def _log(kind: ErrorKind, error: BaseException, normalized: NormalizedError) -> None:
    level = KIND_LOG_LEVELS[kind]
    logger.log(
        level,
        f"{kind.value} error {normalized.code} ({normalized.status_code}): {error}",
        exc_info=error if kind in _KINDS_WITH_TRACEBACK else None,
    )


def handle_error(error: BaseException) -> NormalizedError:
    """
    Convert any exception into a NormalizedError.

    Args:
        error: The exception caught at the handler boundary

    Returns:
        NormalizedError safe to send to the caller. Unknown errors never
        echo their text; it only goes to the server log.
    """
    if is_platform_error(error):
        normalized = translate_platform_error(error)
        _log(ErrorKind.PLATFORM, error, normalized)
        return normalized

    if isinstance(error, PropertyAfricaException):
        normalized = error.to_normalized()
        _log(error.kind, error, normalized)
        return normalized

    platform_error = classify_external_error(error)
    if platform_error is not None:
        normalized = translate_platform_error(platform_error)
        _log(ErrorKind.PLATFORM, error, normalized)
        return normalized

    normalized = InternalError().to_normalized()
    _log(ErrorKind.INTERNAL, error, normalized)
    return normalized


def error_response(normalized: NormalizedError, headers: dict[str, str] | None = None) -> JSONResponse:
    """Build the JSON response for a normalized error."""
    return JSONResponse(
        status_code=normalized.status_code,
        content=jsonable_encoder(normalized.to_envelope()),
        headers=headers,
    )


# =============================================================================
# FastAPI Exception Handlers
# =============================================================================

async def application_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle taxonomy errors, third-party errors and anything uncaught."""
    return error_response(handle_error(exc))


async def request_validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Handle FastAPI body/query validation failures.

    Reported as a 400 VALIDATION_ERROR with the field errors in details.
    """
    errors: list[dict[str, Any]] = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    logger.info(f"Request validation failed on {request.url.path}: {errors}")
    normalized = NormalizedError(
        message="Invalid request",
        code="VALIDATION_ERROR",
        status_code=400,
        details={"errors": errors},
    )
    return error_response(normalized)


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """Handle framework HTTPExceptions (unknown route, wrong method, ...)."""
    status_code = exc.status_code if 400 <= exc.status_code <= 599 else 500
    message = exc.detail if isinstance(exc.detail, str) and exc.detail else "Request failed"
    normalized = NormalizedError(
        message=message,
        code=_HTTP_STATUS_CODES.get(status_code, "HTTP_ERROR"),
        status_code=status_code,
    )
    return error_response(normalized, headers=getattr(exc, "headers", None))


def register_exception_handlers(app: FastAPI) -> None:
    """Install every boundary handler on the app."""
    app.add_exception_handler(PropertyAfricaException, application_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, application_exception_handler)
