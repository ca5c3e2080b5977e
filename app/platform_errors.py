# =============================================================================
# app/platform_errors.py - Platform Error Translator
# =============================================================================
# Platform errors are failures that originate in the infrastructure the
# API runs on or calls into (hosting runtime, database, identity provider,
# payment processor, network) rather than in application logic.
#
# They are a tagged variant of the taxonomy: anything that is a
# PlatformError is a platform error, nothing else is. Third-party client
# exceptions are wrapped into PlatformError by classify_external_error()
# before translation.
#
# Translation never forwards the raw provider message. Callers get a
# fixed safe message, the platform code, the mapped status and a
# request ID they can quote to support.
# =============================================================================

import logging
import uuid
from typing import Any

import httpx
import stripe
from postgrest.exceptions import APIError as PostgrestAPIError
from supabase import AuthError

from app.exceptions import ErrorKind, PropertyAfricaException
from core.models.errors import NormalizedError
from lib.supabase_client import SupabaseClientError

logger = logging.getLogger(__name__)


GENERIC_PLATFORM_CODE = "PLATFORM_ERROR"
GENERIC_PLATFORM_MESSAGE = "A platform error occurred"

# HTTP status for each platform code
PLATFORM_STATUS_CODES: dict[str, int] = {
    # Function errors
    "FUNCTION_INVOCATION_ERROR": 500,
    "FUNCTION_EXECUTION_ERROR": 500,
    "FUNCTION_TIMEOUT": 504,
    "FUNCTION_MEMORY_LIMIT": 507,
    # Deployment errors
    "DEPLOYMENT_ERROR": 500,
    "BUILD_ERROR": 500,
    "DEPLOYMENT_TIMEOUT": 504,
    # DNS errors
    "DNS_ERROR": 502,
    "DNS_TIMEOUT": 504,
    # Edge network errors
    "EDGE_NETWORK_ERROR": 502,
    "EDGE_TIMEOUT": 504,
    # Hosted services
    "UPSTREAM_TIMEOUT": 504,
    "DATABASE_ERROR": 503,
    "IDENTITY_PROVIDER_ERROR": 502,
    "PAYMENT_PROVIDER_ERROR": 502,
    "UNKNOWN_ERROR": 500,
}

# Caller-facing message for each platform code
PLATFORM_MESSAGES: dict[str, str] = {
    "FUNCTION_INVOCATION_ERROR": "The function failed to execute",
    "FUNCTION_EXECUTION_ERROR": "An error occurred during function execution",
    "FUNCTION_TIMEOUT": "The function execution timed out",
    "FUNCTION_MEMORY_LIMIT": "The function exceeded its memory limit",
    "DEPLOYMENT_ERROR": "The deployment failed",
    "BUILD_ERROR": "The build process failed",
    "DEPLOYMENT_TIMEOUT": "The deployment timed out",
    "DNS_ERROR": "A DNS error occurred",
    "DNS_TIMEOUT": "The DNS operation timed out",
    "EDGE_NETWORK_ERROR": "An error occurred in the edge network",
    "EDGE_TIMEOUT": "The edge network operation timed out",
    "UPSTREAM_TIMEOUT": "An upstream service timed out",
    "DATABASE_ERROR": "The database is temporarily unavailable",
    "IDENTITY_PROVIDER_ERROR": "The authentication service is unavailable",
    "PAYMENT_PROVIDER_ERROR": "The payment service is unavailable",
    "UNKNOWN_ERROR": "An unexpected error occurred",
}


class PlatformError(PropertyAfricaException):
    """
    Failure raised by the hosting runtime or a hosted dependency.

    Attributes:
        code: Platform code (see PLATFORM_STATUS_CODES)
        message: Internal diagnostic text, logged but never returned
        source: Which platform produced it ("runtime", "database", ...)
        request_id: Correlation ID returned to the caller
    """

    kind = ErrorKind.PLATFORM

    def __init__(
        self,
        code: str,
        message: str = GENERIC_PLATFORM_MESSAGE,
        source: str = "runtime",
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
        request_id: str | None = None,
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=status_code or PLATFORM_STATUS_CODES.get(code, 500),
            details=details,
        )
        self.source = source
        self.request_id = request_id or f"req_{uuid.uuid4().hex[:12]}"


def is_platform_error(error: BaseException) -> bool:
    """Check whether an error originated in the platform, not the app."""
    return isinstance(error, PlatformError)


def classify_external_error(error: BaseException) -> PlatformError | None:
    """
    Wrap a third-party client failure as a PlatformError.

    Returns:
        PlatformError for recognised database, auth, payment and network
        failures, None for anything else
    """
    if isinstance(error, PlatformError):
        return error

    if isinstance(error, httpx.TimeoutException):
        return PlatformError("UPSTREAM_TIMEOUT", str(error), source="network")

    if isinstance(error, httpx.TransportError):
        return PlatformError("EDGE_NETWORK_ERROR", str(error), source="network")

    if isinstance(error, (PostgrestAPIError, SupabaseClientError)):
        return PlatformError("DATABASE_ERROR", str(error), source="database")

    if isinstance(error, AuthError):
        return PlatformError("IDENTITY_PROVIDER_ERROR", str(error), source="identity")

    if isinstance(error, stripe.StripeError):
        return PlatformError("PAYMENT_PROVIDER_ERROR", str(error), source="payments")

    return None


def translate_platform_error(error: PlatformError) -> NormalizedError:
    """
    Map a platform error to the normalized envelope.

    Only the safe message for the code, the code itself, the status and
    the request ID leave this function.
    """
    if error.code in PLATFORM_MESSAGES:
        code = error.code
        message = PLATFORM_MESSAGES[code]
    else:
        code = GENERIC_PLATFORM_CODE
        message = GENERIC_PLATFORM_MESSAGE

    status_code = error.status_code if 400 <= error.status_code <= 599 else 500

    return NormalizedError(
        message=message,
        code=code,
        status_code=status_code,
        details={"request_id": error.request_id},
    )
