# =============================================================================
# app/exceptions.py - Error Taxonomy
# =============================================================================
# The closed set of errors a route handler may raise.
# Every error carries its kind, an HTTP status and a machine-readable code,
# so the boundary can turn it into a NormalizedError without guessing.
#
# Platform errors live in app/platform_errors.py and the catch-all that
# normalizes everything lives in app/error_handlers.py.
# =============================================================================

from enum import Enum
from typing import Any

from core.models.errors import NormalizedError


class ErrorKind(str, Enum):
    """
    Category of a failure.

    Used at the boundary to decide logging and translation. Every kind
    must appear in app.error_handlers.KIND_LOG_LEVELS.
    """
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    PAYMENT = "payment"
    PLATFORM = "platform"
    INTERNAL = "internal"


class PropertyAfricaException(Exception):
    """
    Base exception for the PropertyAfrica API.

    All custom exceptions inherit from this class. The message is
    returned to the caller as-is, so it must never contain provider
    output or stack details.
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details

    def to_normalized(self) -> NormalizedError:
        """Convert exception to the normalized error envelope."""
        return NormalizedError(
            message=self.message,
            code=self.code,
            status_code=self.status_code,
            details=self.details or None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        return self.to_normalized().to_envelope()


# =============================================================================
# Input Errors
# =============================================================================

class ValidationError(PropertyAfricaException):
    """Raised when request input has the wrong shape or values."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            details=details,
        )


class RequestRejectedError(ValidationError):
    """
    Raised when a request fails the pre-handler checks.

    Carries the check's own status and code (405, 414, 431 or 400).
    """

    def __init__(self, message: str, code: str, status_code: int):
        super().__init__(message)
        self.code = code
        self.status_code = status_code


# =============================================================================
# Auth Errors
# =============================================================================

class AuthenticationError(PropertyAfricaException):
    """Raised when credentials are missing or invalid."""

    kind = ErrorKind.AUTHENTICATION

    def __init__(self, message: str = "Unauthorized", details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="UNAUTHORIZED",
            status_code=401,
            details=details,
        )


class AuthorizationError(PropertyAfricaException):
    """Raised when an authenticated user may not touch a resource."""

    kind = ErrorKind.AUTHORIZATION

    def __init__(self, message: str = "Forbidden", details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="FORBIDDEN",
            status_code=403,
            details=details,
        )


# =============================================================================
# Resource Errors
# =============================================================================

class NotFoundError(PropertyAfricaException):
    """Raised when a requested record doesn't exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="NOT_FOUND",
            status_code=404,
            details=details,
        )


class PropertyNotFoundError(NotFoundError):
    """Raised when a property ID doesn't exist."""

    def __init__(self, property_id: str):
        super().__init__(
            message="Property not found",
            details={"property_id": property_id},
        )


class ConflictError(PropertyAfricaException):
    """Raised when a write collides with existing state."""

    kind = ErrorKind.CONFLICT

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="CONFLICT",
            status_code=409,
            details=details,
        )


# =============================================================================
# Payment Errors
# =============================================================================

class PaymentVerificationError(ValidationError):
    """Raised when a payment intent doesn't check out on the server."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, details=details)
        self.code = "PAYMENT_VERIFICATION_FAILED"


class PaymentFailedError(PropertyAfricaException):
    """Raised when the payment processor declines a charge."""

    kind = ErrorKind.PAYMENT

    def __init__(self, message: str = "Payment was declined", details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="PAYMENT_FAILED",
            status_code=402,
            details=details,
        )


# =============================================================================
# Fallback
# =============================================================================

class InternalError(PropertyAfricaException):
    """Unknown or uncaught failure. The message is always generic."""

    kind = ErrorKind.INTERNAL

    def __init__(self, details: dict[str, Any] | None = None):
        super().__init__(
            message="An unexpected error occurred",
            code="INTERNAL_ERROR",
            status_code=500,
            details=details,
        )
