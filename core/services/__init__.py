# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .property_service import PropertyService
from .payment_service import PaymentService
from .profile_service import ProfileService
from .auth_service import AuthService, SessionTokens

__all__ = [
    "PropertyService",
    "PaymentService",
    "ProfileService",
    "AuthService",
    "SessionTokens",
]
