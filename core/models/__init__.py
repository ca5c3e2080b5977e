# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - errors.py: NormalizedError, the one shape every failure leaves in
# - property.py: Property enums, filters and create/list schemas
# - payment.py: Card and mobile money payment schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

from .errors import NormalizedError

from .property import (
    IMMUTABLE_FIELDS,
    SERVER_MANAGED_FIELDS,
    Currency,
    PropertyCreate,
    PropertyFilters,
    PropertyList,
    PropertyStatus,
    PropertyType,
)

from .payment import (
    MobileMoneyProvider,
    MobileMoneyRequest,
    MobileMoneyResponse,
    ProcessPaymentRequest,
    ProcessPaymentResponse,
    VerifyPaymentRequest,
)

__all__ = [
    # Errors
    "NormalizedError",
    # Property
    "IMMUTABLE_FIELDS",
    "SERVER_MANAGED_FIELDS",
    "Currency",
    "PropertyCreate",
    "PropertyFilters",
    "PropertyList",
    "PropertyStatus",
    "PropertyType",
    # Payment
    "MobileMoneyProvider",
    "MobileMoneyRequest",
    "MobileMoneyResponse",
    "ProcessPaymentRequest",
    "ProcessPaymentResponse",
    "VerifyPaymentRequest",
]
