# =============================================================================
# core/models/payment.py - Payment Schemas
# =============================================================================
# Request/response contracts for card payments (Stripe) and mobile money.
# Field aliases keep the camelCase names the web client already sends.
# =============================================================================

from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .property import Currency


# Currencies Stripe charges in whole units, with no minor unit
ZERO_DECIMAL_CURRENCIES = frozenset({Currency.UGX})


class MobileMoneyProvider(str, Enum):
    MTN = "MTN Mobile Money"
    MPESA = "M-Pesa"
    AIRTEL = "Airtel Money"
    TIGO = "Tigo Pesa"


class ProcessPaymentRequest(BaseModel):
    """
    Body for POST /payments/process.

    Example:
        {"paymentMethodId": "pm_123", "amount": 1500.0, "currency": "KES"}
    """
    payment_method_id: str = Field(..., alias="paymentMethodId", min_length=1)
    amount: float = Field(..., gt=0, description="Amount in major units (e.g. 15.50)")
    currency: Currency

    model_config = ConfigDict(populate_by_name=True)

    @property
    def amount_minor(self) -> int:
        """
        Amount in minor units as Stripe expects it.

        Zero-decimal currencies pass through in whole units. Halves round up,
        so 0.125 USD is 13 cents.
        """
        exponent = 0 if self.currency in ZERO_DECIMAL_CURRENCIES else 2
        return int(
            Decimal(str(self.amount)).scaleb(exponent).quantize(Decimal(1), rounding=ROUND_HALF_UP)
        )


class ProcessPaymentResponse(BaseModel):
    client_secret: str | None = Field(..., alias="clientSecret")

    model_config = ConfigDict(populate_by_name=True)


class VerifyPaymentRequest(BaseModel):
    """
    Body for POST /payments/verify.

    paymentIntentId identifies the intent to retrieve. paymentIntent is
    what Stripe appends to the return URL; when present it must name the
    same intent.
    """
    payment_intent_id: str = Field(..., alias="paymentIntentId", min_length=1)
    payment_intent: str | None = Field(default=None, alias="paymentIntent")
    payment_intent_client_secret: str = Field(..., alias="paymentIntentClientSecret", min_length=1)

    model_config = ConfigDict(populate_by_name=True)


class MobileMoneyRequest(BaseModel):
    """Body for POST /payments/mobile-money."""
    amount: float = Field(..., gt=0)
    currency: Currency
    phone_number: str = Field(..., alias="phoneNumber", min_length=7, max_length=20)
    provider: MobileMoneyProvider

    model_config = ConfigDict(populate_by_name=True)


class MobileMoneyResponse(BaseModel):
    success: bool = True
    transaction_id: str = Field(..., alias="transactionId")
    message: str = "Payment initiated successfully"

    model_config = ConfigDict(populate_by_name=True)
