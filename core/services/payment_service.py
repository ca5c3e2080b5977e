# =============================================================================
# core/services/payment_service.py - Payment Business Logic
# =============================================================================
# Card payments go through Stripe PaymentIntents. Mobile money is a mock
# integration: requests are validated and given a transaction ID but no
# provider API is called yet.
# =============================================================================

import logging
from typing import Any

import stripe

from app.config import Settings
from app.exceptions import PaymentFailedError, PaymentVerificationError
from core.models.payment import (
    MobileMoneyProvider,
    MobileMoneyRequest,
    MobileMoneyResponse,
    ProcessPaymentRequest,
    ProcessPaymentResponse,
    VerifyPaymentRequest,
)
from lib.stripe_client import StripeClient
from lib.utils import make_transaction_id

logger = logging.getLogger(__name__)


# Provider endpoints for the eventual live integration
MOBILE_MONEY_ENDPOINTS: dict[MobileMoneyProvider, str] = {
    MobileMoneyProvider.MTN: "https://api.mtn.com/collection/v1_0",
    MobileMoneyProvider.MPESA: "https://api.safaricom.co.ke/mpesa/stkpush/v1/processrequest",
    MobileMoneyProvider.AIRTEL: "https://api.airtel.com/money/v1",
    MobileMoneyProvider.TIGO: "https://api.tigo.com/v1",
}


def _provider_api_key(provider: MobileMoneyProvider, config: Settings) -> str | None:
    return {
        MobileMoneyProvider.MTN: config.MTN_MOBILE_MONEY_API_KEY,
        MobileMoneyProvider.MPESA: config.MPESA_API_KEY,
        MobileMoneyProvider.AIRTEL: config.AIRTEL_MONEY_API_KEY,
        MobileMoneyProvider.TIGO: config.TIGO_PESA_API_KEY,
    }[provider]


class PaymentService:
    """Service for payment operations."""

    @staticmethod
    def process_payment(request: ProcessPaymentRequest, base_url: str) -> ProcessPaymentResponse:
        """
        Create and confirm a card payment.

        Args:
            request: Payment method, amount (major units) and currency
            base_url: Public web URL, used for the 3DS return page

        Returns:
            ProcessPaymentResponse with the intent's client secret

        Raises:
            PaymentFailedError: If the card is declined
        """
        try:
            intent = StripeClient.create_payment_intent(
                amount_minor=request.amount_minor,
                currency=request.currency.value.lower(),
                payment_method=request.payment_method_id,
                return_url=f"{base_url.rstrip('/')}/payment/success",
            )
        except stripe.CardError as e:
            logger.warning(f"Card declined: {e.code}")
            raise PaymentFailedError(details={"decline_code": e.code}) from e

        return ProcessPaymentResponse(client_secret=intent.client_secret)

    @staticmethod
    def verify_payment(request: VerifyPaymentRequest) -> dict[str, Any]:
        """
        Confirm on the server that a payment really succeeded.

        The intent is fetched from Stripe and its client secret compared
        with the one the browser holds, so a client can't claim someone
        else's payment.

        Returns:
            {"success": True}

        Raises:
            PaymentVerificationError: On intent mismatch, secret mismatch
                or a status other than "succeeded"
        """
        if request.payment_intent and request.payment_intent != request.payment_intent_id:
            raise PaymentVerificationError("Payment intent mismatch")

        intent = StripeClient.retrieve_payment_intent(request.payment_intent_id)

        if intent.client_secret != request.payment_intent_client_secret:
            logger.warning(f"Client secret mismatch for payment intent {request.payment_intent_id}")
            raise PaymentVerificationError("Invalid client secret")

        if intent.status != "succeeded":
            raise PaymentVerificationError(
                f"Payment status: {intent.status}",
                details={"status": intent.status},
            )

        logger.info(f"Verified payment intent {request.payment_intent_id}")
        return {"success": True}

    @staticmethod
    def initiate_mobile_money(request: MobileMoneyRequest, config: Settings) -> MobileMoneyResponse:
        """
        Start a mobile money collection.

        Mock implementation: validates the request and issues a
        transaction ID without calling the provider.
        """
        if not _provider_api_key(request.provider, config):
            logger.warning(f"No API key configured for {request.provider.value}, using mock flow")

        transaction_id = make_transaction_id("MM")
        logger.info(
            f"Mobile money payment {transaction_id} via {request.provider.value} "
            f"({MOBILE_MONEY_ENDPOINTS[request.provider]}): {request.amount} {request.currency.value}"
        )
        return MobileMoneyResponse(transaction_id=transaction_id)
