# =============================================================================
# lib/stripe_client.py - Stripe Client Wrapper
# =============================================================================
# Thin wrapper around the Stripe SDK for PaymentIntent operations.
# The secret key is passed on every call instead of being assigned to the
# module-level stripe.api_key, so nothing global is mutated per request.
#
# Usage:
#   from lib.stripe_client import StripeClient
#   intent = StripeClient.retrieve_payment_intent("pi_123")
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

import stripe

from app.config import get_settings

logger = logging.getLogger(__name__)

# Stripe API version pinned for PaymentIntent payloads
STRIPE_API_VERSION = "2023-10-16"


class StripeNotConfiguredError(stripe.StripeError):
    """Raised when STRIPE_SECRET_KEY is unset."""


class StripeClient:
    """
    Class-level access to Stripe PaymentIntents.

    Example:
        intent = StripeClient.create_payment_intent(
            amount_minor=150000,
            currency="kes",
            payment_method="pm_123",
            return_url="https://example.com/payment/success",
        )
        intent.client_secret
    """

    @classmethod
    def _api_key(cls) -> str:
        key = get_settings().STRIPE_SECRET_KEY
        if not key:
            raise StripeNotConfiguredError("STRIPE_SECRET_KEY is not set")
        return key

    @classmethod
    def retrieve_payment_intent(cls, payment_intent_id: str) -> Any:
        """
        Fetch a PaymentIntent by ID.

        Raises:
            stripe.StripeError: On any processor failure
        """
        intent = stripe.PaymentIntent.retrieve(
            payment_intent_id,
            api_key=cls._api_key(),
            stripe_version=STRIPE_API_VERSION,
        )
        logger.debug(f"Retrieved payment intent {payment_intent_id}")
        return intent

    @classmethod
    def create_payment_intent(
        cls,
        amount_minor: int,
        currency: str,
        payment_method: str,
        return_url: str,
    ) -> Any:
        """
        Create and confirm a PaymentIntent.

        Args:
            amount_minor: Amount in the currency's minor unit (cents, or whole units for zero-decimal currencies)
            currency: Lowercase ISO currency code
            payment_method: Stripe PaymentMethod ID from the client
            return_url: Where Stripe sends the user after 3DS

        Raises:
            stripe.CardError: If the card is declined
            stripe.StripeError: On any other processor failure
        """
        intent = stripe.PaymentIntent.create(
            amount=amount_minor,
            currency=currency,
            payment_method=payment_method,
            confirm=True,
            return_url=return_url,
            api_key=cls._api_key(),
            stripe_version=STRIPE_API_VERSION,
        )
        logger.info(f"Created payment intent {intent.id} ({amount_minor} {currency})")
        return intent
