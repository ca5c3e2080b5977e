# =============================================================================
# app/routers/payments.py - Payment Endpoints
# =============================================================================
# Card payments via Stripe and mobile money (mock) collections.
# =============================================================================

from fastapi import APIRouter, Depends

from app.config import Settings, get_settings
from core.models.payment import (
    MobileMoneyRequest,
    MobileMoneyResponse,
    ProcessPaymentRequest,
    ProcessPaymentResponse,
    VerifyPaymentRequest,
)
from core.services.payment_service import PaymentService

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post("/process", response_model=ProcessPaymentResponse, response_model_by_alias=True)
async def process_payment(
    body: ProcessPaymentRequest,
    config: Settings = Depends(get_settings),
):
    """
    Create and confirm a Stripe PaymentIntent.

    Returns the intent's client secret for the browser to finish any
    3-D Secure step.
    """
    return PaymentService.process_payment(body, base_url=config.BASE_URL)


@router.post("/verify")
async def verify_payment(body: VerifyPaymentRequest):
    """
    Verify a payment after the Stripe redirect.

    Succeeds only if the client secret matches and the intent succeeded.
    """
    return PaymentService.verify_payment(body)


@router.post("/mobile-money", response_model=MobileMoneyResponse, response_model_by_alias=True)
async def mobile_money_payment(
    body: MobileMoneyRequest,
    config: Settings = Depends(get_settings),
):
    """Start a mobile money collection."""
    return PaymentService.initiate_mobile_money(body, config)
