# =============================================================================
# tests/test_payments.py - Payment Endpoint Tests
# =============================================================================
# Stripe is mocked at the StripeClient wrapper.
#
# Run with: pytest tests/test_payments.py -v
# =============================================================================

import re
from unittest.mock import MagicMock, patch

import pytest
import stripe

from core.models.payment import ProcessPaymentRequest


@pytest.fixture
def mock_stripe():
    with patch("core.services.payment_service.StripeClient") as mock:
        yield mock


def intent(status="succeeded", client_secret="pi_123_secret_abc"):
    return MagicMock(id="pi_123", status=status, client_secret=client_secret)


# =============================================================================
# POST /api/payments/process
# =============================================================================

class TestProcessPayment:

    def test_amount_minor_rounds(self):
        request = ProcessPaymentRequest(paymentMethodId="pm_1", amount=19.99, currency="USD")

        assert request.amount_minor == 1999

    def test_amount_minor_rounds_half_up(self):
        request = ProcessPaymentRequest(paymentMethodId="pm_1", amount=0.125, currency="USD")

        assert request.amount_minor == 13

    def test_amount_minor_zero_decimal_currency(self):
        request = ProcessPaymentRequest(paymentMethodId="pm_1", amount=250000, currency="UGX")

        assert request.amount_minor == 250000

    def test_amount_minor_zero_decimal_rounds_to_whole_units(self):
        request = ProcessPaymentRequest(paymentMethodId="pm_1", amount=1500.5, currency="UGX")

        assert request.amount_minor == 1501

    def test_creates_confirmed_intent(self, client, mock_stripe):
        mock_stripe.create_payment_intent.return_value = intent(status="requires_action")

        response = client.post("/api/payments/process", json={
            "paymentMethodId": "pm_card_visa",
            "amount": 1500.5,
            "currency": "KES",
        })

        assert response.status_code == 200
        assert response.json() == {"clientSecret": "pi_123_secret_abc"}
        mock_stripe.create_payment_intent.assert_called_once_with(
            amount_minor=150050,
            currency="kes",
            payment_method="pm_card_visa",
            return_url="http://localhost:3000/payment/success",
        )

    def test_card_declined(self, client, mock_stripe):
        mock_stripe.create_payment_intent.side_effect = stripe.CardError(
            "Your card was declined.", param=None, code="card_declined"
        )

        response = client.post("/api/payments/process", json={
            "paymentMethodId": "pm_card_chargeDeclined",
            "amount": 10,
            "currency": "USD",
        })

        assert response.status_code == 402
        assert response.json()["code"] == "PAYMENT_FAILED"
        assert response.json()["details"] == {"decline_code": "card_declined"}

    def test_processor_failure_is_platform_error(self, client, mock_stripe):
        mock_stripe.create_payment_intent.side_effect = stripe.StripeError("Invalid API Key provided: sk_live_xyz")

        response = client.post("/api/payments/process", json={
            "paymentMethodId": "pm_1",
            "amount": 10,
            "currency": "USD",
        })

        assert response.status_code == 502
        assert response.json()["code"] == "PAYMENT_PROVIDER_ERROR"
        assert "sk_live_xyz" not in response.text

    @pytest.mark.parametrize("body", [
        {"paymentMethodId": "pm_1", "amount": 0, "currency": "USD"},
        {"paymentMethodId": "pm_1", "amount": 10, "currency": "XYZ"},
        {"amount": 10, "currency": "USD"},
    ])
    def test_invalid_body(self, client, mock_stripe, body):
        response = client.post("/api/payments/process", json=body)

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
        mock_stripe.create_payment_intent.assert_not_called()


# =============================================================================
# POST /api/payments/verify
# =============================================================================

class TestVerifyPayment:

    def test_succeeded_with_matching_secret(self, client, mock_stripe):
        mock_stripe.retrieve_payment_intent.return_value = intent()

        response = client.post("/api/payments/verify", json={
            "paymentIntentId": "pi_123",
            "paymentIntent": "pi_123",
            "paymentIntentClientSecret": "pi_123_secret_abc",
        })

        assert response.status_code == 200
        assert response.json() == {"success": True}
        mock_stripe.retrieve_payment_intent.assert_called_once_with("pi_123")

    def test_wrong_secret(self, client, mock_stripe):
        mock_stripe.retrieve_payment_intent.return_value = intent()

        response = client.post("/api/payments/verify", json={
            "paymentIntentId": "pi_123",
            "paymentIntentClientSecret": "pi_999_secret_other",
        })

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid client secret"

    def test_status_not_succeeded(self, client, mock_stripe):
        mock_stripe.retrieve_payment_intent.return_value = intent(status="requires_action")

        response = client.post("/api/payments/verify", json={
            "paymentIntentId": "pi_123",
            "paymentIntentClientSecret": "pi_123_secret_abc",
        })

        assert response.status_code == 400
        assert "requires_action" in response.json()["error"]

    def test_intent_mismatch(self, client, mock_stripe):
        response = client.post("/api/payments/verify", json={
            "paymentIntentId": "pi_123",
            "paymentIntent": "pi_456",
            "paymentIntentClientSecret": "pi_123_secret_abc",
        })

        assert response.status_code == 400
        assert response.json()["error"] == "Payment intent mismatch"
        mock_stripe.retrieve_payment_intent.assert_not_called()

    def test_missing_intent_id(self, client, mock_stripe):
        response = client.post("/api/payments/verify", json={
            "paymentIntentClientSecret": "pi_123_secret_abc",
        })

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"


# =============================================================================
# POST /api/payments/mobile-money
# =============================================================================

class TestMobileMoney:

    def test_initiates_payment(self, client):
        response = client.post("/api/payments/mobile-money", json={
            "amount": 250000,
            "currency": "UGX",
            "phoneNumber": "+256772000000",
            "provider": "MTN Mobile Money",
        })

        body = response.json()
        assert response.status_code == 200
        assert body["success"] is True
        assert body["message"] == "Payment initiated successfully"
        assert re.fullmatch(r"MM-\d+-[0-9a-z]{9}", body["transactionId"])

    def test_transaction_ids_differ(self, client):
        payload = {
            "amount": 1000,
            "currency": "KES",
            "phoneNumber": "+254700000000",
            "provider": "M-Pesa",
        }

        first = client.post("/api/payments/mobile-money", json=payload).json()["transactionId"]
        second = client.post("/api/payments/mobile-money", json=payload).json()["transactionId"]

        assert first != second

    @pytest.mark.parametrize("missing", ["amount", "currency", "phoneNumber", "provider"])
    def test_missing_field(self, client, missing):
        payload = {
            "amount": 1000,
            "currency": "KES",
            "phoneNumber": "+254700000000",
            "provider": "M-Pesa",
        }
        del payload[missing]

        response = client.post("/api/payments/mobile-money", json=payload)

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_unknown_provider(self, client):
        response = client.post("/api/payments/mobile-money", json={
            "amount": 1000,
            "currency": "KES",
            "phoneNumber": "+254700000000",
            "provider": "Carrier Pigeon Pay",
        })

        assert response.status_code == 400
