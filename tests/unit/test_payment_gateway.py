"""
Unit tests for the Razorpay gateway adapter: signatures, rounding, defaults.
"""
import re
from unittest.mock import MagicMock

import pytest
from razorpay.errors import BadRequestError, GatewayError, ServerError

from filemyrti_api.core.config import ConfigurationError
from filemyrti_api.services.payment_gateway import (
    RazorpayGateway,
    default_receipt,
    is_structured_gateway_error,
    round_amount,
)

# HMAC-SHA256("test_secret", "order_Nx1pQ8nF0aL2mT|pay_Nx1qk0fU3b2Xy9")
KNOWN_SIGNATURE = "190d476754663a04b89a59e0fc2e87e4ec3ba8c05bb710b3162b74e99f4e5002"


@pytest.fixture
def gw():
    return RazorpayGateway("rzp_test_key", "test_secret", client=MagicMock())


class TestSignature:
    def test_known_digest(self, gw):
        assert gw.generate_signature("order_Nx1pQ8nF0aL2mT", "pay_Nx1qk0fU3b2Xy9") == KNOWN_SIGNATURE

    def test_deterministic(self, gw):
        first = gw.generate_signature("order_A", "pay_B")
        assert first == gw.generate_signature("order_A", "pay_B")
        assert re.fullmatch(r"[0-9a-f]{64}", first)

    def test_order_of_ids_matters(self, gw):
        assert gw.generate_signature("order_A", "pay_B") != gw.generate_signature("pay_B", "order_A")

    def test_verify_accepts_matching_signature(self, gw):
        assert gw.verify_signature("order_Nx1pQ8nF0aL2mT", "pay_Nx1qk0fU3b2Xy9", KNOWN_SIGNATURE)

    def test_verify_rejects_tampered_signature(self, gw):
        tampered = KNOWN_SIGNATURE[:-1] + ("0" if KNOWN_SIGNATURE[-1] != "0" else "1")
        assert not gw.verify_signature("order_Nx1pQ8nF0aL2mT", "pay_Nx1qk0fU3b2Xy9", tampered)

    def test_verify_rejects_signature_for_other_payment(self, gw):
        assert not gw.verify_signature("order_Nx1pQ8nF0aL2mT", "pay_other", KNOWN_SIGNATURE)

    def test_different_secret_different_digest(self):
        other = RazorpayGateway("rzp_test_key", "another_secret", client=MagicMock())
        assert other.generate_signature("order_Nx1pQ8nF0aL2mT", "pay_Nx1qk0fU3b2Xy9") != KNOWN_SIGNATURE


class TestAmounts:
    @pytest.mark.parametrize("amount, expected", [
        (100, 100),
        (10000, 10000),
        (199.4, 199),
        (199.5, 200),
        (250.5, 251),
        (100.49, 100),
    ])
    def test_round_half_up(self, amount, expected):
        assert round_amount(amount) == expected

    def test_default_receipt_format(self):
        assert re.fullmatch(r"receipt_\d+", default_receipt())


class TestConstruction:
    @pytest.mark.parametrize("key_id, key_secret", [(None, "s"), ("k", None), ("", "")])
    def test_missing_credentials_refused(self, key_id, key_secret):
        with pytest.raises(ConfigurationError):
            RazorpayGateway(key_id, key_secret, client=MagicMock())


class TestGatewayCalls:
    async def test_create_order_applies_defaults(self, gw):
        gw.client.order.create.return_value = {"id": "order_1"}

        await gw.create_order(10000, "inr")

        data = gw.client.order.create.call_args.kwargs["data"]
        assert data["amount"] == 10000
        assert data["currency"] == "INR"
        assert re.fullmatch(r"receipt_\d+", data["receipt"])
        assert data["notes"] == {}

    async def test_fetch_payment_passes_id(self, gw):
        gw.client.payment.fetch.return_value = {"id": "pay_1", "status": "captured"}

        payment = await gw.fetch_payment("pay_1")

        gw.client.payment.fetch.assert_called_once_with("pay_1")
        assert payment["status"] == "captured"


def test_structured_error_classification():
    assert is_structured_gateway_error(BadRequestError("bad amount"))
    assert is_structured_gateway_error(GatewayError("gateway down"))
    assert not is_structured_gateway_error(ServerError("boom"))
    assert not is_structured_gateway_error(ConnectionError("reset"))
