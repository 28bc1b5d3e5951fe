"""
Razorpay gateway adapter.

Flow:
  1. Frontend calls POST /payments/create-order -> backend asks Razorpay for an order
  2. Frontend opens Razorpay checkout with the order id; the user pays
  3. Razorpay hands {payment_id, order_id, signature} back to the frontend
  4. Frontend POSTs them to /payments/verify
  5. Backend recomputes HMAC-SHA256(key_secret, "{order_id}|{payment_id}") and
     only then fetches the payment from Razorpay

One instance is built at startup from validated settings and injected into
the payment routes. The Razorpay SDK is blocking, so every network call is
pushed to the threadpool and awaited.
"""
import hashlib
import hmac
import logging
import math
import time
from typing import Any, Dict, Optional

import razorpay
from razorpay.errors import BadRequestError, GatewayError
from fastapi.concurrency import run_in_threadpool

from filemyrti_api.core.config import ConfigurationError, Settings

logger = logging.getLogger(__name__)

# Razorpay rejects orders below 1 rupee
MIN_ORDER_AMOUNT_PAISE = 100
DEFAULT_CURRENCY = "INR"

# Errors Razorpay reports with a JSON error body; their message is the gateway's description
STRUCTURED_GATEWAY_ERRORS = (BadRequestError, GatewayError)


def is_structured_gateway_error(error: Exception) -> bool:
    return isinstance(error, STRUCTURED_GATEWAY_ERRORS)


def gateway_error_description(error: Exception, default: str) -> str:
    # The SDK passes message=None through to Exception when the body has no description
    description = error.args[0] if error.args else None
    return str(description) if description else default


def round_amount(amount: float) -> int:
    """Round half-up to whole paise."""
    return int(math.floor(amount + 0.5))


def default_receipt() -> str:
    return f"receipt_{int(time.time() * 1000)}"


class RazorpayGateway:
    def __init__(self, key_id: Optional[str], key_secret: Optional[str], client: Any = None):
        if not key_id or not key_secret:
            raise ConfigurationError(
                "Razorpay credentials are not configured. "
                "Please set RAZORPAY_KEY_ID and RAZORPAY_KEY_SECRET in your .env file."
            )
        self.key_id = key_id
        self._key_secret = key_secret
        self.client = client if client is not None else razorpay.Client(auth=(key_id, key_secret))

    @classmethod
    def from_settings(cls, settings: Settings) -> "RazorpayGateway":
        return cls(settings.razorpay_key_id, settings.razorpay_key_secret)

    async def create_order(
        self,
        amount: int,
        currency: str = DEFAULT_CURRENCY,
        receipt: Optional[str] = None,
        notes: Optional[Dict[str, Any]] = None,
    ) -> dict:
        order_data = {
            "amount": amount,  # Amount in paise
            "currency": currency.upper(),
            "receipt": receipt or default_receipt(),
            "notes": notes or {},
        }
        logger.info(f"Creating Razorpay order: amount={order_data['amount']} currency={order_data['currency']} receipt={order_data['receipt']}")
        return await run_in_threadpool(self.client.order.create, data=order_data)

    async def fetch_order(self, order_id: str) -> dict:
        return await run_in_threadpool(self.client.order.fetch, order_id)

    async def fetch_payment(self, payment_id: str) -> dict:
        return await run_in_threadpool(self.client.payment.fetch, payment_id)

    def generate_signature(self, order_id: str, payment_id: str) -> str:
        message = f"{order_id}|{payment_id}"
        return hmac.new(
            self._key_secret.encode("utf-8"),
            message.encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        expected_signature = self.generate_signature(order_id, payment_id)
        return hmac.compare_digest(expected_signature.encode("utf-8"), signature.encode("utf-8"))
