from pydantic import BaseModel, Field
from typing import Any, Dict, Optional

class PaymentOrderRequest(BaseModel):
    amount: Optional[float] = Field(None, allow_inf_nan=False, description="Amount in paise (500 rupees = 50000 paise)")
    currency: Optional[str] = Field(None, max_length=3, description="Three-letter currency code, defaults to INR")
    receipt: Optional[str] = Field(None, max_length=40, description="Merchant receipt, defaults to receipt_<timestamp>")
    notes: Optional[Dict[str, Any]] = None

    class Config:
        json_schema_extra = {
            "example": {
                "amount": 19900,
                "currency": "INR",
                "receipt": "rti_application_42",
                "notes": {"service": "rti-filing"}
            }
        }

class OrderResponse(BaseModel):
    id: str
    amount: int
    currency: str
    receipt: Optional[str] = None
    status: str
    created_at: Optional[int] = None

class OrderStatusResponse(OrderResponse):
    amount_paid: Optional[int] = None
    amount_due: Optional[int] = None

class PaymentVerifyRequest(BaseModel):
    # All optional; the route reports missing fields
    razorpay_payment_id: Optional[str] = Field(None, description="Razorpay payment ID")
    razorpay_order_id: Optional[str] = Field(None, description="Razorpay order ID")
    razorpay_signature: Optional[str] = Field(None, description="Razorpay signature for verification")
    order_id: Optional[str] = Field(None, description="Caller's own order reference")

class PaymentVerifyResponse(BaseModel):
    payment_id: str
    order_id: str
    amount: Optional[int] = None
    currency: Optional[str] = None
    status: Optional[str] = None
    method: Optional[str] = None
    created_at: Optional[int] = None
