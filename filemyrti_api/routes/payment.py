from fastapi import APIRouter, Depends, HTTPException, status
import logging
from filemyrti_api.core.dependencies import get_payment_gateway
from filemyrti_api.core.responses import send_success
from filemyrti_api.schemas.payment import (
    PaymentOrderRequest,
    OrderResponse,
    OrderStatusResponse,
    PaymentVerifyRequest,
    PaymentVerifyResponse
)
from filemyrti_api.services.payment_gateway import (
    DEFAULT_CURRENCY,
    MIN_ORDER_AMOUNT_PAISE,
    RazorpayGateway,
    default_receipt,
    gateway_error_description,
    is_structured_gateway_error,
    round_amount
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/create-order", status_code=status.HTTP_201_CREATED)
async def create_payment_order(
    request: PaymentOrderRequest,
    gateway: RazorpayGateway = Depends(get_payment_gateway)
):
    """
    Create a Razorpay order. Amount is in paise (minimum 100).
    """
    if request.amount is None or request.amount <= 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Amount is required and must be greater than 0"
        )

    if request.amount < MIN_ORDER_AMOUNT_PAISE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Minimum amount is ₹1 (100 paise)"
        )

    amount = round_amount(request.amount)
    currency = (request.currency or DEFAULT_CURRENCY).upper()
    receipt = request.receipt or default_receipt()

    try:
        razorpay_order = await gateway.create_order(amount, currency, receipt, request.notes or {})
    except Exception as razorpay_error:
        logger.error(f"Razorpay order creation failed: amount={amount} currency={currency} receipt={receipt}: {str(razorpay_error)}")
        if is_structured_gateway_error(razorpay_error):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=gateway_error_description(razorpay_error, "Failed to create payment order")
            )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create payment order"
        )

    logger.info(f"Razorpay order created: {razorpay_order.get('id')}")
    order = OrderResponse(
        id=razorpay_order["id"],
        amount=razorpay_order["amount"],
        currency=razorpay_order["currency"],
        receipt=razorpay_order.get("receipt"),
        status=razorpay_order["status"],
        created_at=razorpay_order.get("created_at")
    )
    return send_success("Order created successfully", order.model_dump(), status.HTTP_201_CREATED)


@router.post("/verify")
async def verify_payment(
    request: PaymentVerifyRequest,
    gateway: RazorpayGateway = Depends(get_payment_gateway)
):
    """
    Verify the checkout signature, then confirm the payment with Razorpay.

    The payment is only fetched once the signature matches.
    """
    if not all([
        request.razorpay_payment_id,
        request.razorpay_order_id,
        request.razorpay_signature,
        request.order_id
    ]):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing required payment verification fields"
        )

    if not gateway.verify_signature(
        request.razorpay_order_id,
        request.razorpay_payment_id,
        request.razorpay_signature
    ):
        logger.warning(
            f"Payment signature verification failed: payment_id={request.razorpay_payment_id} "
            f"order_id={request.razorpay_order_id}"
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Payment verification failed: Invalid signature"
        )

    try:
        payment = await gateway.fetch_payment(request.razorpay_payment_id)
    except Exception as fetch_error:
        logger.error(
            f"Failed to fetch payment {request.razorpay_payment_id} "
            f"(order {request.razorpay_order_id}) after signature match: {str(fetch_error)}"
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to verify payment with Razorpay"
        )

    logger.info(f"Payment verified: payment_id={request.razorpay_payment_id} status={payment.get('status')}")
    verified = PaymentVerifyResponse(
        payment_id=payment.get("id", request.razorpay_payment_id),
        order_id=payment.get("order_id", request.razorpay_order_id),
        amount=payment.get("amount"),
        currency=payment.get("currency"),
        status=payment.get("status"),
        method=payment.get("method"),
        created_at=payment.get("created_at")
    )
    return send_success("Payment verified successfully", verified.model_dump())


@router.get("/order/{order_id}")
async def get_order_status(
    order_id: str,
    gateway: RazorpayGateway = Depends(get_payment_gateway)
):
    """Current state of a Razorpay order. Read-only."""
    if not order_id or not order_id.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Order ID is required"
        )

    try:
        razorpay_order = await gateway.fetch_order(order_id)
    except Exception as e:
        logger.error(f"Error fetching order status for {order_id}: {str(e)}")
        if is_structured_gateway_error(e):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=gateway_error_description(e, "Order not found")
            )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch order status"
        )

    order = OrderStatusResponse(
        id=razorpay_order["id"],
        amount=razorpay_order["amount"],
        currency=razorpay_order["currency"],
        receipt=razorpay_order.get("receipt"),
        status=razorpay_order["status"],
        created_at=razorpay_order.get("created_at"),
        amount_paid=razorpay_order.get("amount_paid"),
        amount_due=razorpay_order.get("amount_due")
    )
    return send_success("Order status retrieved successfully", order.model_dump())
