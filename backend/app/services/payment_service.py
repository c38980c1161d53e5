import logging
from typing import Optional

from app.core.config import settings
from app.core.constants import GATEWAY_PAYMENT_METHOD
from app.services.gateway import GatewayError, api_request

logger = logging.getLogger(__name__)

BASE_URL = settings.PAYMENT_API_URL


def create_order(*, user_id, booking_id, amount, token: Optional[str] = None) -> dict:
    """
    Ask the payment service for a hosted-checkout order.

    Returns `{orderId, amount, currency, keyId}`; the amount is in rupees and
    the checkout page converts it to paise.
    """
    payload = {
        "userId": user_id,
        "bookingId": booking_id,
        "amount": amount,
        "currency": settings.CURRENCY,
        "paymentMethod": GATEWAY_PAYMENT_METHOD,
    }
    order = api_request("POST", BASE_URL, json=payload, token=token)

    if not isinstance(order, dict) or not order.get("orderId"):
        raise GatewayError("Could not create payment order. Please try again.")

    logger.info("Payment order %s created for booking %s", order["orderId"], booking_id)
    return order


def verify_payment(*, order_id: str, payment_id: str, signature: str, token: Optional[str] = None):
    payload = {
        "razorpay_order_id": order_id,
        "razorpay_payment_id": payment_id,
        "razorpay_signature": signature,
    }
    result = api_request("POST", f"{BASE_URL}/verify", json=payload, token=token)
    logger.info("Payment %s verified for order %s", payment_id, order_id)
    return result
