import logging

from fastapi_mail import MessageSchema
from pydantic import EmailStr

from app.core.email import fast_mail
from app.utils.text_format import format_date, format_inr

logger = logging.getLogger(__name__)


async def send_booking_confirmation_email(
    email: EmailStr,
    booking: dict,
    receipt: str,
):
    payment = booking.get("payment") or {}

    message = MessageSchema(
        subject=f"Your Aventra booking #{booking.get('bookingId')} is confirmed",
        recipients=[email],
        template_body={
            "booking_id": booking.get("bookingId"),
            "name": booking.get("contactFullName") or email,
            "start_date": format_date(booking.get("startDate")),
            "end_date": format_date(booking.get("endDate")),
            "amount": format_inr(payment.get("amount")) if payment else "N/A",
            "status": booking.get("status"),
            "receipt": receipt,
        },
        subtype="html",
    )

    await fast_mail.send_message(
        message,
        template_name="booking_confirmation.html",
    )
    logger.info("Booking confirmation for %s sent to %s", booking.get("bookingId"), email)
