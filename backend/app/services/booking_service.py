import logging
from typing import Optional

from app.core.config import settings
from app.core.constants import BOOKING_PENDING
from app.schemas.booking import BookingForm
from app.services.gateway import GatewayError, api_request

logger = logging.getLogger(__name__)

BASE_URL = settings.BOOKING_API_URL


def _url(path: str = "") -> str:
    return f"{BASE_URL}{path}"


def booking_payload(form: BookingForm, *, user_id, package_id) -> dict:
    travelers = form.adults + form.children
    return {
        "userId": user_id,
        "packageId": package_id,
        "startDate": form.start_date.isoformat(),
        "endDate": form.end_date.isoformat(),
        "status": BOOKING_PENDING,
        "travelers": {
            "adults": form.adults,
            "children": form.children,
            "infants": form.infants,
            "contact": {
                "fullName": form.full_name,
                "email": form.email,
                "phoneNumber": form.phone,
            },
            "names": form.traveler_names[:travelers],
        },
        "hasInsurance": form.has_insurance,
    }


def create_booking(form: BookingForm, *, user_id, package_id, token: Optional[str] = None):
    booking = api_request(
        "POST",
        _url(),
        json=booking_payload(form, user_id=user_id, package_id=package_id),
        token=token,
    )
    logger.info("Booking %s created for user %s", (booking or {}).get("bookingId"), user_id)
    return booking


def get_booking(booking_id, token: Optional[str] = None):
    return api_request("GET", _url(f"/{booking_id}"), token=token)


def list_user_bookings(user_id, token: Optional[str] = None) -> list:
    return api_request("GET", _url(f"/user/{user_id}"), token=token) or []


def list_bookings(token: Optional[str] = None) -> list:
    return api_request("GET", _url(), token=token) or []


def update_booking_status(booking_id, status: str, token: Optional[str] = None):
    """
    Move a booking to `status` through the partial-update endpoint.

    Backends without that endpoint (404 / 405) get the whole record back
    with the new status instead.
    """
    try:
        booking = api_request("PUT", _url(f"/{booking_id}/status"), json={"status": status}, token=token)
    except GatewayError as e:
        if e.status_code not in (404, 405):
            raise
        logger.warning("Status endpoint unavailable for booking %s, updating full record", booking_id)
        record = get_booking(booking_id, token=token)
        record = {**record, "status": status}
        booking = api_request("PUT", _url(f"/{booking_id}"), json=record, token=token)

    logger.info("Booking %s moved to %s", booking_id, status)
    return booking


def cancel_booking(booking_id, token: Optional[str] = None):
    booking = api_request("PUT", _url(f"/{booking_id}/cancel"), token=token)
    logger.info("Booking %s cancelled", booking_id)
    return booking
