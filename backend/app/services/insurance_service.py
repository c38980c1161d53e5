import copy
import logging
from typing import Optional

from app.core.config import settings
from app.core.constants import FALLBACK_INSURANCE_PLANS
from app.services.gateway import GatewayError, api_request

logger = logging.getLogger(__name__)

BASE_URL = settings.INSURANCE_API_URL


def list_plans(token: Optional[str] = None) -> list:
    try:
        plans = api_request("GET", f"{BASE_URL}/packages", token=token)
    except GatewayError as e:
        logger.warning("Insurance plans unavailable (%s), using predefined plans", e.message)
        return copy.deepcopy(FALLBACK_INSURANCE_PLANS)

    if not isinstance(plans, list):
        logger.warning("Unexpected insurance plans payload, using predefined plans")
        return copy.deepcopy(FALLBACK_INSURANCE_PLANS)
    return plans


def find_plan(plans: list, plan_id) -> Optional[dict]:
    for plan in plans:
        if str(plan.get("insuranceId")) == str(plan_id):
            return plan
    return None


def select_plan(plan_id, *, user_id, booking_id, token: Optional[str] = None):
    # The insurance service reads these as form parameters
    data = {
        "predefinedPackageId": str(plan_id),
        "userId": str(user_id),
        "bookingId": str(booking_id),
    }
    selection = api_request("POST", f"{BASE_URL}/select", data=data, token=token)
    logger.info("Insurance plan %s selected for booking %s", plan_id, booking_id)
    return selection


def list_selections_by_booking(booking_id, token: Optional[str] = None) -> list:
    return api_request(
        "GET", f"{BASE_URL}/selections/booking", params={"bookingId": booking_id}, token=token
    ) or []


def list_selections_by_user(user_id, token: Optional[str] = None) -> list:
    return api_request(
        "GET", f"{BASE_URL}/selections/user", params={"userId": user_id}, token=token
    ) or []
