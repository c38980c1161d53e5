import logging
from typing import Optional

from app.core.config import settings
from app.services.gateway import api_request

logger = logging.getLogger(__name__)

BASE_URL = settings.ASSISTANCE_API_URL


def _url(path: str = "") -> str:
    return f"{BASE_URL}{path}"


def create_request(user_id, issue_description: str, token: Optional[str] = None):
    request = api_request(
        "POST",
        _url(),
        json={"userId": user_id, "issueDescription": issue_description},
        token=token,
    )
    logger.info("Assistance request %s raised by user %s", (request or {}).get("requestId"), user_id)
    return request


def get_request(request_id, token: Optional[str] = None):
    return api_request("GET", _url(f"/{request_id}"), token=token)


def list_user_requests(user_id, token: Optional[str] = None) -> list:
    return api_request("GET", _url(f"/user/{user_id}"), token=token) or []


def list_requests(token: Optional[str] = None) -> list:
    return api_request("GET", _url(), token=token) or []


def update_request_status(request_id, status: str, token: Optional[str] = None):
    return api_request("PUT", _url(f"/{request_id}/status"), json={"status": status}, token=token)


def resolve_request(request_id, resolution_message: str, token: Optional[str] = None):
    if settings.ASSISTANCE_RESOLVE_FORMAT == "text":
        result = api_request(
            "PUT",
            _url(f"/{request_id}/resolve"),
            data=resolution_message.encode("utf-8"),
            headers={"Content-Type": "text/plain"},
            token=token,
        )
    else:
        result = api_request(
            "PUT",
            _url(f"/{request_id}/resolve"),
            json={"resolutionMessage": resolution_message},
            token=token,
        )

    logger.info("Assistance request %s resolved", request_id)
    return result
