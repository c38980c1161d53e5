import logging
from typing import Optional

import requests

from app.core.config import settings

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """A backend service answered with an error, or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def not_found(self) -> bool:
        return self.status_code == 404


class GatewayUnavailable(GatewayError):
    pass


def error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            if body.get(key):
                return str(body[key])
    if isinstance(body, str) and body:
        return body

    text = (response.text or "").strip()
    if text:
        return text
    return response.reason or f"Request failed with status {response.status_code}"


def api_request(
    method: str,
    url: str,
    *,
    token: Optional[str] = None,
    json=None,
    data=None,
    files=None,
    params=None,
    headers=None,
):
    headers = {"Accept": "application/json", **(headers or {})}
    if token:
        headers["Authorization"] = f"Bearer {token}"

    try:
        response = requests.request(
            method,
            url,
            headers=headers,
            json=json,
            data=data,
            files=files,
            params=params,
            timeout=settings.REQUEST_TIMEOUT,
        )
    except requests.RequestException as e:
        logger.error("Backend unreachable %s %s: %s", method, url, e)
        raise GatewayUnavailable("Service is currently unavailable. Please try again later.") from e

    if not response.ok:
        message = error_message(response)
        logger.error("Backend error %s %s [%s]: %s", method, url, response.status_code, message)
        raise GatewayError(message, response.status_code)

    if not response.content:
        return None

    try:
        return response.json()
    except ValueError:
        return response.text
