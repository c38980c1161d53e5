import copy
import logging
from typing import Optional

from fastapi import UploadFile

from app.core.config import settings
from app.core.constants import SAMPLE_PACKAGES
from app.services.gateway import GatewayError, GatewayUnavailable, api_request

logger = logging.getLogger(__name__)

BASE_URL = settings.PACKAGE_API_URL


def _url(path: str = "/") -> str:
    return f"{BASE_URL}{path}"


def list_packages(token: Optional[str] = None) -> list:
    try:
        return api_request("GET", _url(), token=token) or []
    except GatewayUnavailable:
        logger.warning("Package service unavailable, showing sample packages")
        return copy.deepcopy(SAMPLE_PACKAGES)


def get_package(package_id, token: Optional[str] = None):
    try:
        return api_request("GET", _url(f"/{package_id}"), token=token)
    except GatewayUnavailable:
        for package in SAMPLE_PACKAGES:
            if str(package["packageId"]) == str(package_id):
                logger.warning("Package service unavailable, showing sample package %s", package_id)
                return copy.deepcopy(package)
        raise


def search_packages(
    *,
    destination: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    token: Optional[str] = None,
) -> list:
    params = {}
    if destination:
        params["destination"] = destination
    if min_price is not None:
        params["minPrice"] = min_price
    if max_price is not None:
        params["maxPrice"] = max_price

    try:
        return api_request("GET", _url("/search"), params=params, token=token) or []
    except GatewayError as e:
        logger.warning("Package search failed: %s", e.message)
        return []


def list_agent_packages(agent_id, token: str) -> list:
    return api_request("GET", _url(f"/agent/{agent_id}"), token=token) or []


def create_package(payload: dict, *, agent_id, token: str):
    payload = {**payload, "createdByAgentId": agent_id}
    package = api_request("POST", _url(), json=payload, token=token)
    logger.info("Agent %s created package %s", agent_id, payload.get("title"))
    return package


def update_package(package_id, payload: dict, token: str):
    return api_request("PUT", _url(f"/{package_id}"), json=payload, token=token)


def delete_package(package_id, token: str):
    api_request("DELETE", _url(f"/{package_id}"), token=token)
    logger.info("Deleted package %s", package_id)


def update_package_status(package_id, active: bool, token: str):
    return api_request(
        "PUT",
        _url(f"/{package_id}/status"),
        params={"active": "true" if active else "false"},
        token=token,
    )


def upload_package_image(package_id, image: UploadFile, *, is_main: bool, token: str):
    files = {
        "image": (image.filename, image.file, image.content_type or "application/octet-stream"),
    }
    data = {"isMain": "true" if is_main else "false"}
    return api_request("POST", _url(f"/{package_id}/image"), files=files, data=data, token=token)
