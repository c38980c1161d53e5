import logging
from typing import Optional

from app.core.config import settings
from app.core.constants import ROLE_USER
from app.services.gateway import GatewayError, api_request

logger = logging.getLogger(__name__)

BASE_URL = settings.USER_API_URL


def _url(path: str = "") -> str:
    return f"{BASE_URL}{path}"


def login(email: str, password: str) -> str:
    """Exchange credentials for the bearer token issued by the user service."""
    data = api_request("POST", _url("/login"), json={"username": email, "password": password})

    token = data.get("token") if isinstance(data, dict) else data
    if not token or not isinstance(token, str):
        raise GatewayError("Invalid credentials", 401)

    logger.info("User %s logged in", email)
    return token.strip().strip('"')


def register(name: str, email: str, password: str, contact_number: str):
    payload = {
        "userName": name,
        "userEmail": email,
        "userPassword": password,
        "userRole": ROLE_USER,
        "userContactNumber": contact_number,
    }
    user = api_request("POST", _url(), json=payload)
    logger.info("Registered user %s", email)
    return user


def get_me(token: str):
    return api_request("GET", _url("/me"), token=token)


def get_user(user_id, token: Optional[str] = None):
    return api_request("GET", _url(f"/{user_id}"), token=token)


def list_users(token: Optional[str] = None) -> list:
    return api_request("GET", _url(), token=token) or []


def update_profile(user_id, *, name: str, email: str, contact_number: str, token: str):
    payload = {
        "userName": name,
        "userEmail": email,
        "userContactNumber": contact_number,
    }
    return api_request("PUT", _url(f"/{user_id}/profile"), json=payload, token=token)


def create_user_by_admin(payload: dict, token: str):
    user = api_request("POST", _url("/admin/create"), json=payload, token=token)
    logger.info("Admin created user %s", payload.get("userEmail"))
    return user


def update_user(user_id, payload: dict, token: str):
    return api_request("PUT", _url(f"/{user_id}"), json=payload, token=token)


def delete_user(user_id, token: str):
    api_request("DELETE", _url(f"/{user_id}"), token=token)
    logger.info("Deleted user %s", user_id)


def search_users(*, name: str = "", email: str = "", role: str = "", token: str) -> list:
    criteria = {"userName": name, "userEmail": email, "userRole": role}
    return api_request("POST", _url("/search"), json=criteria, token=token) or []
