from typing import List, Optional

from fastapi import Depends, Request
from fastapi.responses import RedirectResponse
from jose import JWTError
from pydantic import BaseModel
from starlette import status

from app.core.constants import ROLE_ADMIN, ROLE_AGENT
from app.core.security import ACCESS_TOKEN_COOKIE, read_token_claims, token_expired


class SessionUser(BaseModel):
    id: int
    name: str
    email: Optional[str] = None
    role: str
    roles: List[str] = []
    token: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def is_agent(self) -> bool:
        return self.role == ROLE_AGENT


class LoginRequired(Exception):
    def __init__(self, message: str, clear_session: bool = False):
        super().__init__(message)
        self.message = message
        self.clear_session = clear_session


def redirect_to_login(request: Request, message: str, clear_session: bool = False):
    response = RedirectResponse(
        url=request.url_for("login_page"),
        status_code=status.HTTP_302_FOUND
    )
    response.set_cookie("flash_error", message, max_age=5, path="/")
    if clear_session:
        response.delete_cookie(ACCESS_TOKEN_COOKIE, path="/")
    return response


def user_from_token(token: str) -> SessionUser:
    claims = read_token_claims(token)
    if token_expired(claims):
        raise JWTError("Token expired")
    if claims["id"] is None or not claims["role"]:
        raise JWTError("Token carries no identity")

    return SessionUser(
        id=int(claims["id"]),
        name=claims["name"] or claims["email"] or "Traveler",
        email=claims["email"],
        role=claims["role"],
        roles=claims["roles"],
        token=token,
    )


def get_optional_user(request: Request) -> Optional[SessionUser]:
    token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    if not token:
        return None
    try:
        return user_from_token(token)
    except (JWTError, ValueError):
        return None


def get_current_user(request: Request) -> SessionUser:
    token = request.cookies.get(ACCESS_TOKEN_COOKIE)

    if not token:
        raise LoginRequired("Please login to continue")

    try:
        return user_from_token(token)
    except (JWTError, ValueError):
        raise LoginRequired("Session expired. Please login again", clear_session=True)


def admin_only(current_user: SessionUser = Depends(get_current_user)) -> SessionUser:
    if current_user.role != ROLE_ADMIN:
        raise LoginRequired("Admin access only")
    return current_user


def agent_only(current_user: SessionUser = Depends(get_current_user)) -> SessionUser:
    if current_user.role != ROLE_AGENT:
        raise LoginRequired("Travel agent access only")
    return current_user


def staff_only(current_user: SessionUser = Depends(get_current_user)) -> SessionUser:
    if current_user.role not in (ROLE_ADMIN, ROLE_AGENT):
        raise LoginRequired("Staff access only")
    return current_user
