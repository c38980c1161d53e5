from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError

from app.core.config import settings

SECRET_KEY = settings.SECRET_KEY
ALGORITHM = settings.ALGORITHM

ACCESS_TOKEN_COOKIE = "access_token"
FUNNEL_COOKIE = "booking_funnel"


def normalize_role(role_name: str) -> str:
    role = (role_name or "").upper()
    if role.startswith("ROLE_"):
        role = role[len("ROLE_"):]
    return role


def read_token_claims(token: str) -> dict:
    """
    Read the claims of a token issued by the user service.

    The signature is checked by the backend on every call, so the web app
    only needs the identity it carries.
    """
    claims = jwt.get_unverified_claims(token)

    roles = [
        normalize_role(r.get("roleName") if isinstance(r, dict) else str(r))
        for r in claims.get("roles") or []
    ]
    if not roles and claims.get("role"):
        roles = [normalize_role(claims["role"])]

    return {
        "id": claims.get("userId"),
        "name": claims.get("name") or claims.get("sub"),
        "email": claims.get("email") or claims.get("sub"),
        "roles": roles,
        "role": roles[0] if roles else None,
        "exp": claims.get("exp"),
    }


def token_expired(claims: dict) -> bool:
    exp = claims.get("exp")
    if not exp:
        return False
    return datetime.now(timezone.utc).timestamp() >= float(exp)


# -------------------------------------------------
# Booking funnel hand-off
# -------------------------------------------------
def encode_funnel_state(state: dict) -> str:
    payload = {
        "funnel": state,
        "exp": datetime.now(timezone.utc) + timedelta(seconds=settings.FUNNEL_COOKIE_MAX_AGE),
    }
    return jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)


def decode_funnel_state(token: Optional[str]) -> Optional[dict]:
    if not token:
        return None
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    return payload.get("funnel")
