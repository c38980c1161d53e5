from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient
from jose import jwt

from app.core.security import ACCESS_TOKEN_COOKIE, FUNNEL_COOKIE, encode_funnel_state
from app.main import app


def make_token(role="USER", user_id=7, name="Asha Rao", email="asha@example.com", expired=False):
    """Token shaped like the ones the user service issues."""
    exp = datetime.now(timezone.utc) + timedelta(hours=-1 if expired else 1)
    claims = {
        "sub": email,
        "userId": user_id,
        "name": name,
        "email": email,
        "roles": [{"roleName": role}] if role else [],
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(claims, "issued-by-user-service", algorithm="HS256")


def client_for(role=None, user_id=7, funnel=None, **kwargs):
    client = TestClient(app, follow_redirects=False)
    if role:
        client.cookies.set(ACCESS_TOKEN_COOKIE, make_token(role, user_id=user_id, **kwargs))
    if funnel:
        client.cookies.set(FUNNEL_COOKIE, encode_funnel_state(funnel))
    return client


def sample_funnel(**overrides):
    funnel = {
        "bookingId": 41,
        "totalAmount": 3800.0,
        "userId": 7,
        "packageId": 1,
        "packageTitle": "Goa Beach Escape",
        "insurance": None,
    }
    funnel.update(overrides)
    return funnel
