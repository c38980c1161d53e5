import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse
from jose import JWTError
from pydantic import ValidationError

from app.auth.dependencies import get_optional_user, user_from_token
from app.core.constants import ROLE_ADMIN, ROLE_AGENT
from app.core.security import ACCESS_TOKEN_COOKIE, FUNNEL_COOKIE
from app.core.templates import templates
from app.schemas.common import validation_errors
from app.schemas.user import LoginForm, validate_registration
from app.services import user_service
from app.services.gateway import GatewayError, GatewayUnavailable
from app.utils.flash import flash_redirect

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])

NO_ROLES_MESSAGE = "Access denied: No roles assigned."


def home_for_role(request: Request, role: str):
    if role == ROLE_ADMIN:
        return request.url_for("admin_dashboard")
    if role == ROLE_AGENT:
        return request.url_for("agent_dashboard")
    return request.url_for("user_dashboard")


# -------------------------------------------------
# Helper: render auth forms
# -------------------------------------------------
def render_login(request: Request, *, form=None, errors=None, status_code=200):
    return templates.TemplateResponse(
        request,
        "auth/login.html",
        {
            "form": form or {"email": ""},
            "errors": errors or {},
        },
        status_code=status_code
    )


def render_register(request: Request, *, form=None, errors=None, status_code=200):
    return templates.TemplateResponse(
        request,
        "auth/register.html",
        {
            "form": form or {"name": "", "email": "", "contact_number": ""},
            "errors": errors or {},
        },
        status_code=status_code
    )


# -------------------------------------------------
# Login
# -------------------------------------------------
@router.get("/login", response_class=HTMLResponse, name="login_page")
def login_page(request: Request, current_user=Depends(get_optional_user)):
    if current_user:
        return flash_redirect(home_for_role(request, current_user.role), f"Welcome back, {current_user.name}")
    return render_login(request)


@router.post("/login", name="login")
def login(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
):
    form_data = {"email": email}

    try:
        form = LoginForm(email=email, password=password)
    except ValidationError as e:
        return render_login(request, form=form_data, errors=validation_errors(e), status_code=400)

    try:
        token = user_service.login(form.email, form.password)
    except GatewayUnavailable:
        return render_login(request, form=form_data, errors={"form": "Login failed: Network error"}, status_code=503)
    except GatewayError as e:
        return render_login(request, form=form_data, errors={"form": e.message or "Invalid credentials"}, status_code=400)

    try:
        user = user_from_token(token)
    except (JWTError, ValueError):
        logger.warning("Login for %s returned a token without roles", form.email)
        return render_login(request, form=form_data, errors={"form": NO_ROLES_MESSAGE}, status_code=403)

    response = flash_redirect(home_for_role(request, user.role), f"Welcome back, {user.name}!")
    response.set_cookie(ACCESS_TOKEN_COOKIE, token, httponly=True, samesite="lax", path="/")
    return response


# -------------------------------------------------
# Register
# -------------------------------------------------
@router.get("/register", response_class=HTMLResponse, name="register_page")
def register_page(request: Request):
    return render_register(request)


@router.post("/register", name="register")
def register(
    request: Request,
    name: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    confirm_password: str = Form(""),
    contact_number: str = Form(""),
):
    form_data = {"name": name, "email": email, "contact_number": contact_number}

    form, errors = validate_registration({
        "name": name,
        "email": email,
        "password": password,
        "confirm_password": confirm_password,
        "contact_number": contact_number,
    })
    if errors:
        if "form" not in errors:
            errors["form"] = "Please fix the errors above."
        return render_register(request, form=form_data, errors=errors, status_code=400)

    try:
        user_service.register(form.name, form.email, form.password, form.contact_number)
    except GatewayUnavailable:
        return render_register(
            request, form=form_data, errors={"form": "Registration failed: Network error"}, status_code=503
        )
    except GatewayError as e:
        return render_register(
            request, form=form_data, errors={"form": e.message or "Registration failed"}, status_code=400
        )

    return flash_redirect(request.url_for("login_page"), "Registration successful! Please login.")


# -------------------------------------------------
# Logout
# -------------------------------------------------
@router.post("/logout", name="logout")
def logout(request: Request):
    response = flash_redirect(request.url_for("home"), "You have been logged out")
    response.delete_cookie(ACCESS_TOKEN_COOKIE, path="/")
    response.delete_cookie(FUNNEL_COOKIE, path="/")
    return response
