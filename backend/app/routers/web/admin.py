import logging

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import ValidationError

from app.auth.dependencies import SessionUser, admin_only
from app.core.constants import (
    ASSISTANCE_STATUSES,
    BOOKING_STATUSES,
    PAYMENT_PAID_STATUSES,
    ROLE_AGENT,
    ROLES,
)
from app.core.templates import templates
from app.schemas.common import validation_errors
from app.schemas.user import UserForm
from app.services import assistance_service, booking_service, package_service, user_service
from app.services.gateway import GatewayError
from app.utils.flash import flash_redirect
from app.utils.table import build_table, search_rows

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])

USER_SEARCH_KEYS = ("userName", "userEmail", "userContactNumber")
ASSISTANCE_SEARCH_KEYS = ("requestId", "userId", "issueDescription", "resolutionMessage")
BOOKING_SEARCH_KEYS = ("bookingId", "userId", "packageId", "contactFullName", "contactEmail")
PACKAGE_SEARCH_KEYS = ("title", "destination", "packageId")


def booking_revenue(bookings: list) -> float:
    total = 0.0
    for booking in bookings:
        payment = booking.get("payment") or {}
        if str(payment.get("status") or "").upper() in PAYMENT_PAID_STATUSES:
            total += float(payment.get("amount") or 0)
    return total


def _safe_list(label: str, loader, **kwargs) -> list:
    try:
        return loader(**kwargs) or []
    except GatewayError as e:
        logger.warning("Admin dashboard could not load %s: %s", label, e.message)
        return []


# -------------------------------------------------
# Helper: render user form
# -------------------------------------------------
def render_user_form(
    request: Request,
    *,
    user=None,
    form=None,
    errors=None,
    status_code=200
):
    return templates.TemplateResponse(
        request,
        "admin/user_form.html",
        {
            "edit_user": user,
            "form": form or {"name": "", "email": "", "contact_number": "", "role": "USER"},
            "errors": errors or {},
            "roles": ROLES,
        },
        status_code=status_code
    )


# =================================================
# OVERVIEW
# =================================================
@router.get("", response_class=HTMLResponse, name="admin_dashboard")
def admin_dashboard(request: Request, current_user: SessionUser = Depends(admin_only)):
    users = _safe_list("users", user_service.list_users, token=current_user.token)
    bookings = _safe_list("bookings", booking_service.list_bookings, token=current_user.token)
    requests_ = _safe_list("assistance", assistance_service.list_requests, token=current_user.token)

    stats = {
        "total_users": len(users),
        "total_agents": sum(1 for u in users if u.get("userRole") == ROLE_AGENT),
        "total_bookings": len(bookings),
        "total_revenue": booking_revenue(bookings),
        "open_requests": sum(1 for r in requests_ if r.get("status") != "Resolved"),
    }

    return templates.TemplateResponse(
        request,
        "admin/overview.html",
        {
            "stats": stats,
            "recent_bookings": bookings[-5:][::-1],
        }
    )


# =================================================
# USERS
# =================================================
@router.get("/users", response_class=HTMLResponse, name="admin_users")
def admin_users(
    request: Request,
    q: str = Query(""),
    role: str = Query("all"),
    page: int = Query(1),
    current_user: SessionUser = Depends(admin_only)
):
    users = user_service.list_users(token=current_user.token)
    table = build_table(users, search=q, search_keys=USER_SEARCH_KEYS, filters={"userRole": role}, page=page)

    return templates.TemplateResponse(
        request,
        "admin/users.html",
        {
            "table": table,
            "roles": ROLES,
        }
    )


@router.get("/users/datatable", name="admin_users_datatable")
def admin_users_datatable(
    request: Request,
    draw: int = Query(1),
    start: int = Query(0),
    length: int = Query(10),
    search: str = Query(""),
    current_user: SessionUser = Depends(admin_only)
):
    users = user_service.list_users(token=current_user.token)
    matched = search_rows(users, search, USER_SEARCH_KEYS)

    data = []
    for user in matched[start:start + length]:
        edit_url = request.url_for("admin_user_edit_page", user_id=user.get("userId"))
        delete_url = request.url_for("admin_user_delete", user_id=user.get("userId"))

        data.append({
            "id": user.get("userId"),
            "name": user.get("userName"),
            "email": user.get("userEmail"),
            "role": user.get("userRole"),
            "actions": f"""
                <a href="{edit_url}" class="btn btn-sm btn-primary">Edit</a>
                <form method="post" action="{delete_url}" style="display:inline">
                    <button class="btn btn-sm btn-danger" onclick="return confirm('Delete?')">Delete</button>
                </form>
            """
        })

    return JSONResponse(
        {
            "draw": draw,
            "recordsTotal": len(users),
            "recordsFiltered": len(matched),
            "data": data
        }
    )


@router.get("/users/create", response_class=HTMLResponse, name="admin_user_create_page")
def admin_user_create_page(request: Request, _=Depends(admin_only)):
    return render_user_form(request)


@router.post("/users/create", name="admin_user_create")
def admin_user_create(
    request: Request,
    name: str = Form(""),
    email: str = Form(""),
    contact_number: str = Form(""),
    role: str = Form("USER"),
    password: str = Form(""),
    current_user: SessionUser = Depends(admin_only)
):
    form_data = {"name": name, "email": email, "contact_number": contact_number, "role": role}

    try:
        form = UserForm(**form_data, password=password)
    except ValidationError as e:
        return render_user_form(request, form=form_data, errors=validation_errors(e), status_code=400)

    if not form.password:
        return render_user_form(
            request, form=form_data, errors={"password": "Password is required"}, status_code=400
        )

    try:
        user_service.create_user_by_admin(form.to_payload(), token=current_user.token)
    except GatewayError as e:
        return render_user_form(
            request, form=form_data, errors={"form": e.message or "Failed to create user"}, status_code=400
        )

    return flash_redirect(request.url_for("admin_users"), "User created successfully")


@router.get("/users/{user_id}/edit", response_class=HTMLResponse, name="admin_user_edit_page")
def admin_user_edit_page(
    user_id: int,
    request: Request,
    current_user: SessionUser = Depends(admin_only)
):
    user = user_service.get_user(user_id, token=current_user.token)

    return render_user_form(
        request,
        user=user,
        form={
            "name": user.get("userName") or "",
            "email": user.get("userEmail") or "",
            "contact_number": user.get("userContactNumber") or "",
            "role": user.get("userRole") or "USER",
        }
    )


@router.post("/users/{user_id}/edit", name="admin_user_update")
def admin_user_update(
    user_id: int,
    request: Request,
    name: str = Form(""),
    email: str = Form(""),
    contact_number: str = Form(""),
    role: str = Form("USER"),
    password: str = Form(""),
    current_user: SessionUser = Depends(admin_only)
):
    form_data = {"name": name, "email": email, "contact_number": contact_number, "role": role}
    user = {"userId": user_id}

    try:
        form = UserForm(**form_data, password=password)
    except ValidationError as e:
        return render_user_form(request, user=user, form=form_data, errors=validation_errors(e), status_code=400)

    try:
        user_service.update_user(user_id, form.to_payload(), token=current_user.token)
    except GatewayError as e:
        return render_user_form(
            request, user=user, form=form_data, errors={"form": e.message or "Failed to update user"}, status_code=400
        )

    return flash_redirect(request.url_for("admin_users"), "User updated successfully")


@router.post("/users/{user_id}/delete", name="admin_user_delete")
def admin_user_delete(
    user_id: int,
    request: Request,
    current_user: SessionUser = Depends(admin_only)
):
    if user_id == current_user.id:
        return flash_redirect(request.url_for("admin_users"), "You cannot delete your own account", "error")

    try:
        user_service.delete_user(user_id, token=current_user.token)
    except GatewayError as e:
        return flash_redirect(request.url_for("admin_users"), e.message or "Failed to delete user", "error")

    return flash_redirect(request.url_for("admin_users"), "User deleted successfully")


# =================================================
# ASSISTANCE MANAGEMENT
# =================================================
@router.get("/assistance", response_class=HTMLResponse, name="admin_assistance")
def admin_assistance(
    request: Request,
    q: str = Query(""),
    status: str = Query("all"),
    page: int = Query(1),
    current_user: SessionUser = Depends(admin_only)
):
    requests_ = assistance_service.list_requests(token=current_user.token)
    table = build_table(
        requests_,
        search=q,
        search_keys=ASSISTANCE_SEARCH_KEYS,
        filters={"status": status},
        page=page,
    )

    return templates.TemplateResponse(
        request,
        "admin/assistance.html",
        {
            "table": table,
            "statuses": ASSISTANCE_STATUSES,
            "auto_refresh": True,
        }
    )


# =================================================
# BOOKINGS / PACKAGES
# =================================================
@router.get("/bookings", response_class=HTMLResponse, name="admin_bookings")
def admin_bookings(
    request: Request,
    q: str = Query(""),
    status: str = Query("all"),
    page: int = Query(1),
    current_user: SessionUser = Depends(admin_only)
):
    bookings = booking_service.list_bookings(token=current_user.token)
    table = build_table(bookings, search=q, search_keys=BOOKING_SEARCH_KEYS, filters={"status": status}, page=page)

    return templates.TemplateResponse(
        request,
        "admin/bookings.html",
        {
            "table": table,
            "statuses": BOOKING_STATUSES,
        }
    )


@router.get("/packages", response_class=HTMLResponse, name="admin_packages")
def admin_packages(
    request: Request,
    q: str = Query(""),
    active: str = Query("all"),
    page: int = Query(1),
    current_user: SessionUser = Depends(admin_only)
):
    packages = package_service.list_packages(token=current_user.token)
    table = build_table(packages, search=q, search_keys=PACKAGE_SEARCH_KEYS, filters={"active": active}, page=page)

    return templates.TemplateResponse(
        request,
        "admin/packages.html",
        {
            "table": table,
        }
    )
