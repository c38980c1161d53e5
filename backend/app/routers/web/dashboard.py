import logging

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse
from pydantic import ValidationError

from app.auth.dependencies import SessionUser, get_current_user
from app.core.constants import BOOKING_STATUSES, CANCELLABLE_STATUSES
from app.core.templates import templates
from app.schemas.common import validation_errors
from app.schemas.user import ProfileForm
from app.services import assistance_service, booking_service, insurance_service, user_service
from app.services.gateway import GatewayError
from app.utils.flash import flash_redirect
from app.utils.table import build_table

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])

TABS = ("overview", "bookings", "assistance", "insurance", "profile")


def _load(label: str, loader, *args, **kwargs) -> list:
    # One failing service must not take the whole dashboard down
    try:
        return loader(*args, **kwargs) or []
    except GatewayError as e:
        logger.warning("Dashboard could not load %s: %s", label, e.message)
        return []


def load_profile(current_user: SessionUser) -> dict:
    try:
        return user_service.get_me(current_user.token) or {}
    except GatewayError:
        pass
    try:
        return user_service.get_user(current_user.id, token=current_user.token) or {}
    except GatewayError as e:
        logger.warning("Profile unavailable for user %s: %s", current_user.id, e.message)
        return {"userId": current_user.id, "userName": current_user.name, "userEmail": current_user.email}


def profile_form_data(profile: dict) -> dict:
    return {
        "name": profile.get("userName") or "",
        "email": profile.get("userEmail") or "",
        "contact_number": profile.get("userContactNumber") or "",
    }


def render_dashboard(
    request: Request,
    current_user: SessionUser,
    *,
    tab: str = "overview",
    q: str = "",
    status: str = "all",
    page: int = 1,
    profile_form=None,
    errors=None,
    status_code=200
):
    profile = load_profile(current_user)
    bookings = _load("bookings", booking_service.list_user_bookings, current_user.id, token=current_user.token)
    requests_ = _load("assistance", assistance_service.list_user_requests, current_user.id, token=current_user.token)
    selections = _load("insurance", insurance_service.list_selections_by_user, current_user.id, token=current_user.token)

    bookings_table = build_table(
        bookings,
        search=q,
        search_keys=("bookingId", "packageId", "contactFullName", "status"),
        filters={"status": status},
        page=page,
    )

    stats = {
        "total_bookings": len(bookings),
        "upcoming": sum(1 for b in bookings if b.get("status") in CANCELLABLE_STATUSES),
        "open_requests": sum(1 for r in requests_ if r.get("status") != "Resolved"),
        "insured_trips": len(selections),
    }

    return templates.TemplateResponse(
        request,
        "dashboard/user.html",
        {
            "tab": tab if tab in TABS else "overview",
            "profile": profile,
            "profile_form": profile_form or profile_form_data(profile),
            "errors": errors or {},
            "bookings_table": bookings_table,
            "booking_statuses": BOOKING_STATUSES,
            "cancellable": CANCELLABLE_STATUSES,
            "assistance_requests": requests_,
            "insurance_selections": selections,
            "stats": stats,
        },
        status_code=status_code
    )


# =================================================
# DASHBOARD
# =================================================
@router.get("", response_class=HTMLResponse, name="user_dashboard")
def user_dashboard(
    request: Request,
    tab: str = Query("overview"),
    q: str = Query(""),
    status: str = Query("all"),
    page: int = Query(1),
    current_user: SessionUser = Depends(get_current_user)
):
    return render_dashboard(request, current_user, tab=tab, q=q, status=status, page=page)


# =================================================
# PROFILE
# =================================================
@router.post("/profile", name="profile_update")
def profile_update(
    request: Request,
    name: str = Form(""),
    email: str = Form(""),
    contact_number: str = Form(""),
    current_user: SessionUser = Depends(get_current_user)
):
    form_data = {"name": name, "email": email, "contact_number": contact_number}

    try:
        form = ProfileForm(**form_data)
    except ValidationError as e:
        return render_dashboard(
            request,
            current_user,
            tab="profile",
            profile_form=form_data,
            errors=validation_errors(e),
            status_code=400
        )

    try:
        user_service.update_profile(
            current_user.id,
            name=form.name,
            email=form.email,
            contact_number=form.contact_number,
            token=current_user.token,
        )
    except GatewayError as e:
        return render_dashboard(
            request,
            current_user,
            tab="profile",
            profile_form=form_data,
            errors={"form": e.message or "Failed to update profile"},
            status_code=400
        )

    return flash_redirect(f"{request.url_for('user_dashboard')}?tab=profile", "Profile updated successfully")


# =================================================
# CANCEL BOOKING
# =================================================
@router.post("/bookings/{booking_id}/cancel", name="booking_cancel")
def booking_cancel(
    booking_id: int,
    request: Request,
    current_user: SessionUser = Depends(get_current_user)
):
    back = f"{request.url_for('user_dashboard')}?tab=bookings"

    try:
        booking = booking_service.get_booking(booking_id, token=current_user.token)
        if booking.get("status") not in CANCELLABLE_STATUSES:
            return flash_redirect(back, f"Booking #{booking_id} can no longer be cancelled", "error")

        booking_service.cancel_booking(booking_id, token=current_user.token)
    except GatewayError as e:
        return flash_redirect(back, e.message or "Failed to cancel booking", "error")

    return flash_redirect(back, f"Booking #{booking_id} cancelled")
