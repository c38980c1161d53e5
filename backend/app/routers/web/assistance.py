import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse
from pydantic import ValidationError

from app.auth.dependencies import SessionUser, get_optional_user, staff_only
from app.core.constants import ASSISTANCE_STATUSES, FAQS, ROLE_USER
from app.core.templates import templates
from app.schemas.assistance import (
    ISSUE_REQUIRED_MESSAGE,
    REQUEST_NOT_FOUND_MESSAGE,
    REQUEST_USER_MISMATCH_MESSAGE,
    AssistanceRequestForm,
    ResolveForm,
    ViewRequestForm,
)
from app.schemas.common import validation_errors
from app.services import assistance_service
from app.services.gateway import GatewayError
from app.utils.flash import flash_redirect

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assistance", tags=["Assistance"])


def _int_or_none(value: Optional[str]) -> Optional[int]:
    try:
        return int(value) if value not in (None, "") else None
    except ValueError:
        return None


# -------------------------------------------------
# Helper: render assistance page
# -------------------------------------------------
def render_assistance(
    request: Request,
    *,
    current_user: Optional[SessionUser],
    form=None,
    errors=None,
    submitted=None,
    view_form=None,
    view_errors=None,
    viewed=None,
    status_code=200
):
    my_requests = []
    if current_user:
        try:
            my_requests = assistance_service.list_user_requests(current_user.id, token=current_user.token)
        except GatewayError as e:
            logger.warning("Could not load assistance requests for user %s: %s", current_user.id, e.message)

    return templates.TemplateResponse(
        request,
        "assistance/index.html",
        {
            "faqs": FAQS,
            "form": form or {"issue_description": "", "user_id": current_user.id if current_user else ""},
            "errors": errors or {},
            "submitted": submitted,
            "view_form": view_form or {"request_id": "", "user_id": current_user.id if current_user else ""},
            "view_errors": view_errors or {},
            "viewed": viewed,
            "my_requests": my_requests,
        },
        status_code=status_code
    )


# =================================================
# PAGE
# =================================================
@router.get("", response_class=HTMLResponse, name="assistance_page")
def assistance_page(
    request: Request,
    faq: Optional[int] = Query(None),
    current_user: Optional[SessionUser] = Depends(get_optional_user)
):
    form = None
    if faq is not None and 0 <= faq < len(FAQS):
        # Choosing an FAQ starts a request about that question
        form = {
            "issue_description": FAQS[faq]["question"],
            "user_id": current_user.id if current_user else "",
        }
    return render_assistance(request, current_user=current_user, form=form)


# =================================================
# CREATE
# =================================================
@router.post("", name="assistance_create")
def assistance_create(
    request: Request,
    issue_description: str = Form(""),
    user_id: str = Form(""),
    current_user: Optional[SessionUser] = Depends(get_optional_user)
):
    # Customers can only raise requests for themselves
    if current_user and current_user.role == ROLE_USER:
        user_id = str(current_user.id)

    form_data = {"issue_description": issue_description, "user_id": user_id}

    if not issue_description.strip():
        return render_assistance(
            request,
            current_user=current_user,
            form=form_data,
            errors={"issue_description": ISSUE_REQUIRED_MESSAGE},
            status_code=400
        )

    try:
        form = AssistanceRequestForm(user_id=_int_or_none(user_id), issue_description=issue_description)
    except ValidationError as e:
        return render_assistance(
            request,
            current_user=current_user,
            form=form_data,
            errors=validation_errors(e),
            status_code=400
        )

    token = current_user.token if current_user else None
    try:
        created = assistance_service.create_request(form.user_id, form.issue_description, token=token)
    except GatewayError as e:
        return render_assistance(
            request,
            current_user=current_user,
            form=form_data,
            errors={"form": e.message or "Failed to submit request"},
            status_code=400
        )

    created = created or {}
    message = "Request submitted successfully! Your Request ID is: {}. Status: {}".format(
        created.get("requestId"), created.get("status") or "Pending"
    )
    return render_assistance(request, current_user=current_user, submitted=message)


# =================================================
# VIEW BY ID
# =================================================
@router.post("/view", name="assistance_view")
def assistance_view(
    request: Request,
    request_id: str = Form(""),
    user_id: str = Form(""),
    current_user: Optional[SessionUser] = Depends(get_optional_user)
):
    view_data = {"request_id": request_id, "user_id": user_id}

    try:
        form = ViewRequestForm(request_id=_int_or_none(request_id), user_id=_int_or_none(user_id))
    except ValidationError:
        return render_assistance(
            request,
            current_user=current_user,
            view_form=view_data,
            view_errors={"request_id": "Please enter a valid Request ID."},
            status_code=400
        )

    token = current_user.token if current_user else None
    try:
        found = assistance_service.get_request(form.request_id, token=token)
    except GatewayError as e:
        message = REQUEST_NOT_FOUND_MESSAGE if e.not_found else e.message
        return render_assistance(
            request,
            current_user=current_user,
            view_form=view_data,
            view_errors={"form": message},
            status_code=404 if e.not_found else 400
        )

    if not found:
        return render_assistance(
            request,
            current_user=current_user,
            view_form=view_data,
            view_errors={"form": REQUEST_NOT_FOUND_MESSAGE},
            status_code=404
        )

    # Display consistency only; the backend decides who may read a request
    if form.user_id is not None and str(found.get("userId")) != str(form.user_id):
        return render_assistance(
            request,
            current_user=current_user,
            view_form=view_data,
            view_errors={"form": REQUEST_USER_MISMATCH_MESSAGE},
            status_code=400
        )

    return render_assistance(request, current_user=current_user, view_form=view_data, viewed=found)


# =================================================
# RESOLVE (staff)
# =================================================
def manage_url(request: Request, current_user: SessionUser):
    if current_user.is_admin:
        return request.url_for("admin_assistance")
    return request.url_for("agent_inquiries")


@router.get("/{request_id}/resolve", response_class=HTMLResponse, name="assistance_resolve_page")
def assistance_resolve_page(
    request_id: int,
    request: Request,
    current_user: SessionUser = Depends(staff_only)
):
    ticket = assistance_service.get_request(request_id, token=current_user.token)
    return templates.TemplateResponse(
        request,
        "assistance/resolve.html",
        {
            "ticket": ticket,
            "form": {"resolution_message": ticket.get("resolutionMessage") or ""},
            "errors": {},
            "back_url": manage_url(request, current_user),
        }
    )


@router.post("/{request_id}/resolve", name="assistance_resolve")
def assistance_resolve(
    request_id: int,
    request: Request,
    resolution_message: str = Form(""),
    current_user: SessionUser = Depends(staff_only)
):
    try:
        form = ResolveForm(resolution_message=resolution_message)
    except ValidationError as e:
        ticket = assistance_service.get_request(request_id, token=current_user.token)
        return templates.TemplateResponse(
            request,
            "assistance/resolve.html",
            {
                "ticket": ticket,
                "form": {"resolution_message": resolution_message},
                "errors": validation_errors(e),
                "back_url": manage_url(request, current_user),
            },
            status_code=400
        )

    try:
        assistance_service.resolve_request(request_id, form.resolution_message, token=current_user.token)
    except GatewayError as e:
        return flash_redirect(manage_url(request, current_user), e.message or "Failed to resolve request", "error")

    return flash_redirect(manage_url(request, current_user), f"Request #{request_id} resolved successfully")


@router.post("/{request_id}/status", name="assistance_status")
def assistance_status(
    request_id: int,
    request: Request,
    status: str = Form(...),
    current_user: SessionUser = Depends(staff_only)
):
    if status not in ASSISTANCE_STATUSES:
        return flash_redirect(manage_url(request, current_user), "Unknown status", "error")

    try:
        assistance_service.update_request_status(request_id, status, token=current_user.token)
    except GatewayError as e:
        return flash_redirect(manage_url(request, current_user), e.message or "Failed to update status", "error")

    return flash_redirect(manage_url(request, current_user), f"Request #{request_id} marked {status}")
