import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse
from fastapi_mail.errors import ConnectionErrors
from pydantic import ValidationError

from app.auth.dependencies import SessionUser, get_current_user
from app.core.config import settings
from app.core.constants import BANKS, BOOKING_CONFIRMED, DEFAULT_ADULT_PRICE, PAYMENT_METHODS
from app.core.security import FUNNEL_COOKIE, decode_funnel_state, encode_funnel_state
from app.core.templates import templates
from app.schemas.booking import BookingForm, is_submittable
from app.schemas.common import validation_errors
from app.schemas.payment import PAYMENT_DETAIL_FORMS
from app.services import booking_service, insurance_service, package_service, payment_service
from app.services.email_service import send_booking_confirmation_email
from app.services.gateway import GatewayError, GatewayUnavailable
from app.utils.flash import flash_redirect
from app.utils.pricing import estimate_price
from app.utils.text_format import build_receipt

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Booking"])

FUNNEL_MISSING_MESSAGE = "Payment details missing. Please start your booking again."


# -------------------------------------------------
# Helpers: funnel hand-off between stages
# -------------------------------------------------
def get_funnel(request: Request) -> Optional[dict]:
    return decode_funnel_state(request.cookies.get(FUNNEL_COOKIE))


def store_funnel(response, state: dict):
    response.set_cookie(
        FUNNEL_COOKIE,
        encode_funnel_state(state),
        max_age=settings.FUNNEL_COOKIE_MAX_AGE,
        httponly=True,
        samesite="lax",
        path="/",
    )
    return response


def adult_price(package: dict) -> float:
    return float(package.get("price") or DEFAULT_ADULT_PRICE)


def _count(value, default=0) -> int:
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return default


def render_booking_form(
    request: Request,
    *,
    package: dict,
    form=None,
    errors=None,
    status_code=200
):
    form = form or {
        "start_date": "",
        "end_date": "",
        "adults": 1,
        "children": 0,
        "infants": 0,
        "traveler_names": [],
        "full_name": "",
        "email": "",
        "phone": "",
        "has_insurance": False,
        "accept_terms": False,
    }
    estimate = estimate_price(
        _count(form.get("adults"), 1),
        _count(form.get("children")),
        _count(form.get("infants")),
        bool(form.get("has_insurance")),
        adult_price(package),
    )

    return templates.TemplateResponse(
        request,
        "booking/form.html",
        {
            "package": package,
            "form": form,
            "errors": errors or {},
            "estimate": estimate,
            "submittable": is_submittable(form),
        },
        status_code=status_code
    )


def render_payment_page(
    request: Request,
    *,
    funnel: dict,
    method: str = "gateway",
    form=None,
    errors=None,
    status_code=200
):
    return templates.TemplateResponse(
        request,
        "booking/payment.html",
        {
            "funnel": funnel,
            "method": method,
            "form": form or {},
            "errors": errors or {},
            "banks": BANKS,
            "payment_methods": PAYMENT_METHODS,
        },
        status_code=status_code
    )


# =================================================
# BOOKING FORM
# =================================================
@router.get("/packages/{package_id}/book", response_class=HTMLResponse, name="booking_page")
def booking_page(
    package_id: int,
    request: Request,
    current_user: SessionUser = Depends(get_current_user)
):
    package = package_service.get_package(package_id, token=current_user.token)
    form = {
        "start_date": "",
        "end_date": "",
        "adults": 1,
        "children": 0,
        "infants": 0,
        "traveler_names": [current_user.name],
        "full_name": current_user.name,
        "email": current_user.email or "",
        "phone": "",
        "has_insurance": False,
        "accept_terms": False,
    }
    return render_booking_form(request, package=package, form=form)


@router.get("/packages/{package_id}/book/quote", name="booking_quote")
def booking_quote(
    package_id: int,
    adults: int = Query(1, ge=0),
    children: int = Query(0, ge=0),
    infants: int = Query(0, ge=0),
    has_insurance: bool = Query(False),
):
    package = package_service.get_package(package_id)
    return JSONResponse(estimate_price(adults, children, infants, has_insurance, adult_price(package)))


@router.post("/packages/{package_id}/book", name="booking_create")
def booking_create(
    package_id: int,
    request: Request,
    start_date: str = Form(""),
    end_date: str = Form(""),
    adults: str = Form("1"),
    children: str = Form("0"),
    infants: str = Form("0"),
    traveler_names: List[str] = Form([]),
    full_name: str = Form(""),
    email: str = Form(""),
    phone: str = Form(""),
    has_insurance: Optional[str] = Form(None),
    accept_terms: Optional[str] = Form(None),
    current_user: SessionUser = Depends(get_current_user)
):
    # Always define this first
    form_data = {
        "start_date": start_date,
        "end_date": end_date,
        "adults": adults,
        "children": children,
        "infants": infants,
        "traveler_names": traveler_names,
        "full_name": full_name,
        "email": email,
        "phone": phone,
        "has_insurance": bool(has_insurance),
        "accept_terms": bool(accept_terms),
    }

    package = package_service.get_package(package_id, token=current_user.token)

    try:
        form = BookingForm(**form_data)
    except ValidationError as e:
        return render_booking_form(
            request,
            package=package,
            form=form_data,
            errors=validation_errors(e),
            status_code=400
        )

    try:
        booking = booking_service.create_booking(
            form,
            user_id=current_user.id,
            package_id=package_id,
            token=current_user.token,
        )
    except GatewayError as e:
        return render_booking_form(
            request,
            package=package,
            form=form_data,
            errors={"form": e.message or "Failed to create booking"},
            status_code=502 if e.status_code is None else 400
        )

    estimate = estimate_price(form.adults, form.children, form.infants, form.has_insurance, adult_price(package))
    funnel = {
        "bookingId": (booking or {}).get("bookingId"),
        "totalAmount": estimate["total_amount"],
        "userId": current_user.id,
        "packageId": package_id,
        "packageTitle": package.get("title"),
        "insurance": None,
    }

    if form.has_insurance:
        response = flash_redirect(request.url_for("insurance_page"), "Booking created! Choose your insurance plan.")
    else:
        response = flash_redirect(request.url_for("payment_page"), "Booking created! Complete your payment.")
    return store_funnel(response, funnel)


# =================================================
# INSURANCE
# =================================================
@router.get("/insurance", response_class=HTMLResponse, name="insurance_page")
def insurance_page(
    request: Request,
    current_user: SessionUser = Depends(get_current_user)
):
    funnel = get_funnel(request)
    if not funnel:
        return flash_redirect(request.url_for("home"), "Booking details missing. Please start your booking again.", "error")

    return templates.TemplateResponse(
        request,
        "booking/insurance.html",
        {
            "funnel": funnel,
            "plans": insurance_service.list_plans(token=current_user.token),
            "errors": {},
        }
    )


@router.post("/insurance", name="insurance_select")
def insurance_select(
    request: Request,
    plan_id: str = Form(""),
    accept_terms: Optional[str] = Form(None),
    current_user: SessionUser = Depends(get_current_user)
):
    funnel = get_funnel(request)
    if not funnel:
        return flash_redirect(request.url_for("home"), "Booking details missing. Please start your booking again.", "error")

    plans = insurance_service.list_plans(token=current_user.token)

    errors = {}
    plan = insurance_service.find_plan(plans, plan_id) if plan_id else None
    if not plan_id:
        errors["plan_id"] = "Please select an insurance plan"
    elif not plan:
        errors["plan_id"] = "Invalid plan selected"
    if not accept_terms:
        errors["accept_terms"] = "Please agree to the terms and conditions"

    if not errors:
        try:
            insurance_service.select_plan(
                plan["insuranceId"],
                user_id=funnel["userId"],
                booking_id=funnel["bookingId"],
                token=current_user.token,
            )
        except GatewayUnavailable as e:
            logger.warning("Insurance selection for booking %s not recorded: %s", funnel["bookingId"], e.message)
        except GatewayError as e:
            errors["form"] = e.message or "Failed to select insurance"

    if errors:
        return templates.TemplateResponse(
            request,
            "booking/insurance.html",
            {
                "funnel": funnel,
                "plans": plans,
                "selected": plan_id,
                "errors": errors,
            },
            status_code=400
        )

    funnel = {
        **funnel,
        "totalAmount": funnel["totalAmount"] + float(plan.get("price") or 0),
        "insurance": {
            "planId": plan["insuranceId"],
            "planName": plan.get("packageType"),
            "price": plan.get("price"),
        },
    }
    response = flash_redirect(request.url_for("payment_page"), f"{plan.get('packageType')} insurance added.")
    return store_funnel(response, funnel)


@router.post("/insurance/skip", name="insurance_skip")
def insurance_skip(request: Request, _=Depends(get_current_user)):
    funnel = get_funnel(request)
    if not funnel:
        return flash_redirect(request.url_for("home"), "Booking details missing. Please start your booking again.", "error")

    response = flash_redirect(request.url_for("payment_page"), "Continuing without insurance.")
    return store_funnel(response, {**funnel, "insurance": None})


# =================================================
# PAYMENT
# =================================================
@router.get("/payment", response_class=HTMLResponse, name="payment_page")
def payment_page(request: Request, _=Depends(get_current_user)):
    funnel = get_funnel(request)
    if not funnel:
        return flash_redirect(request.url_for("home"), FUNNEL_MISSING_MESSAGE, "error")
    return render_payment_page(request, funnel=funnel)


@router.post("/payment/order", name="payment_order")
def payment_order(
    request: Request,
    current_user: SessionUser = Depends(get_current_user)
):
    funnel = get_funnel(request)
    if not funnel:
        return flash_redirect(request.url_for("home"), FUNNEL_MISSING_MESSAGE, "error")

    try:
        order = payment_service.create_order(
            user_id=funnel["userId"],
            booking_id=funnel["bookingId"],
            amount=funnel["totalAmount"],
            token=current_user.token,
        )
    except GatewayError as e:
        logger.error("Payment order failed for booking %s: %s", funnel["bookingId"], e.message)
        return render_payment_page(
            request,
            funnel=funnel,
            errors={"form": "Payment initialization failed. Please try again."},
            status_code=502
        )

    return templates.TemplateResponse(
        request,
        "booking/checkout.html",
        {
            "funnel": funnel,
            "order": order,
            # Hosted checkout takes the amount in paise
            "amount_paise": int(round(float(order.get("amount") or funnel["totalAmount"]) * 100)),
            "user": current_user,
        }
    )


@router.post("/payment/verify", name="payment_verify")
def payment_verify(
    request: Request,
    razorpay_order_id: str = Form(""),
    razorpay_payment_id: str = Form(""),
    razorpay_signature: str = Form(""),
    current_user: SessionUser = Depends(get_current_user)
):
    funnel = get_funnel(request)
    if not funnel:
        return flash_redirect(request.url_for("home"), FUNNEL_MISSING_MESSAGE, "error")

    if not (razorpay_order_id and razorpay_payment_id and razorpay_signature):
        return render_payment_page(
            request,
            funnel=funnel,
            errors={"form": "Payment verification failed. Please contact support."},
            status_code=400
        )

    try:
        payment_service.verify_payment(
            order_id=razorpay_order_id,
            payment_id=razorpay_payment_id,
            signature=razorpay_signature,
            token=current_user.token,
        )
    except GatewayError as e:
        logger.error("Payment verification failed for booking %s: %s", funnel["bookingId"], e.message)
        return render_payment_page(
            request,
            funnel=funnel,
            errors={"form": "Payment verification failed. Please contact support."},
            status_code=400
        )

    return flash_redirect(
        request.url_for("confirmation_page", booking_id=funnel["bookingId"]),
        "Payment successful!"
    )


@router.post("/payment/manual", name="payment_manual")
async def payment_manual(
    request: Request,
    current_user: SessionUser = Depends(get_current_user)
):
    funnel = get_funnel(request)
    if not funnel:
        return flash_redirect(request.url_for("home"), FUNNEL_MISSING_MESSAGE, "error")

    form = await request.form()
    method = form.get("method", "")
    form_data = {key: value for key, value in form.items() if key not in ("method", "cvv")}

    details_form = PAYMENT_DETAIL_FORMS.get(method)
    if not details_form:
        return render_payment_page(
            request,
            funnel=funnel,
            method=method,
            form=form_data,
            errors={"method": "Please choose a payment method"},
            status_code=400
        )

    fields = details_form.model_fields.keys()
    try:
        details_form(**{key: form.get(key, "") for key in fields})
    except ValidationError as e:
        errors = validation_errors(e)
        errors["form"] = "Please fix the errors in the form"
        return render_payment_page(
            request,
            funnel=funnel,
            method=method,
            form=form_data,
            errors=errors,
            status_code=400
        )

    confirmation_url = request.url_for("confirmation_page", booking_id=funnel["bookingId"])

    try:
        booking_service.update_booking_status(funnel["bookingId"], BOOKING_CONFIRMED, token=current_user.token)
    except GatewayError as e:
        # Payment was taken; the customer still gets their confirmation page
        logger.error("Booking %s status update failed after payment: %s", funnel["bookingId"], e.message)
        return flash_redirect(confirmation_url, "Failed to update payment status in backend.", "error")

    return flash_redirect(confirmation_url, "Payment successful!")


# =================================================
# CONFIRMATION
# =================================================
def load_booking(booking_id: int, token: str) -> Optional[dict]:
    try:
        return booking_service.get_booking(booking_id, token=token)
    except GatewayError as e:
        logger.warning("Booking %s could not be loaded: %s", booking_id, e.message)
        return None


def load_insurance_selection(booking: dict, token: str) -> Optional[dict]:
    if not booking.get("hasInsurance"):
        return None
    try:
        selections = insurance_service.list_selections_by_booking(booking.get("bookingId"), token=token)
    except GatewayError as e:
        logger.warning("Insurance selection for booking %s unavailable: %s", booking.get("bookingId"), e.message)
        return None
    return selections[-1] if selections else None


@router.get("/confirmation/{booking_id}", response_class=HTMLResponse, name="confirmation_page")
def confirmation_page(
    booking_id: int,
    request: Request,
    current_user: SessionUser = Depends(get_current_user)
):
    booking = load_booking(booking_id, current_user.token)
    if not booking:
        return templates.TemplateResponse(
            request,
            "booking/not_found.html",
            {"booking_id": booking_id},
            status_code=404
        )

    funnel = get_funnel(request) or {}
    response = templates.TemplateResponse(
        request,
        "booking/confirmation.html",
        {
            "booking": booking,
            "payment": booking.get("payment") or {},
            "package_title": funnel.get("packageTitle"),
            "insurance_selection": load_insurance_selection(booking, current_user.token),
        }
    )
    response.delete_cookie(FUNNEL_COOKIE, path="/")
    return response


@router.get("/confirmation/{booking_id}/receipt", name="confirmation_receipt")
def confirmation_receipt(
    booking_id: int,
    request: Request,
    current_user: SessionUser = Depends(get_current_user)
):
    booking = load_booking(booking_id, current_user.token)
    if not booking:
        return flash_redirect(request.url_for("confirmation_page", booking_id=booking_id), "Booking not found", "error")

    return PlainTextResponse(
        build_receipt(booking),
        headers={"Content-Disposition": f'attachment; filename="booking-receipt-{booking_id}.txt"'},
    )


@router.post("/confirmation/{booking_id}/email", name="confirmation_email")
async def confirmation_email(
    booking_id: int,
    request: Request,
    current_user: SessionUser = Depends(get_current_user)
):
    page_url = request.url_for("confirmation_page", booking_id=booking_id)

    booking = load_booking(booking_id, current_user.token)
    if not booking:
        return flash_redirect(page_url, "Booking not found", "error")

    recipient = booking.get("contactEmail") or current_user.email
    if not recipient:
        return flash_redirect(page_url, "No email address on this booking", "error")

    try:
        await send_booking_confirmation_email(recipient, booking, build_receipt(booking))
    except ConnectionErrors as e:
        logger.error("Confirmation email for booking %s failed: %s", booking_id, e)
        return flash_redirect(page_url, "Could not send the confirmation email. Please try again.", "error")

    return flash_redirect(page_url, "Confirmation email sent to your registered email address!")
