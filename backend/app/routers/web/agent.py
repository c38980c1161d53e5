import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import ValidationError

from app.auth.dependencies import SessionUser, agent_only
from app.core.constants import ASSISTANCE_STATUSES, BOOKING_STATUSES, PAYMENT_PAID_STATUSES, ROLE_USER
from app.core.templates import templates
from app.schemas.common import validation_errors
from app.schemas.package import PackageForm, package_form_data
from app.schemas.review import ReviewResponseForm
from app.services import assistance_service, booking_service, package_service, review_service, user_service
from app.services.gateway import GatewayError
from app.utils.flash import flash_redirect
from app.utils.table import build_table, search_rows

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/agent", tags=["Agent"])

IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "webp", "gif"}
PACKAGE_SEARCH_KEYS = ("title", "destination", "packageId")
BOOKING_SEARCH_KEYS = ("bookingId", "userId", "packageId", "contactFullName", "contactEmail")
REVIEW_SEARCH_KEYS = ("comment", "agentResponse", "reviewId", "userId")
CUSTOMER_SEARCH_KEYS = ("name", "email", "phone")


def agent_packages(current_user: SessionUser) -> list:
    return package_service.list_agent_packages(current_user.id, token=current_user.token)


def agent_bookings(current_user: SessionUser, packages: Optional[list] = None) -> list:
    packages = agent_packages(current_user) if packages is None else packages
    package_ids = {str(p.get("packageId")) for p in packages}
    bookings = booking_service.list_bookings(token=current_user.token)
    return [b for b in bookings if str(b.get("packageId")) in package_ids]


def customers_from_bookings(bookings: list) -> list:
    customers = {}
    for booking in bookings:
        key = booking.get("contactEmail") or f"user-{booking.get('userId')}"
        customer = customers.setdefault(key, {
            "userId": booking.get("userId"),
            "name": booking.get("contactFullName"),
            "email": booking.get("contactEmail"),
            "phone": booking.get("contactPhone"),
            "bookings": 0,
            "last_travel": None,
        })
        customer["bookings"] += 1
        start = booking.get("startDate")
        if start and (customer["last_travel"] is None or start > customer["last_travel"]):
            customer["last_travel"] = start
    return list(customers.values())


def add_registered_customers(customers: list, users: list) -> list:
    known = {c.get("email") for c in customers if c.get("email")}
    known_ids = {c.get("userId") for c in customers}
    for user in users:
        if user.get("userEmail") in known or user.get("userId") in known_ids:
            continue
        customers.append({
            "userId": user.get("userId"),
            "name": user.get("userName"),
            "email": user.get("userEmail"),
            "phone": user.get("userContactNumber"),
            "bookings": 0,
            "last_travel": None,
        })
    return customers


# -------------------------------------------------
# Helper: render package form
# -------------------------------------------------
def render_package_form(
    request: Request,
    *,
    package=None,
    form=None,
    errors=None,
    status_code=200
):
    return templates.TemplateResponse(
        request,
        "agent/package_form.html",
        {
            "package": package,
            "form": form or {"title": "", "destination": "", "duration": "", "price": "", "active": True},
            "errors": errors or {},
        },
        status_code=status_code
    )


def package_form_fields(
    title, destination, description, duration, price, include_service,
    exclude_service, highlights, main_image, max_group_size, cancellation_policy, active
) -> dict:
    return {
        "title": title,
        "destination": destination,
        "description": description,
        "duration": duration,
        "price": price,
        "include_service": include_service,
        "exclude_service": exclude_service,
        "highlights": highlights,
        "main_image": main_image or None,
        "max_group_size": max_group_size or None,
        "cancellation_policy": cancellation_policy,
        "active": bool(active),
    }


# =================================================
# OVERVIEW
# =================================================
@router.get("", response_class=HTMLResponse, name="agent_dashboard")
def agent_dashboard(request: Request, current_user: SessionUser = Depends(agent_only)):
    try:
        packages = agent_packages(current_user)
        bookings = agent_bookings(current_user, packages)
    except GatewayError as e:
        logger.warning("Agent dashboard data unavailable for %s: %s", current_user.id, e.message)
        packages, bookings = [], []

    earnings = sum(
        float((b.get("payment") or {}).get("amount") or 0)
        for b in bookings
        if str((b.get("payment") or {}).get("status") or "").upper() in PAYMENT_PAID_STATUSES
    )

    stats = {
        "packages": len(packages),
        "active_packages": sum(1 for p in packages if p.get("active")),
        "bookings": len(bookings),
        "customers": len(customers_from_bookings(bookings)),
        "earnings": earnings,
    }

    return templates.TemplateResponse(
        request,
        "agent/overview.html",
        {
            "stats": stats,
            "recent_bookings": bookings[-5:][::-1],
        }
    )


# =================================================
# PACKAGES
# =================================================
@router.get("/packages", response_class=HTMLResponse, name="agent_packages")
def agent_package_list(
    request: Request,
    q: str = Query(""),
    active: str = Query("all"),
    page: int = Query(1),
    current_user: SessionUser = Depends(agent_only)
):
    table = build_table(
        agent_packages(current_user),
        search=q,
        search_keys=PACKAGE_SEARCH_KEYS,
        filters={"active": active},
        page=page,
    )

    return templates.TemplateResponse(
        request,
        "agent/packages.html",
        {
            "table": table,
        }
    )


@router.get("/packages/datatable", name="agent_package_datatable")
def agent_package_datatable(
    request: Request,
    draw: int = Query(1),
    start: int = Query(0),
    length: int = Query(10),
    search: str = Query(""),
    current_user: SessionUser = Depends(agent_only)
):
    packages = agent_packages(current_user)
    matched = search_rows(packages, search, PACKAGE_SEARCH_KEYS)

    data = []
    for package in matched[start:start + length]:
        edit_url = request.url_for("agent_package_edit_page", package_id=package.get("packageId"))
        delete_url = request.url_for("agent_package_delete", package_id=package.get("packageId"))

        data.append({
            "id": package.get("packageId"),
            "title": package.get("title"),
            "destination": package.get("destination"),
            "price": package.get("price"),
            "status": "Active" if package.get("active") else "Inactive",
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
            "recordsTotal": len(packages),
            "recordsFiltered": len(matched),
            "data": data
        }
    )


@router.get("/packages/create", response_class=HTMLResponse, name="agent_package_create_page")
def agent_package_create_page(request: Request, _=Depends(agent_only)):
    return render_package_form(request)


@router.post("/packages/create", name="agent_package_create")
def agent_package_create(
    request: Request,
    title: str = Form(""),
    destination: str = Form(""),
    description: str = Form(""),
    duration: str = Form(""),
    price: str = Form(""),
    include_service: str = Form(""),
    exclude_service: str = Form(""),
    highlights: str = Form(""),
    main_image: str = Form(""),
    max_group_size: str = Form(""),
    cancellation_policy: str = Form(""),
    active: Optional[str] = Form(None),
    current_user: SessionUser = Depends(agent_only)
):
    form_data = package_form_fields(
        title, destination, description, duration, price, include_service,
        exclude_service, highlights, main_image, max_group_size, cancellation_policy, active
    )

    try:
        form = PackageForm(**form_data)
    except ValidationError as e:
        return render_package_form(request, form=form_data, errors=validation_errors(e), status_code=400)

    try:
        package_service.create_package(form.to_payload(), agent_id=current_user.id, token=current_user.token)
    except GatewayError as e:
        return render_package_form(
            request, form=form_data, errors={"form": e.message or "Failed to create package"}, status_code=400
        )

    return flash_redirect(request.url_for("agent_packages"), "Package created successfully")


@router.get("/packages/{package_id}/edit", response_class=HTMLResponse, name="agent_package_edit_page")
def agent_package_edit_page(
    package_id: int,
    request: Request,
    current_user: SessionUser = Depends(agent_only)
):
    package = package_service.get_package(package_id, token=current_user.token)
    return render_package_form(request, package=package, form=package_form_data(package))


@router.post("/packages/{package_id}/edit", name="agent_package_update")
def agent_package_update(
    package_id: int,
    request: Request,
    title: str = Form(""),
    destination: str = Form(""),
    description: str = Form(""),
    duration: str = Form(""),
    price: str = Form(""),
    include_service: str = Form(""),
    exclude_service: str = Form(""),
    highlights: str = Form(""),
    main_image: str = Form(""),
    max_group_size: str = Form(""),
    cancellation_policy: str = Form(""),
    active: Optional[str] = Form(None),
    current_user: SessionUser = Depends(agent_only)
):
    form_data = package_form_fields(
        title, destination, description, duration, price, include_service,
        exclude_service, highlights, main_image, max_group_size, cancellation_policy, active
    )
    package = {"packageId": package_id}

    try:
        form = PackageForm(**form_data)
    except ValidationError as e:
        return render_package_form(
            request, package=package, form=form_data, errors=validation_errors(e), status_code=400
        )

    payload = {**form.to_payload(), "createdByAgentId": current_user.id}
    try:
        package_service.update_package(package_id, payload, token=current_user.token)
    except GatewayError as e:
        return render_package_form(
            request, package=package, form=form_data,
            errors={"form": e.message or "Failed to update package"}, status_code=400
        )

    return flash_redirect(request.url_for("agent_packages"), "Package updated successfully")


@router.post("/packages/{package_id}/delete", name="agent_package_delete")
def agent_package_delete(
    package_id: int,
    request: Request,
    current_user: SessionUser = Depends(agent_only)
):
    try:
        package_service.delete_package(package_id, token=current_user.token)
    except GatewayError as e:
        return flash_redirect(request.url_for("agent_packages"), e.message or "Failed to delete package", "error")

    return flash_redirect(request.url_for("agent_packages"), "Package deleted successfully")


@router.post("/packages/{package_id}/status", name="agent_package_status")
def agent_package_status(
    package_id: int,
    request: Request,
    active: str = Form(...),
    current_user: SessionUser = Depends(agent_only)
):
    make_active = active.lower() in ("1", "true", "on", "yes")

    try:
        package_service.update_package_status(package_id, make_active, token=current_user.token)
    except GatewayError as e:
        return flash_redirect(request.url_for("agent_packages"), e.message or "Failed to update status", "error")

    label = "activated" if make_active else "deactivated"
    return flash_redirect(request.url_for("agent_packages"), f"Package {label} successfully")


@router.post("/packages/{package_id}/image", name="agent_package_image")
def agent_package_image(
    package_id: int,
    request: Request,
    image: UploadFile = File(None),
    is_main: Optional[str] = Form(None),
    current_user: SessionUser = Depends(agent_only)
):
    back = request.url_for("agent_package_edit_page", package_id=package_id)

    if not image or not image.filename:
        return flash_redirect(back, "Please choose an image to upload", "error")

    ext = image.filename.rsplit(".", 1)[-1].lower()
    if ext not in IMAGE_EXTENSIONS:
        return flash_redirect(back, "Only JPG, PNG, WEBP or GIF images are allowed", "error")

    try:
        package_service.upload_package_image(package_id, image, is_main=bool(is_main), token=current_user.token)
    except GatewayError as e:
        return flash_redirect(back, e.message or "Failed to upload image", "error")

    return flash_redirect(back, "Image uploaded successfully")


# =================================================
# BOOKINGS
# =================================================
@router.get("/bookings", response_class=HTMLResponse, name="agent_bookings")
def agent_booking_list(
    request: Request,
    q: str = Query(""),
    status: str = Query("all"),
    page: int = Query(1),
    current_user: SessionUser = Depends(agent_only)
):
    table = build_table(
        agent_bookings(current_user),
        search=q,
        search_keys=BOOKING_SEARCH_KEYS,
        filters={"status": status},
        page=page,
    )

    return templates.TemplateResponse(
        request,
        "agent/bookings.html",
        {
            "table": table,
            "statuses": BOOKING_STATUSES,
        }
    )


@router.post("/bookings/{booking_id}/status", name="agent_booking_status")
def agent_booking_status(
    booking_id: int,
    request: Request,
    status: str = Form(...),
    current_user: SessionUser = Depends(agent_only)
):
    if status not in BOOKING_STATUSES:
        return flash_redirect(request.url_for("agent_bookings"), "Unknown booking status", "error")

    try:
        booking_service.update_booking_status(booking_id, status, token=current_user.token)
    except GatewayError as e:
        return flash_redirect(request.url_for("agent_bookings"), e.message or "Failed to update booking", "error")

    return flash_redirect(request.url_for("agent_bookings"), f"Booking #{booking_id} marked {status}")


# =================================================
# REVIEWS
# =================================================
@router.get("/reviews", response_class=HTMLResponse, name="agent_reviews")
def agent_review_list(
    request: Request,
    q: str = Query(""),
    rating: str = Query("all"),
    responded: str = Query("all"),
    page: int = Query(1),
    current_user: SessionUser = Depends(agent_only)
):
    reviews = review_service.list_reviews(token=current_user.token)
    table = build_table(
        reviews,
        search=q,
        search_keys=REVIEW_SEARCH_KEYS,
        filters={"rating": rating, "responded": responded},
        page=page,
    )

    return templates.TemplateResponse(
        request,
        "agent/reviews.html",
        {
            "table": table,
            "errors": {},
        }
    )


@router.post("/reviews/{review_id}/respond", name="agent_review_respond")
def agent_review_respond(
    review_id: int,
    request: Request,
    agent_response: str = Form(""),
    current_user: SessionUser = Depends(agent_only)
):
    try:
        form = ReviewResponseForm(agent_response=agent_response)
    except ValidationError as e:
        return flash_redirect(request.url_for("agent_reviews"), validation_errors(e)["agent_response"], "error")

    try:
        review_service.respond_to_review(review_id, form.agent_response, token=current_user.token)
    except GatewayError as e:
        return flash_redirect(request.url_for("agent_reviews"), e.message or "Failed to submit response", "error")

    return flash_redirect(request.url_for("agent_reviews"), "Response submitted successfully")


# =================================================
# CUSTOMERS / INQUIRIES
# =================================================
@router.get("/customers", response_class=HTMLResponse, name="agent_customers")
def agent_customers(
    request: Request,
    q: str = Query(""),
    page: int = Query(1),
    current_user: SessionUser = Depends(agent_only)
):
    customers = customers_from_bookings(agent_bookings(current_user))
    try:
        users = user_service.search_users(role=ROLE_USER, token=current_user.token)
    except GatewayError as e:
        logger.warning("Registered customers unavailable: %s", e.message)
    else:
        customers = add_registered_customers(customers, users)
    table = build_table(customers, search=q, search_keys=CUSTOMER_SEARCH_KEYS, page=page)

    return templates.TemplateResponse(
        request,
        "agent/customers.html",
        {
            "table": table,
        }
    )


@router.get("/inquiries", response_class=HTMLResponse, name="agent_inquiries")
def agent_inquiries(
    request: Request,
    q: str = Query(""),
    status: str = Query("all"),
    page: int = Query(1),
    current_user: SessionUser = Depends(agent_only)
):
    requests_ = assistance_service.list_requests(token=current_user.token)
    table = build_table(
        requests_,
        search=q,
        search_keys=("requestId", "userId", "issueDescription"),
        filters={"status": status},
        page=page,
    )

    return templates.TemplateResponse(
        request,
        "agent/inquiries.html",
        {
            "table": table,
            "statuses": ASSISTANCE_STATUSES,
        }
    )
