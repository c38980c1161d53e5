from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse
from pydantic import ValidationError

from app.auth.dependencies import SessionUser, get_current_user
from app.core.templates import templates
from app.schemas.common import validation_errors
from app.schemas.review import ReviewForm
from app.services import review_service
from app.services.gateway import GatewayError
from app.utils.flash import flash_redirect
from app.utils.table import build_table

router = APIRouter(prefix="/reviews", tags=["Reviews"])

REVIEW_SEARCH_KEYS = ("comment", "agentResponse", "reviewId", "userId", "packageId")


@router.get("", response_class=HTMLResponse, name="review_list")
def review_list(
    request: Request,
    q: str = Query(""),
    rating: str = Query("all"),
    page: int = Query(1),
):
    reviews = review_service.list_reviews()
    table = build_table(
        reviews,
        search=q,
        search_keys=REVIEW_SEARCH_KEYS,
        filters={"rating": rating},
        page=page,
    )

    return templates.TemplateResponse(
        request,
        "reviews/list.html",
        {
            "table": table,
        }
    )


@router.post("", name="review_create")
def review_create(
    request: Request,
    package_id: str = Form(""),
    rating: str = Form("0"),
    comment: str = Form(""),
    current_user: SessionUser = Depends(get_current_user)
):
    try:
        form = ReviewForm(package_id=package_id, rating=rating or 0, comment=comment)
    except ValidationError as e:
        errors = validation_errors(e)
        message = errors.get("rating") or errors.get("comment") or "Please choose a package to review"
        back = request.url_for("package_detail", package_id=package_id) if package_id.isdigit() \
            else request.url_for("review_list")
        return flash_redirect(back, message, "error")

    back = request.url_for("package_detail", package_id=form.package_id)

    try:
        review_service.create_review(
            user_id=current_user.id,
            package_id=form.package_id,
            rating=form.rating,
            comment=form.comment,
            token=current_user.token,
        )
    except GatewayError as e:
        return flash_redirect(back, e.message or "Failed to submit review", "error")

    return flash_redirect(back, "Thank you for your feedback!")
