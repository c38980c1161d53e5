import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse

from app.auth.dependencies import get_optional_user
from app.core.templates import templates
from app.services import package_service, review_service
from app.services.gateway import GatewayError
from app.utils.table import build_table

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Packages"])

PACKAGE_SEARCH_KEYS = ("title", "destination", "description", "highlights")


def _to_float(value: Optional[str]) -> Optional[float]:
    try:
        return float(value) if value not in (None, "") else None
    except ValueError:
        return None


def public_packages(destination="", min_price=None, max_price=None, token=None) -> list:
    if destination or min_price is not None or max_price is not None:
        packages = package_service.search_packages(
            destination=destination or None,
            min_price=min_price,
            max_price=max_price,
            token=token,
        )
    else:
        packages = package_service.list_packages(token=token)

    return [p for p in packages if p.get("active", True) is not False]


# =================================================
# HOME
# =================================================
@router.get("/", response_class=HTMLResponse, name="home")
def home(request: Request, current_user=Depends(get_optional_user)):
    packages = public_packages(token=current_user.token if current_user else None)

    return templates.TemplateResponse(
        request,
        "home.html",
        {
            "featured": packages[:6],
        }
    )


# =================================================
# LIST PAGE
# =================================================
@router.get("/packages", response_class=HTMLResponse, name="package_list")
def package_list(
    request: Request,
    destination: str = Query(""),
    min_price: str = Query(""),
    max_price: str = Query(""),
    q: str = Query(""),
    page: int = Query(1),
    current_user=Depends(get_optional_user),
):
    packages = public_packages(
        destination.strip(),
        _to_float(min_price),
        _to_float(max_price),
        token=current_user.token if current_user else None,
    )
    table = build_table(packages, search=q, search_keys=PACKAGE_SEARCH_KEYS, page=page, per_page=9)

    return templates.TemplateResponse(
        request,
        "packages/list.html",
        {
            "table": table,
            "query": {"destination": destination, "min_price": min_price, "max_price": max_price, "q": q},
        }
    )


# =================================================
# DATATABLE API
# =================================================
@router.get("/packages/datatable", name="package_datatable")
def package_datatable(
    request: Request,
    destination: str = Query(""),
    min_price: str = Query(""),
    max_price: str = Query(""),
    q: str = Query(""),
    page: int = Query(1),
    per_page: int = Query(10),
):
    packages = public_packages(destination.strip(), _to_float(min_price), _to_float(max_price))
    table = build_table(packages, search=q, search_keys=PACKAGE_SEARCH_KEYS, page=page, per_page=per_page)

    for package in table["items"]:
        package["url"] = str(request.url_for("package_detail", package_id=package.get("packageId")))

    return JSONResponse(table)


# =================================================
# DETAIL PAGE
# =================================================
@router.get("/packages/{package_id}", response_class=HTMLResponse, name="package_detail")
def package_detail(
    package_id: int,
    request: Request,
    current_user=Depends(get_optional_user),
):
    token = current_user.token if current_user else None

    try:
        package = package_service.get_package(package_id, token=token)
    except GatewayError as e:
        if not e.not_found:
            raise
        return templates.TemplateResponse(
            request,
            "packages/not_found.html",
            {"package_id": package_id},
            status_code=404
        )

    try:
        reviews = review_service.list_package_reviews(package_id, token=token)
    except GatewayError as e:
        logger.warning("Reviews unavailable for package %s: %s", package_id, e.message)
        reviews = []

    return templates.TemplateResponse(
        request,
        "packages/detail.html",
        {
            "package": package,
            "reviews": reviews,
        }
    )
