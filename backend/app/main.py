import logging

from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles

from app.auth.dependencies import LoginRequired, redirect_to_login
from app.core.config import settings
from app.core.templates import BASE_DIR, templates
from app.routers.web import admin, agent, assistance, auth, booking, dashboard, packages, reviews
from app.services.gateway import GatewayError, GatewayUnavailable

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_NAME)
app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")

app.include_router(auth.router)
app.include_router(packages.router)
app.include_router(booking.router)
app.include_router(assistance.router)
app.include_router(reviews.router)
app.include_router(dashboard.router)
app.include_router(admin.router)
app.include_router(agent.router)


@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired):
    return redirect_to_login(request, exc.message, clear_session=exc.clear_session)


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError):
    if exc.status_code == 401:
        return redirect_to_login(request, "Session expired. Please login again", clear_session=True)

    if isinstance(exc, GatewayUnavailable):
        status_code = 502
    elif exc.status_code and 400 <= exc.status_code < 600:
        status_code = exc.status_code
    else:
        status_code = 502

    logger.error("Unhandled backend error on %s: %s", request.url.path, exc.message)
    return templates.TemplateResponse(
        request,
        "error.html",
        {
            "message": exc.message,
            "status_code": status_code,
            "retry_url": str(request.url),
        },
        status_code=status_code
    )
