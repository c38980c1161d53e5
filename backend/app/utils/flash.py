from fastapi import Request
from fastapi.responses import RedirectResponse

FLASH_CATEGORIES = ("success", "error")


def flash_redirect(
    url: str,
    message: str,
    category: str = "success",
    status_code: int = 303
):
    response = RedirectResponse(url=str(url), status_code=status_code)

    response.set_cookie(
        key=f"flash_{category}",
        value=message,
        max_age=5,
        path="/"
    )

    return response


def get_flashes(request: Request) -> dict:
    return {
        category: request.cookies.get(f"flash_{category}")
        for category in FLASH_CATEGORIES
        if request.cookies.get(f"flash_{category}")
    }
