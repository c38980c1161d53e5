from pathlib import Path

from fastapi.templating import Jinja2Templates

from app.auth.dependencies import get_optional_user
from app.core.config import settings
from app.utils.flash import get_flashes
from app.utils.text_format import format_inr, format_date, html_to_text, split_list

BASE_DIR = Path(__file__).resolve().parent.parent

templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

templates.env.filters["inr"] = format_inr
templates.env.filters["plain"] = html_to_text
templates.env.filters["date"] = format_date
templates.env.filters["split_list"] = split_list

templates.env.globals["app_name"] = settings.APP_NAME
templates.env.globals["auto_refresh_seconds"] = settings.AUTO_REFRESH_SECONDS
templates.env.globals["get_flashes"] = get_flashes
templates.env.globals["current_user"] = get_optional_user
