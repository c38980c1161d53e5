from pathlib import Path

from fastapi_mail import ConnectionConfig, FastMail

from app.core.config import settings

TEMPLATE_FOLDER = Path(__file__).resolve().parent.parent / "templates" / "email"

conf = ConnectionConfig(
    MAIL_USERNAME=settings.MAIL_USERNAME,
    MAIL_PASSWORD=settings.MAIL_PASSWORD,
    MAIL_FROM=settings.MAIL_FROM,
    MAIL_FROM_NAME=settings.MAIL_FROM_NAME,
    MAIL_PORT=settings.MAIL_PORT,
    MAIL_SERVER=settings.MAIL_SERVER,
    MAIL_STARTTLS=settings.MAIL_STARTTLS,
    MAIL_SSL_TLS=settings.MAIL_SSL_TLS,
    USE_CREDENTIALS=bool(settings.MAIL_USERNAME),
    SUPPRESS_SEND=settings.MAIL_SUPPRESS_SEND,
    TEMPLATE_FOLDER=TEMPLATE_FOLDER,
)

fast_mail = FastMail(conf)
