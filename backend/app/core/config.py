from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

GATEWAY_URL = "http://localhost:9999/api"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "Aventra Travel"
    SECRET_KEY: str = "change-me-aventra-secret"
    ALGORITHM: str = "HS256"
    LOG_LEVEL: str = "INFO"
    CURRENCY: str = "INR"

    # Backend services behind the gateway
    USER_API_URL: str = f"{GATEWAY_URL}/users"
    PACKAGE_API_URL: str = f"{GATEWAY_URL}/packages"
    BOOKING_API_URL: str = f"{GATEWAY_URL}/bookings"
    PAYMENT_API_URL: str = f"{GATEWAY_URL}/payments"
    INSURANCE_API_URL: str = f"{GATEWAY_URL}/insurance"
    ASSISTANCE_API_URL: str = f"{GATEWAY_URL}/assistance"
    REVIEW_API_URL: str = f"{GATEWAY_URL}/reviews"

    REQUEST_TIMEOUT: int = 10
    ASSISTANCE_RESOLVE_FORMAT: Literal["json", "text"] = "json"
    AUTO_REFRESH_SECONDS: int = 10
    FUNNEL_COOKIE_MAX_AGE: int = 60 * 60

    MAIL_USERNAME: str = ""
    MAIL_PASSWORD: str = ""
    MAIL_FROM: str = "bookings@aventra.travel"
    MAIL_FROM_NAME: str = "Aventra Travel"
    MAIL_SERVER: str = "localhost"
    MAIL_PORT: int = 587
    MAIL_STARTTLS: bool = True
    MAIL_SSL_TLS: bool = False
    MAIL_SUPPRESS_SEND: bool = True


settings = Settings()
