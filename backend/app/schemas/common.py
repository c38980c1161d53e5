from pydantic import ValidationError
from pydantic_core import PydanticCustomError


def field_error(message: str) -> PydanticCustomError:
    # Custom errors keep the message exactly as written
    return PydanticCustomError("form_field", message)


def required_text(value, message: str) -> str:
    value = (value or "").strip()
    if not value:
        raise field_error(message)
    return value


def validation_errors(e: ValidationError) -> dict:
    errors = {}
    for err in e.errors():
        key = err["loc"][0] if err["loc"] else "form"
        errors.setdefault(key, err["msg"])
    return errors
