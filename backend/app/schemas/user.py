import re
from typing import Optional

from pydantic import BaseModel, EmailStr, ValidationError, ValidationInfo, field_validator

from app.core.constants import ROLES, ROLE_USER
from app.schemas.common import field_error, required_text, validation_errors

PASSWORD_PATTERN = re.compile(r"^(?=.*[0-9])(?=.*[a-z])(?=.*[A-Z])(?=.*[@#$%^&+=])(?=\S+$).{8,}$")
CONTACT_PATTERN = re.compile(r"^[1-9]\d{9,14}$")

PASSWORD_LENGTH_MESSAGE = "Password must be at least 8 characters"
PASSWORD_COMPLEXITY_MESSAGE = (
    "Password must contain uppercase, lowercase, digit, and special character (@#$%^&+=)"
)
CONTACT_MESSAGE = "Contact number must be 10-14 digits starting with non-zero"
PASSWORD_MISMATCH_MESSAGE = "Passwords do not match"
ALL_FIELDS_REQUIRED_MESSAGE = "All fields are required"


def check_password(value: str) -> str:
    value = value or ""
    if len(value) < 8:
        raise field_error(PASSWORD_LENGTH_MESSAGE)
    if not PASSWORD_PATTERN.match(value):
        raise field_error(PASSWORD_COMPLEXITY_MESSAGE)
    return value


def check_contact_number(value: str) -> str:
    value = (value or "").strip()
    if not CONTACT_PATTERN.match(value):
        raise field_error(CONTACT_MESSAGE)
    return value


class LoginForm(BaseModel):
    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def password_required(cls, value):
        if not value:
            raise field_error("Password is required")
        return value


class RegisterForm(BaseModel):
    name: str
    email: EmailStr
    password: str
    confirm_password: str
    contact_number: str

    @field_validator("name")
    @classmethod
    def name_required(cls, value):
        return required_text(value, "Name is required")

    @field_validator("password")
    @classmethod
    def strong_password(cls, value):
        return check_password(value)

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, value, info: ValidationInfo):
        password = info.data.get("password")
        if password is not None and value != password:
            raise field_error(PASSWORD_MISMATCH_MESSAGE)
        return value

    @field_validator("contact_number")
    @classmethod
    def valid_contact(cls, value):
        return check_contact_number(value)


def validate_registration(data: dict):
    """
    Validate the registration form.

    Returns `(form, {})` on success or `(None, errors)`. A confirmation that
    differs from the password is always reported, even when the password
    itself is rejected.
    """
    errors = {}

    required = ("name", "email", "password", "contact_number")
    if any(not str(data.get(key) or "").strip() for key in required):
        errors["form"] = ALL_FIELDS_REQUIRED_MESSAGE

    form = None
    try:
        form = RegisterForm(**data)
    except ValidationError as e:
        errors = {**validation_errors(e), **errors}

    if (data.get("password") or "") != (data.get("confirm_password") or ""):
        errors["confirm_password"] = PASSWORD_MISMATCH_MESSAGE

    if errors:
        return None, errors
    return form, {}


class ProfileForm(BaseModel):
    name: str
    email: EmailStr
    contact_number: str

    @field_validator("name")
    @classmethod
    def name_required(cls, value):
        return required_text(value, "Name is required")

    @field_validator("contact_number")
    @classmethod
    def valid_contact(cls, value):
        return check_contact_number(value)


class UserForm(ProfileForm):
    """Admin create / update of any account."""

    role: str = ROLE_USER
    password: Optional[str] = None

    @field_validator("role")
    @classmethod
    def known_role(cls, value):
        if value not in ROLES:
            raise field_error("Please select a valid role")
        return value

    @field_validator("password")
    @classmethod
    def strong_password(cls, value):
        if not value:
            return None
        return check_password(value)

    def to_payload(self) -> dict:
        payload = {
            "userName": self.name,
            "userEmail": self.email,
            "userRole": self.role,
            "userContactNumber": self.contact_number,
        }
        if self.password:
            payload["userPassword"] = self.password
        return payload
