from datetime import date
from typing import List

from pydantic import BaseModel, EmailStr, Field, ValidationInfo, field_validator

from app.schemas.common import field_error, required_text

TERMS_MESSAGE = "Please accept the terms and conditions"
TRAVELER_NAMES_MESSAGE = "Please enter the name of every adult and child traveler"


class BookingForm(BaseModel):
    start_date: date
    end_date: date
    adults: int = Field(1, ge=1)
    children: int = Field(0, ge=0)
    infants: int = Field(0, ge=0)
    traveler_names: List[str] = []
    full_name: str
    email: EmailStr
    phone: str
    has_insurance: bool = False
    accept_terms: bool = False

    @field_validator("end_date")
    @classmethod
    def end_after_start(cls, value, info: ValidationInfo):
        start = info.data.get("start_date")
        if start and value < start:
            raise field_error("End date must be on or after the start date")
        return value

    @field_validator("traveler_names")
    @classmethod
    def every_traveler_named(cls, value, info: ValidationInfo):
        expected = (info.data.get("adults") or 0) + (info.data.get("children") or 0)
        names = [(name or "").strip() for name in value]
        if len(names) < expected or not all(names[:expected]):
            raise field_error(TRAVELER_NAMES_MESSAGE)
        return names

    @field_validator("full_name")
    @classmethod
    def full_name_required(cls, value):
        return required_text(value, "Full name is required")

    @field_validator("phone")
    @classmethod
    def phone_required(cls, value):
        return required_text(value, "Phone number is required")

    @field_validator("accept_terms")
    @classmethod
    def terms_accepted(cls, value):
        if not value:
            raise field_error(TERMS_MESSAGE)
        return value


def _count(value) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def is_submittable(data: dict) -> bool:
    """
    Whether the booking form may be submitted as filled in.

    Mirrors the enabled state of the submit button: both dates, accepted
    terms, the three contact fields, at least one adult and a name for each
    adult and child.
    """
    adults = _count(data.get("adults"))
    children = _count(data.get("children"))
    names = list(data.get("traveler_names") or [])

    required = ("start_date", "end_date", "full_name", "email", "phone")
    if any(not str(data.get(key) or "").strip() for key in required):
        return False
    if not data.get("accept_terms"):
        return False
    if adults <= 0:
        return False

    expected = adults + children
    if len(names) < expected:
        return False
    return all(str(name or "").strip() for name in names[:expected])
