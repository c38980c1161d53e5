from typing import Optional

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import required_text


class PackageForm(BaseModel):
    title: str = Field(..., max_length=150)
    destination: str
    description: str = ""
    duration: int = Field(..., ge=1, le=60)
    price: float = Field(..., gt=0)
    include_service: str = ""
    exclude_service: str = ""
    highlights: str = ""
    main_image: Optional[str] = None
    max_group_size: Optional[int] = Field(None, ge=1)
    cancellation_policy: str = ""
    active: bool = True

    @field_validator("title")
    @classmethod
    def title_required(cls, value):
        return required_text(value, "Title is required")

    @field_validator("destination")
    @classmethod
    def destination_required(cls, value):
        return required_text(value, "Destination is required")

    def to_payload(self) -> dict:
        return {
            "title": self.title,
            "destination": self.destination,
            "description": self.description,
            "duration": self.duration,
            "price": self.price,
            "includeService": self.include_service,
            "excludeService": self.exclude_service,
            "highlights": self.highlights,
            "mainImage": self.main_image or None,
            "maxGroupSize": self.max_group_size,
            "cancellationPolicy": self.cancellation_policy,
            "active": self.active,
        }


def package_form_data(package: dict) -> dict:
    """Backend record to form values for the edit page."""
    return {
        "title": package.get("title") or "",
        "destination": package.get("destination") or "",
        "description": package.get("description") or "",
        "duration": package.get("duration") or "",
        "price": package.get("price") or "",
        "include_service": package.get("includeService") or "",
        "exclude_service": package.get("excludeService") or "",
        "highlights": package.get("highlights") or "",
        "main_image": package.get("mainImage") or "",
        "max_group_size": package.get("maxGroupSize") or "",
        "cancellation_policy": package.get("cancellationPolicy") or "",
        "active": bool(package.get("active", True)),
    }
