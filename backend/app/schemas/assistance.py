from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from app.schemas.common import field_error, required_text

ISSUE_REQUIRED_MESSAGE = "Issue Description is required."
USER_AND_ISSUE_REQUIRED_MESSAGE = "User ID and Issue Description are required."
REQUEST_NOT_FOUND_MESSAGE = "Request not found. Please check the ID."
REQUEST_USER_MISMATCH_MESSAGE = "Request ID does not match the provided User ID."
RESOLUTION_REQUIRED_MESSAGE = "Resolution message cannot be empty."


class AssistanceRequestForm(BaseModel):
    model_config = ConfigDict(validate_default=True)

    user_id: Optional[int] = None
    issue_description: str

    @field_validator("issue_description")
    @classmethod
    def issue_required(cls, value):
        return required_text(value, ISSUE_REQUIRED_MESSAGE)

    @field_validator("user_id")
    @classmethod
    def user_required(cls, value):
        if value is None:
            raise field_error(USER_AND_ISSUE_REQUIRED_MESSAGE)
        return value


class ViewRequestForm(BaseModel):
    request_id: int
    user_id: Optional[int] = None


class ResolveForm(BaseModel):
    resolution_message: str

    @field_validator("resolution_message")
    @classmethod
    def message_required(cls, value):
        return required_text(value, RESOLUTION_REQUIRED_MESSAGE)
