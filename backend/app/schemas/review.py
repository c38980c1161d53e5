from pydantic import BaseModel, ConfigDict, field_validator

from app.schemas.common import field_error, required_text

REVIEW_REQUIRED_MESSAGE = "Please give a rating and feedback"


class ReviewForm(BaseModel):
    model_config = ConfigDict(validate_default=True)

    package_id: int
    rating: int = 0
    comment: str = ""

    @field_validator("rating")
    @classmethod
    def rating_in_range(cls, value):
        if not 1 <= value <= 5:
            raise field_error(REVIEW_REQUIRED_MESSAGE)
        return value

    @field_validator("comment")
    @classmethod
    def comment_required(cls, value):
        return required_text(value, REVIEW_REQUIRED_MESSAGE)


class ReviewResponseForm(BaseModel):
    agent_response: str

    @field_validator("agent_response")
    @classmethod
    def response_required(cls, value):
        return required_text(value, "Response cannot be empty")
