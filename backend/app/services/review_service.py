import logging
from typing import Optional

from app.core.config import settings
from app.services.gateway import api_request

logger = logging.getLogger(__name__)

BASE_URL = settings.REVIEW_API_URL


def normalize_review(review: dict) -> dict:
    """The review service is inconsistent about id casing; expose one shape."""
    return {
        **review,
        "reviewId": review.get("reviewID", review.get("reviewId", review.get("id"))),
        "userId": review.get("userID", review.get("userId")),
        "packageId": review.get("packageID", review.get("packageId")),
        "rating": int(review.get("rating") or 0),
        "comment": review.get("comment") or "",
        "agentResponse": review.get("agentResponse") or "",
        "createdAt": review.get("timestamp", review.get("createdAt")),
        "responded": "yes" if review.get("agentResponse") else "no",
    }


def list_reviews(token: Optional[str] = None) -> list:
    reviews = api_request("GET", BASE_URL, token=token) or []
    return [normalize_review(r) for r in reviews]


def list_package_reviews(package_id, token: Optional[str] = None) -> list:
    return [r for r in list_reviews(token=token) if str(r["packageId"]) == str(package_id)]


def create_review(*, user_id, package_id, rating: int, comment: str, token: Optional[str] = None):
    payload = {
        "userID": user_id,
        "packageID": package_id,
        "rating": rating,
        "comment": comment,
    }
    review = api_request("POST", BASE_URL, json=payload, token=token)
    logger.info("Review submitted by user %s for package %s", user_id, package_id)
    return review


def respond_to_review(review_id, response_text: str, token: Optional[str] = None):
    review = api_request(
        "POST",
        f"{BASE_URL}/{review_id}/response",
        json={"agentResponse": response_text},
        token=token,
    )
    logger.info("Agent responded to review %s", review_id)
    return review
