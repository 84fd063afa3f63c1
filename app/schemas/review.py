"""
Pydantic schemas for review requests and responses.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, List, Optional
from datetime import datetime

from app.schemas.image import ReviewImageResponse
from app.schemas.spot import SpotSummary
from app.schemas.user import UserProfile
from app.utils.validators import ValidationUtils


class ReviewCreate(BaseModel):
    """Schema for creating or updating a review."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "review": "This was an awesome spot!",
                "stars": 5
            }
        }
    )

    review: Optional[str] = Field(None, description="Review text", validate_default=True)
    stars: Optional[float] = Field(None, description="Star rating from 1 to 5", validate_default=True)

    @field_validator("review", mode="before")
    @classmethod
    def validate_review(cls, v: Any) -> str:
        return ValidationUtils.validate_string(v, "Review text is required")

    @field_validator("stars", mode="before")
    @classmethod
    def validate_stars(cls, v: Any) -> float:
        return ValidationUtils.validate_float(v, "Stars must be from 1 to 5", 1.0, 5.0)


class ReviewUpdate(ReviewCreate):
    """Schema for updating a review."""


class ReviewResponse(BaseModel):
    """Stored review record."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: int
    user_id: int = Field(..., alias="userId")
    spot_id: int = Field(..., alias="spotId")
    review: str
    stars: float
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")


class SpotReviewItem(ReviewResponse):
    """Review listed under a spot, with its author and images."""

    user: UserProfile = Field(..., alias="User")
    review_images: List[ReviewImageResponse] = Field(default_factory=list, alias="ReviewImages")


class CurrentUserReviewItem(SpotReviewItem):
    """Review listed for its author, including the reviewed spot."""

    spot: Optional[SpotSummary] = Field(None, alias="Spot")


class SpotReviewsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    reviews: List[SpotReviewItem] = Field(..., alias="Reviews")


class CurrentUserReviewsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    reviews: List[CurrentUserReviewItem] = Field(..., alias="Reviews")
