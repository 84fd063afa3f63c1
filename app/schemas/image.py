"""
Pydantic schemas for spot and review image requests and responses.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Optional

from app.utils.validators import ValidationUtils


class ImageCreateBase(BaseModel):
    """Base schema for attaching an image by URL."""

    url: Optional[str] = Field(
        None,
        max_length=2048,
        description="Public URL of the image",
        examples=["https://example.com/images/spot-1.jpg"],
        validate_default=True
    )

    @field_validator("url", mode="before")
    @classmethod
    def validate_url(cls, v: Any) -> str:
        return ValidationUtils.validate_string(
            v,
            "Image URL is required",
            max_length=2048,
            max_length_message="Image URL must be 2048 characters or less"
        )


class SpotImageCreate(ImageCreateBase):
    """
    Schema for adding an image to a spot.

    ``preview`` accepts booleans and the strings "true"/"false",
    "1"/"0" and "yes"/"no"; it defaults to false.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "url": "https://example.com/images/spot-1.jpg",
                "preview": True
            }
        }
    )

    preview: bool = Field(False, description="Whether the image is the spot's preview")

    @field_validator("preview", mode="before")
    @classmethod
    def coerce_preview(cls, v: Any) -> bool:
        return ValidationUtils.coerce_bool(v, "Preview must be true or false")


class ReviewImageCreate(ImageCreateBase):
    """Schema for adding an image to a review."""


class SpotImageResponse(BaseModel):
    """Spot image as returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., examples=[1])
    url: str = Field(..., examples=["https://example.com/images/spot-1.jpg"])
    preview: bool = Field(..., examples=[True])


class ReviewImageResponse(BaseModel):
    """Review image as returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., examples=[1])
    url: str = Field(..., examples=["https://example.com/images/review-1.jpg"])
