"""
Pydantic schemas for spot requests and responses.
Handles spot create/update validation, listing query parameters and the
shaped listing payloads (fixed-precision coordinates, ratings and preview URLs).
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, List, Optional
from datetime import datetime
from decimal import Decimal

from app.config import settings
from app.schemas.image import SpotImageResponse
from app.schemas.user import UserProfile
from app.utils.formatting import format_coordinate, format_rating
from app.utils.validators import ValidationUtils


LATITUDE_MESSAGE = "Latitude must be within -90 and 90"
LONGITUDE_MESSAGE = "Longitude must be within -180 and 180"
PRICE_MESSAGE = "Price per day must be a number from 0 to 2000"


class SpotCreate(BaseModel):
    """Schema for creating or replacing a spot."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "address": "123 Disney Lane",
                "city": "San Francisco",
                "state": "California",
                "country": "United States of America",
                "lat": 37.7645358,
                "lng": -122.4730327,
                "name": "App Academy",
                "description": "Place where web developers are created",
                "price": 123
            }
        }
    )

    address: Optional[str] = Field(None, description="Street address", validate_default=True)
    city: Optional[str] = Field(None, validate_default=True)
    state: Optional[str] = Field(None, validate_default=True)
    country: Optional[str] = Field(None, validate_default=True)
    lat: Optional[Decimal] = Field(None, description="Latitude in [-90, 90]", validate_default=True)
    lng: Optional[Decimal] = Field(None, description="Longitude in [-180, 180]", validate_default=True)
    name: Optional[str] = Field(None, description="Listing name, at most 50 characters", validate_default=True)
    description: Optional[str] = Field(None, validate_default=True)
    price: Optional[Decimal] = Field(None, description="Price per day in [0, 2000]", validate_default=True)

    @field_validator("address", mode="before")
    @classmethod
    def validate_address(cls, v: Any) -> str:
        return ValidationUtils.validate_string(
            v,
            "Street address is required",
            max_length=255,
            max_length_message="Street address must be 255 characters or less"
        )

    @field_validator("city", mode="before")
    @classmethod
    def validate_city(cls, v: Any) -> str:
        return ValidationUtils.validate_string(
            v,
            "City is required",
            max_length=100,
            max_length_message="City must be 100 characters or less"
        )

    @field_validator("state", mode="before")
    @classmethod
    def validate_state(cls, v: Any) -> str:
        return ValidationUtils.validate_string(
            v,
            "State is required",
            max_length=100,
            max_length_message="State must be 100 characters or less"
        )

    @field_validator("country", mode="before")
    @classmethod
    def validate_country(cls, v: Any) -> str:
        return ValidationUtils.validate_string(
            v,
            "Country is required",
            max_length=100,
            max_length_message="Country must be 100 characters or less"
        )

    @field_validator("lat", mode="before")
    @classmethod
    def validate_lat(cls, v: Any) -> Decimal:
        return ValidationUtils.validate_decimal(v, LATITUDE_MESSAGE, Decimal("-90"), Decimal("90"))

    @field_validator("lng", mode="before")
    @classmethod
    def validate_lng(cls, v: Any) -> Decimal:
        return ValidationUtils.validate_decimal(v, LONGITUDE_MESSAGE, Decimal("-180"), Decimal("180"))

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any) -> str:
        return ValidationUtils.validate_string(
            v,
            "Name is required",
            max_length=50,
            max_length_message="Name must be less than 50 characters"
        )

    @field_validator("description", mode="before")
    @classmethod
    def validate_description(cls, v: Any) -> str:
        return ValidationUtils.validate_string(v, "Description is required")

    @field_validator("price", mode="before")
    @classmethod
    def validate_price(cls, v: Any) -> Decimal:
        return ValidationUtils.validate_decimal(v, PRICE_MESSAGE, Decimal("0"), Decimal("2000"))


class SpotUpdate(SpotCreate):
    """Schema for updating a spot; the full record is validated again."""


class SpotResponse(BaseModel):
    """Stored spot record with coordinates rendered to six decimals."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: int
    owner_id: int = Field(..., alias="ownerId")
    address: str
    city: str
    state: str
    country: str
    lat: str = Field(..., examples=["37.764536"])
    lng: str = Field(..., examples=["-122.473033"])
    name: str
    description: str
    price: float
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    @field_validator("lat", "lng", mode="before")
    @classmethod
    def render_coordinate(cls, v: Any) -> str:
        return format_coordinate(v)

    @field_validator("price", mode="before")
    @classmethod
    def render_price(cls, v: Any) -> float:
        return float(v)


class SpotListItem(SpotResponse):
    """Spot as it appears in listings."""

    avg_rating: str = Field(..., alias="avgRating", examples=["4.5"])
    preview_image: str = Field(..., alias="previewImage")

    @field_validator("avg_rating", mode="before")
    @classmethod
    def render_rating(cls, v: Any) -> str:
        return format_rating(v)


class SpotListResponse(BaseModel):
    """Paginated spot listing."""

    model_config = ConfigDict(populate_by_name=True)

    spots: List[SpotListItem] = Field(..., alias="Spots")
    page: int = Field(..., examples=[1])
    size: int = Field(..., examples=[20])
    total: int = Field(..., description="Number of spots matching the filters", examples=[42])


class CurrentUserSpotsResponse(BaseModel):
    """Spots owned by the current user."""

    model_config = ConfigDict(populate_by_name=True)

    spots: List[SpotListItem] = Field(..., alias="Spots")


class SpotDetailResponse(SpotResponse):
    """Single spot with review statistics, images and owner."""

    num_reviews: int = Field(..., alias="numReviews")
    avg_star_rating: str = Field(..., alias="avgStarRating", examples=["4.5"])
    preview_image: str = Field(..., alias="previewImage")
    spot_images: List[SpotImageResponse] = Field(default_factory=list, alias="SpotImages")
    owner: UserProfile = Field(..., alias="Owner")

    @field_validator("avg_star_rating", mode="before")
    @classmethod
    def render_rating(cls, v: Any) -> str:
        return format_rating(v)


class SpotSummary(BaseModel):
    """Spot projection embedded in review listings (no timestamps)."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    owner_id: int = Field(..., alias="ownerId")
    address: str
    city: str
    state: str
    country: str
    lat: str
    lng: str
    name: str
    price: float
    preview_image: str = Field(..., alias="previewImage")

    @field_validator("lat", "lng", mode="before")
    @classmethod
    def render_coordinate(cls, v: Any) -> str:
        return format_coordinate(v)

    @field_validator("price", mode="before")
    @classmethod
    def render_price(cls, v: Any) -> float:
        return float(v)


class SpotSearchParams(BaseModel):
    """
    Listing query parameters.

    Pagination values are clamped rather than rejected; range filters are
    validated and a pair whose minimum exceeds its maximum is an error.
    """

    model_config = ConfigDict(populate_by_name=True)

    page: Optional[int] = Field(None, validate_default=True)
    size: Optional[int] = Field(None, validate_default=True)
    min_lat: Optional[Decimal] = Field(None, alias="minLat")
    max_lat: Optional[Decimal] = Field(None, alias="maxLat")
    min_lng: Optional[Decimal] = Field(None, alias="minLng")
    max_lng: Optional[Decimal] = Field(None, alias="maxLng")
    min_price: Optional[Decimal] = Field(None, alias="minPrice")
    max_price: Optional[Decimal] = Field(None, alias="maxPrice")

    @field_validator("page", mode="before")
    @classmethod
    def clamp_page(cls, v: Any) -> int:
        return ValidationUtils.clamp_integer(v, 1, settings.max_page, settings.default_page)

    @field_validator("size", mode="before")
    @classmethod
    def clamp_size(cls, v: Any) -> int:
        return ValidationUtils.clamp_integer(v, 1, settings.max_page_size, settings.default_page_size)

    @field_validator("min_lat", mode="before")
    @classmethod
    def validate_min_lat(cls, v: Any) -> Optional[Decimal]:
        return cls._optional(v, "Minimum latitude is invalid", "-90", "90")

    @field_validator("max_lat", mode="before")
    @classmethod
    def validate_max_lat(cls, v: Any) -> Optional[Decimal]:
        return cls._optional(v, "Maximum latitude is invalid", "-90", "90")

    @field_validator("min_lng", mode="before")
    @classmethod
    def validate_min_lng(cls, v: Any) -> Optional[Decimal]:
        return cls._optional(v, "Minimum longitude is invalid", "-180", "180")

    @field_validator("max_lng", mode="before")
    @classmethod
    def validate_max_lng(cls, v: Any) -> Optional[Decimal]:
        return cls._optional(v, "Maximum longitude is invalid", "-180", "180")

    @field_validator("min_price", mode="before")
    @classmethod
    def validate_min_price(cls, v: Any) -> Optional[Decimal]:
        return cls._optional(v, "Minimum price must be greater than or equal to 0", "0")

    @field_validator("max_price", mode="before")
    @classmethod
    def validate_max_price(cls, v: Any) -> Optional[Decimal]:
        return cls._optional(v, "Maximum price must be greater than or equal to 0", "0")

    @staticmethod
    def _optional(
        value: Any,
        message: str,
        minimum: Optional[str] = None,
        maximum: Optional[str] = None
    ) -> Optional[Decimal]:
        if value is None or value == "":
            return None
        return ValidationUtils.validate_decimal(
            value,
            message,
            Decimal(minimum) if minimum is not None else None,
            Decimal(maximum) if maximum is not None else None
        )
