"""
Pydantic schemas for request/response validation.
"""

# Session schemas
from .auth import (
    LoginRequest,
    SessionResponse,
    MessageResponse
)

# User schemas
from .user import (
    UserProfile,
    SafeUser,
    SignupRequest
)

# Image schemas
from .image import (
    SpotImageCreate,
    ReviewImageCreate,
    SpotImageResponse,
    ReviewImageResponse
)

# Spot schemas
from .spot import (
    SpotCreate,
    SpotUpdate,
    SpotResponse,
    SpotListItem,
    SpotListResponse,
    CurrentUserSpotsResponse,
    SpotDetailResponse,
    SpotSummary,
    SpotSearchParams
)

# Review schemas
from .review import (
    ReviewCreate,
    ReviewUpdate,
    ReviewResponse,
    SpotReviewItem,
    CurrentUserReviewItem,
    SpotReviewsResponse,
    CurrentUserReviewsResponse
)

__all__ = [
    # Session
    "LoginRequest",
    "SessionResponse",
    "MessageResponse",

    # User
    "UserProfile",
    "SafeUser",
    "SignupRequest",

    # Image
    "SpotImageCreate",
    "ReviewImageCreate",
    "SpotImageResponse",
    "ReviewImageResponse",

    # Spot
    "SpotCreate",
    "SpotUpdate",
    "SpotResponse",
    "SpotListItem",
    "SpotListResponse",
    "CurrentUserSpotsResponse",
    "SpotDetailResponse",
    "SpotSummary",
    "SpotSearchParams",

    # Review
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewResponse",
    "SpotReviewItem",
    "CurrentUserReviewItem",
    "SpotReviewsResponse",
    "CurrentUserReviewsResponse"
]
