"""
Database models for the Spot Booking API.
Includes User, Spot, Review and their image models.
"""

from app.models.user import User
from app.models.spot import Spot
from app.models.review import Review
from app.models.image import SpotImage, ReviewImage

# Export all models for easy importing
__all__ = [
    "User",
    "Spot",
    "Review",
    "SpotImage",
    "ReviewImage",
]
