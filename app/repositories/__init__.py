"""
Repository layer for data access operations.
Provides explicit query methods so shaping logic never walks ORM associations.
"""

from app.repositories.base import BaseRepository
from app.repositories.image import SpotImageRepository, ReviewImageRepository
from app.repositories.review import ReviewRepository
from app.repositories.spot import SpotRepository, SpotSearchFilters
from app.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "SpotImageRepository",
    "ReviewImageRepository",
    "ReviewRepository",
    "SpotRepository",
    "SpotSearchFilters",
    "UserRepository"
]
