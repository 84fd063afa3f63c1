"""
Service layer for business logic implementation.
Contains services for sessions, spots, reviews and error handling.
"""

from .auth import AuthService
from .spot import SpotService
from .review import ReviewService
from .error_handler import ErrorHandlerService

__all__ = [
    "AuthService",
    "SpotService",
    "ReviewService",
    "ErrorHandlerService"
]
