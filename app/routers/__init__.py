"""
API route handlers for the Spot Booking API.
Provides organized routing for different API endpoints.
"""

from .session import router as session_router
from .users import router as users_router
from .spots import router as spots_router
from .reviews import router as reviews_router

__all__ = ["session_router", "users_router", "spots_router", "reviews_router"]
