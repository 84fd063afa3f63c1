"""
Middleware package for the Spot Booking API.
"""

from .validation import ValidationMiddleware

__all__ = ["ValidationMiddleware"]
