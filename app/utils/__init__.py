"""
Utility modules for the Spot Booking API.
"""

from .auth import (
    create_session_token,
    verify_session_token,
    set_session_cookie,
    clear_session_cookie,
    TokenPayload
)

from .exceptions import (
    APIException,
    ValidationError,
    NotFoundError,
    UnauthorizedError,
    ForbiddenError,
    ConflictError,
    PayloadTooLargeError,
    UnsupportedMediaTypeError,
    InvalidCredentialsError,
    TokenExpiredError,
    InvalidTokenError,
    OwnershipError,
    ResourceLimitExceededError,
    DuplicateResourceError
)

# Dependencies are imported directly where needed to avoid circular imports

__all__ = [
    # Auth utilities
    "create_session_token",
    "verify_session_token",
    "set_session_cookie",
    "clear_session_cookie",
    "TokenPayload",

    # Exceptions
    "APIException",
    "ValidationError",
    "NotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "ConflictError",
    "PayloadTooLargeError",
    "UnsupportedMediaTypeError",
    "InvalidCredentialsError",
    "TokenExpiredError",
    "InvalidTokenError",
    "OwnershipError",
    "ResourceLimitExceededError",
    "DuplicateResourceError",
]
