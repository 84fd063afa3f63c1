"""
Exceptions raised by services and routers.
Each maps to one HTTP status and error code in the error envelope.
"""

from typing import Any, Dict, Optional
from fastapi import HTTPException, status


class APIException(HTTPException):
    """HTTPException carrying an error code and optional field-keyed messages."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None,
        field_errors: Optional[Dict[str, str]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code
        self.field_errors = field_errors or {}


class _StatusError(APIException):
    # Subclasses pick the status, code and default message
    http_status = status.HTTP_400_BAD_REQUEST
    code = "API_ERROR"
    default_detail = "Bad Request"

    def __init__(self, detail: Optional[str] = None, field_errors: Optional[Dict[str, str]] = None):
        super().__init__(
            status_code=self.http_status,
            detail=detail or self.default_detail,
            error_code=self.code,
            field_errors=field_errors
        )


class ValidationError(_StatusError):
    """400 with a field-keyed error map."""

    code = "VALIDATION_ERROR"


class NotFoundError(_StatusError):
    """404 for a named resource, e.g. ``NotFoundError("Spot")``."""

    http_status = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"

    def __init__(self, resource: str):
        super().__init__(f"{resource} couldn't be found")


class UnauthorizedError(_StatusError):
    http_status = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"
    default_detail = "Authentication required"


class ForbiddenError(_StatusError):
    http_status = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"
    default_detail = "Forbidden"


class ConflictError(_StatusError):
    http_status = status.HTTP_409_CONFLICT
    code = "CONFLICT"
    default_detail = "Conflict"


class PayloadTooLargeError(_StatusError):
    http_status = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    code = "PAYLOAD_TOO_LARGE"
    default_detail = "Request body too large"


class UnsupportedMediaTypeError(_StatusError):
    http_status = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
    code = "UNSUPPORTED_MEDIA_TYPE"
    default_detail = "Unsupported content type"


# Session
class InvalidCredentialsError(UnauthorizedError):
    default_detail = "Invalid credentials"


class TokenExpiredError(UnauthorizedError):
    default_detail = "Session has expired"


class InvalidTokenError(UnauthorizedError):
    default_detail = "Invalid session token"


# Ownership and limits
class OwnershipError(ForbiddenError):
    """The requester does not own the record being changed."""


class ResourceLimitExceededError(ForbiddenError):
    default_detail = "Maximum number of images for this resource was reached"


class DuplicateResourceError(ConflictError):
    """409 that also reports the offending field under ``errors``."""

    def __init__(self, detail: str, field: Optional[str] = None):
        super().__init__(detail, field_errors={field: detail} if field else None)
