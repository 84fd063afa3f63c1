"""
Error envelope schema and the ``responses=`` blocks routers attach for OpenAPI docs.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Any, Dict


class ErrorResponse(BaseModel):
    """Body of every non-2xx response. ``errors`` only appears for validation failures."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., examples=["Spot couldn't be found"])
    code: str = Field(..., examples=["NOT_FOUND"])
    timestamp: str = Field(..., description="UTC, ISO 8601", examples=["2024-01-01T00:00:00.000000Z"])
    request_id: Optional[str] = Field(None, alias="requestId", examples=["abc12345"])
    errors: Optional[Dict[str, str]] = Field(
        None,
        description="Message per request field",
        examples=[{"city": "City is required"}]
    )


# status -> (description, message, code, errors)
_DOCUMENTED_ERRORS = {
    400: ("Validation failed", "Bad Request", "VALIDATION_ERROR", {"lat": "Latitude must be within -90 and 90"}),
    401: ("Not logged in", "Authentication required", "UNAUTHORIZED", None),
    403: ("Not the owner, or a limit was reached", "Forbidden", "FORBIDDEN", None),
    404: ("Record does not exist", "Spot couldn't be found", "NOT_FOUND", None),
    409: ("Duplicate record", "User already has a review for this spot", "CONFLICT", None),
    500: ("Unexpected failure", "An unexpected error occurred. Please try again later.", "INTERNAL_SERVER_ERROR", None),
}


def _response_doc(status_code: int) -> Dict[str, Any]:
    description, message, code, errors = _DOCUMENTED_ERRORS[status_code]
    example = {
        "message": message,
        "code": code,
        "timestamp": "2024-01-01T00:00:00.000000Z",
        "requestId": "abc12345",
    }
    if errors:
        example["errors"] = errors
    return {
        "description": description,
        "model": ErrorResponse,
        "content": {"application/json": {"example": example}},
    }


def get_error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """OpenAPI response docs for the given status codes; unknown codes are skipped."""
    return {code: _response_doc(code) for code in status_codes if code in _DOCUMENTED_ERRORS}


def get_crud_error_responses() -> Dict[int, Dict[str, Any]]:
    """Errors an owner-gated write can return."""
    return get_error_responses(400, 401, 403, 404, 500)
