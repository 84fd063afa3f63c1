"""
Pydantic schemas for session requests and responses.
Handles login validation and the restore-session payload.
"""

from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError
from typing import Any, Optional

from app.schemas.user import SafeUser
from app.utils.validators import ValidationUtils


class LoginRequest(BaseModel):
    """Login request schema. The credential is a username or an email."""

    credential: Optional[str] = Field(
        None,
        description="Username or email address",
        examples=["Demo-lition"],
        validate_default=True
    )
    password: Optional[str] = Field(
        None,
        description="Account password",
        examples=["password"],
        validate_default=True
    )

    @field_validator("credential", mode="before")
    @classmethod
    def validate_credential(cls, v: Any) -> str:
        return ValidationUtils.validate_string(v, "Email or username is required")

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, v: Any) -> str:
        # Passwords are compared verbatim, never stripped
        if not isinstance(v, str) or not v:
            raise PydanticCustomError("required", "Password is required")
        return v


class SessionResponse(BaseModel):
    """Session payload; ``user`` is null when nobody is logged in."""

    user: Optional[SafeUser] = Field(None, description="Logged in user")


class MessageResponse(BaseModel):
    """Plain acknowledgement body."""

    message: str = Field(..., examples=["success"])
