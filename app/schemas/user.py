"""
Pydantic schemas for user requests and responses.
Handles sign up validation and the public user projections.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError
from typing import Any, Optional

from app.utils.validators import ValidationUtils


class UserProfile(BaseModel):
    """Reduced profile shown next to spots and reviews."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: int = Field(..., description="User identifier", examples=[1])
    first_name: str = Field(..., alias="firstName", examples=["Demo"])
    last_name: str = Field(..., alias="lastName", examples=["User"])


class SafeUser(UserProfile):
    """User projection exposed by the session endpoints (no password hash)."""

    email: str = Field(..., description="User's email address", examples=["demo@user.io"])
    username: str = Field(..., description="User's username", examples=["Demo-lition"])


class SignupRequest(BaseModel):
    """Schema for creating a new user account."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "firstName": "Demo",
                "lastName": "User",
                "email": "demo@user.io",
                "username": "Demo-lition",
                "password": "password"
            }
        }
    )

    first_name: Optional[str] = Field(None, alias="firstName", validate_default=True)
    last_name: Optional[str] = Field(None, alias="lastName", validate_default=True)
    email: Optional[str] = Field(None, validate_default=True)
    username: Optional[str] = Field(None, validate_default=True)
    password: Optional[str] = Field(None, validate_default=True)

    @model_validator(mode="before")
    @classmethod
    def require_names(cls, data: Any) -> Any:
        # Missing names are validated as input so errors are keyed by the alias
        if isinstance(data, dict):
            data = dict(data)
            for alias, name in (("firstName", "first_name"), ("lastName", "last_name")):
                if alias not in data and name not in data:
                    data[alias] = None
        return data

    @field_validator("first_name", mode="before")
    @classmethod
    def validate_first_name(cls, v: Any) -> str:
        return ValidationUtils.validate_string(
            v,
            "First Name is required",
            max_length=100,
            max_length_message="First Name must be 100 characters or less"
        )

    @field_validator("last_name", mode="before")
    @classmethod
    def validate_last_name(cls, v: Any) -> str:
        return ValidationUtils.validate_string(
            v,
            "Last Name is required",
            max_length=100,
            max_length_message="Last Name must be 100 characters or less"
        )

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v: Any) -> str:
        """Validate and normalize the email address."""
        return ValidationUtils.validate_email_address(v, "Invalid email")

    @field_validator("username", mode="before")
    @classmethod
    def validate_username(cls, v: Any) -> str:
        """Usernames need 4 to 30 characters and must not be an email address."""
        username = ValidationUtils.validate_string(v, "Username is required")
        if len(username) < 4:
            raise PydanticCustomError("too_short", "Please provide a username with at least 4 characters.")
        if len(username) > 30:
            raise PydanticCustomError("too_long", "Username must be 30 characters or less")
        if ValidationUtils.looks_like_email(username):
            raise PydanticCustomError("username_email", "Username cannot be an email.")
        return username

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, v: Any) -> str:
        if not isinstance(v, str) or len(v) < 6:
            raise PydanticCustomError("too_short", "Password must be 6 characters or more.")
        return v
