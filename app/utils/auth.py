"""
Authentication utilities for session token management.
Session tokens are JWTs bound to the safe user projection.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from fastapi import Response
from jose import JWTError, jwt
from app.config import settings


SESSION_TOKEN_TYPE = "session"


class TokenPayload:
    """Session token payload structure."""

    def __init__(self, user_id: int, email: str, username: str, exp: datetime):
        self.user_id = user_id
        self.email = email
        self.username = username
        self.exp = exp

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenPayload":
        """Create TokenPayload from a decoded token."""
        user = data["data"]
        return cls(
            user_id=int(data["sub"]),
            email=user["email"],
            username=user["username"],
            exp=datetime.fromtimestamp(data["exp"], tz=timezone.utc)
        )


def create_session_token(
    safe_user: Dict[str, Any],
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a signed session token carrying the safe user projection.

    Args:
        safe_user: Dictionary with at least id, email and username
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    now = datetime.now(timezone.utc)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(seconds=settings.session_expire_seconds)

    to_encode = {
        "sub": str(safe_user["id"]),
        "data": {
            "id": safe_user["id"],
            "email": safe_user["email"],
            "username": safe_user["username"],
        },
        "exp": expire,
        "iat": now,
        "type": SESSION_TOKEN_TYPE
    }

    return jwt.encode(
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm
    )


def verify_session_token(token: str) -> TokenPayload:
    """
    Verify and decode a session token.

    Args:
        token: JWT token string

    Returns:
        TokenPayload for a valid token

    Raises:
        ExpiredSignatureError: If the token has expired
        JWTError: If the token is otherwise invalid
    """
    payload = jwt.decode(
        token,
        settings.jwt_secret_key,
        algorithms=[settings.jwt_algorithm]
    )

    if payload.get("type") != SESSION_TOKEN_TYPE:
        raise JWTError(f"Invalid token type. Expected {SESSION_TOKEN_TYPE}")

    if not payload.get("sub") or not isinstance(payload.get("data"), dict):
        raise JWTError("Invalid token payload")

    try:
        return TokenPayload.from_dict(payload)
    except (KeyError, TypeError, ValueError) as e:
        raise JWTError(f"Token validation error: {str(e)}")


def set_session_cookie(response: Response, token: str) -> None:
    """Attach the session token as an HTTP-only cookie."""
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_expire_seconds,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.session_cookie_samesite
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.session_cookie_samesite
    )
