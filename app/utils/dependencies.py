"""
Request dependencies: services bound to the request session, and the logged-in user.
"""

from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from app.config import settings
from app.database import get_db
from app.models.user import User
from app.services.auth import AuthService
from app.services.review import ReviewService
from app.services.spot import SpotService
from app.utils.exceptions import UnauthorizedError


# HTTP Bearer token security scheme; the session cookie takes precedence
security = HTTPBearer(auto_error=False)


async def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


async def get_spot_service(db: AsyncSession = Depends(get_db)) -> SpotService:
    return SpotService(db)


async def get_review_service(db: AsyncSession = Depends(get_db)) -> ReviewService:
    return ReviewService(db)


def get_session_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[str]:
    """
    Extract the session token from the cookie, falling back to a Bearer header.

    Returns:
        Raw token string, or None if the request carries neither
    """
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        return token
    if credentials:
        return credentials.credentials
    return None


async def get_current_user(
    token: Optional[str] = Depends(get_session_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> User:
    """User behind the session token; 401 when there is none or it is invalid."""
    if not token:
        raise UnauthorizedError()

    try:
        return await auth_service.get_current_user(token)
    except UnauthorizedError:
        # Expired and forged tokens get the same answer as a missing one
        raise UnauthorizedError()


async def get_optional_current_user(
    token: Optional[str] = Depends(get_session_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[User]:
    """Same as get_current_user, but None instead of 401."""
    if not token:
        return None

    try:
        return await auth_service.get_current_user(token)
    except UnauthorizedError:
        return None
