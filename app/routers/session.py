"""
Session API endpoints: log in, log out and restore the current session.
The session token travels in an HTTP-only cookie.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Response, status

from app.models.user import User
from app.services.auth import AuthService
from app.schemas.auth import LoginRequest, SessionResponse, MessageResponse
from app.schemas.user import SafeUser
from app.schemas.error import get_error_responses
from app.utils.auth import set_session_cookie, clear_session_cookie
from app.utils.dependencies import get_auth_service, get_optional_current_user


router = APIRouter(prefix="/session", tags=["Session"])


@router.post(
    "",
    response_model=SessionResponse,
    status_code=status.HTTP_200_OK,
    summary="Log in",
    description="Authenticate with a username or email and a password; sets the session cookie",
    responses=get_error_responses(400, 401)
)
async def login(
    login_data: LoginRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service)
) -> SessionResponse:
    """
    Authenticate user and start a session.

    Args:
        login_data: Credential (username or email) and password
        response: Outgoing response the cookie is attached to
        auth_service: Authentication service

    Returns:
        The safe user projection

    Raises:
        InvalidCredentialsError: If credentials are invalid
    """
    user, token = await auth_service.login(login_data.credential, login_data.password)
    set_session_cookie(response, token)

    return SessionResponse(user=SafeUser.model_validate(auth_service.safe_user(user)))


@router.delete(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Log out",
    description="Clear the session cookie"
)
async def logout(response: Response) -> MessageResponse:
    clear_session_cookie(response)
    return MessageResponse(message="success")


@router.get(
    "",
    response_model=SessionResponse,
    status_code=status.HTTP_200_OK,
    summary="Restore session",
    description="Get the logged in user, or null when there is no valid session"
)
async def restore_session(
    current_user: Optional[User] = Depends(get_optional_current_user)
) -> SessionResponse:
    """Return the current user's safe projection, or ``{"user": null}``."""
    if not current_user:
        return SessionResponse(user=None)

    return SessionResponse(user=SafeUser.model_validate(AuthService.safe_user(current_user)))
