"""
User API endpoints. Signing up creates the account and logs it in.
"""

from fastapi import APIRouter, Depends, Response, status

from app.services.auth import AuthService
from app.schemas.auth import SessionResponse
from app.schemas.user import SafeUser, SignupRequest
from app.schemas.error import get_error_responses
from app.utils.auth import set_session_cookie
from app.utils.dependencies import get_auth_service


router = APIRouter(prefix="/users", tags=["Users"])


@router.post(
    "",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Sign up",
    description="Create an account and start a session for it",
    responses=get_error_responses(400, 409)
)
async def signup(
    signup_data: SignupRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service)
) -> SessionResponse:
    """
    Create a user account.

    Raises:
        DuplicateResourceError: If the email or username is already taken
    """
    user, token = await auth_service.signup(signup_data)
    set_session_cookie(response, token)

    return SessionResponse(user=SafeUser.model_validate(auth_service.safe_user(user)))
