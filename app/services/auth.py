"""
Authentication service for login, sign up and session restoration.
Handles credential checks, session token issuance and token-to-user resolution.
"""

from typing import Tuple, Dict, Any
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from app.repositories.user import UserRepository
from app.models.user import User
from app.schemas.user import SignupRequest
from app.utils.auth import create_session_token, verify_session_token
from app.utils.exceptions import (
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    UnauthorizedError,
    ConflictError,
    DuplicateResourceError
)
from jose import ExpiredSignatureError, JWTError
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service for managing user sessions.
    Session tokens are signed JWTs bound to the safe user projection.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)

    @staticmethod
    def safe_user(user: User) -> Dict[str, Any]:
        """The user fields that may leave the authentication layer."""
        return user.to_dict()

    async def authenticate_user(self, credential: str, password: str) -> User:
        """
        Authenticate a user by username or email and password.

        Args:
            credential: Username or email address
            password: Plain text password

        Returns:
            Authenticated User object

        Raises:
            InvalidCredentialsError: If no user matches or the password is wrong
        """
        user = await self.user_repo.get_by_credential(credential)

        if not user or not user.verify_password(password):
            # Same error for unknown users and wrong passwords
            logger.warning(f"Failed login attempt for credential: {credential}")
            raise InvalidCredentialsError()

        logger.info(f"User authenticated successfully: {user.username}")
        return user

    def create_token(self, user: User) -> str:
        """Sign a session token for the user."""
        return create_session_token(self.safe_user(user))

    async def login(self, credential: str, password: str) -> Tuple[User, str]:
        """
        Authenticate user and issue a session token.

        Returns:
            Tuple of (user, session_token)
        """
        user = await self.authenticate_user(credential, password)
        return user, self.create_token(user)

    async def signup(self, signup_data: SignupRequest) -> Tuple[User, str]:
        """
        Create an account and log it in.

        Raises:
            DuplicateResourceError: If the email or username is taken
        """
        if await self.user_repo.get_by_email(signup_data.email):
            raise DuplicateResourceError("User with that email already exists", field="email")

        if await self.user_repo.get_by_username(signup_data.username):
            raise DuplicateResourceError("User with that username already exists", field="username")

        try:
            user = await self.user_repo.create_user(signup_data.model_dump())
        except IntegrityError:
            # Lost a race against a concurrent sign up with the same identity
            raise ConflictError("User already exists")

        return user, self.create_token(user)

    async def get_current_user(self, token: str) -> User:
        """
        Resolve the user behind a session token.

        Raises:
            TokenExpiredError: If the token has expired
            InvalidTokenError: If the token is malformed or forged
            UnauthorizedError: If the user no longer exists
        """
        try:
            payload = verify_session_token(token)
        except ExpiredSignatureError:
            raise TokenExpiredError()
        except JWTError as e:
            logger.debug(f"Rejected session token: {e}")
            raise InvalidTokenError()

        user = await self.user_repo.get_by_id(payload.user_id)
        if not user:
            raise UnauthorizedError()

        return user
