"""
User repository for authentication and account operations.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from app.repositories.base import BaseRepository
from app.models.user import User
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """
    Repository for user accounts.
    Handles credential lookups and secure user creation.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """
        Create a new user with password hashing.

        Args:
            user_data: Dictionary containing user information
                      Must include: first_name, last_name, email, username, password

        Returns:
            Created user instance
        """
        data = dict(user_data)
        password = data.pop("password")

        create_data = {
            **data,
            "email": data["email"].lower().strip(),
            "hashed_password": User.hash_password(password),
        }

        created_user = await self.create(create_data)
        logger.info(f"Created user: {created_user.username} (ID: {created_user.id})")
        return created_user

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address (case-insensitive)."""
        normalized_email = email.lower().strip()
        result = await self.db.execute(select(User).where(User.email == normalized_email))
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username."""
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def get_by_credential(self, credential: str) -> Optional[User]:
        """
        Get user by username or email.

        Args:
            credential: Either the username or the email address

        Returns:
            User instance if found, None otherwise
        """
        credential = credential.strip()
        query = select(User).where(
            or_(
                User.username == credential,
                User.email == credential.lower()
            )
        )
        result = await self.db.execute(query)
        user = result.scalars().first()

        if user:
            logger.debug(f"Retrieved user by credential: {credential}")
        else:
            logger.debug(f"User with credential {credential} not found")

        return user
