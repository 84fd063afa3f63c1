"""
User model with authentication helpers.
Handles accounts for spot owners and reviewers.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
from passlib.context import CryptContext
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from app.models.spot import Spot
    from app.models.review import Review

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class User(Base):
    """
    User model for authentication and ownership.
    A user owns spots and authors reviews.
    """

    __tablename__ = "users"

    first_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="User's first name"
    )

    last_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="User's last name"
    )

    username: Mapped[str] = mapped_column(
        String(30),
        unique=True,
        nullable=False,
        index=True,
        comment="Unique login handle"
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="User email address - must be unique and valid"
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    # Relationships exist for cascading deletes only; listings are shaped from explicit queries
    spots: Mapped[List["Spot"]] = relationship(
        "Spot",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="noload"
    )

    reviews: Mapped[List["Review"]] = relationship(
        "Review",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="noload"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username})>"

    @classmethod
    def hash_password(cls, password: str) -> str:
        """bcrypt hash for storage; empty passwords are rejected."""
        if not password:
            raise ValueError("Password is required")

        return pwd_context.hash(password)

    def verify_password(self, password: str) -> bool:
        return pwd_context.verify(password, self.hashed_password)

    def to_dict(self) -> dict:
        """Projection exposed outside authentication internals."""
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "username": self.username,
        }

    def to_profile_dict(self) -> dict:
        """Reduced profile attached to spots and reviews."""
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
        }
