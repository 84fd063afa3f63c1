"""
Review model for star ratings left on spots.
A user may review a given spot at most once.
"""

from sqlalchemy import Float, Text, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.spot import Spot
    from app.models.image import ReviewImage


class Review(Base):
    """Review authored by one user about one spot."""

    __tablename__ = "reviews"

    __table_args__ = (
        UniqueConstraint("user_id", "spot_id", name="uq_reviews_user_spot"),
        CheckConstraint("stars >= 1 AND stars <= 5", name="ck_reviews_stars_range"),
    )

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the review author"
    )

    spot_id: Mapped[int] = mapped_column(
        ForeignKey("spots.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the reviewed spot"
    )

    review: Mapped[str] = mapped_column(
        Text,
        nullable=False
    )

    stars: Mapped[float] = mapped_column(
        Float,
        nullable=False
    )

    user: Mapped["User"] = relationship(
        "User",
        back_populates="reviews",
        lazy="noload"
    )

    spot: Mapped["Spot"] = relationship(
        "Spot",
        back_populates="reviews",
        lazy="noload"
    )

    images: Mapped[List["ReviewImage"]] = relationship(
        "ReviewImage",
        back_populates="review",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="noload"
    )

    def __repr__(self) -> str:
        return f"<Review(id={self.id}, user_id={self.user_id}, spot_id={self.spot_id}, stars={self.stars})>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "spot_id": self.spot_id,
            "review": self.review,
            "stars": self.stars,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
