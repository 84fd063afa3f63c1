"""
Image models for spots and reviews.
Images are stored as URLs; at most one spot image per spot may be the preview.
"""

from sqlalchemy import String, Boolean, ForeignKey, Index, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.models.spot import Spot
    from app.models.review import Review


class SpotImage(Base):
    """Image attached to a spot, optionally flagged as its preview."""

    __tablename__ = "spot_images"

    spot_id: Mapped[int] = mapped_column(
        ForeignKey("spots.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the spot this image belongs to"
    )

    url: Mapped[str] = mapped_column(
        String(2048),
        nullable=False
    )

    preview: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Whether this image is the spot's thumbnail"
    )

    spot: Mapped["Spot"] = relationship(
        "Spot",
        back_populates="images",
        lazy="noload"
    )

    def __repr__(self) -> str:
        return f"<SpotImage(id={self.id}, spot_id={self.spot_id}, preview={self.preview})>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "url": self.url,
            "preview": self.preview,
        }


class ReviewImage(Base):
    """Image attached to a review."""

    __tablename__ = "review_images"

    review_id: Mapped[int] = mapped_column(
        ForeignKey("reviews.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the review this image belongs to"
    )

    url: Mapped[str] = mapped_column(
        String(2048),
        nullable=False
    )

    review: Mapped["Review"] = relationship(
        "Review",
        back_populates="images",
        lazy="noload"
    )

    def __repr__(self) -> str:
        return f"<ReviewImage(id={self.id}, review_id={self.review_id})>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "url": self.url,
        }


# At most one preview image per spot, enforced by the database
single_preview_index = Index(
    'uq_spot_images_single_preview',
    SpotImage.spot_id,
    unique=True,
    postgresql_where=text("preview"),
    sqlite_where=text("preview = 1")
)
