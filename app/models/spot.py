"""
Spot model for bookable listings.
Handles location, pricing and ownership; images and reviews hang off a spot.
"""

from sqlalchemy import String, Text, Numeric, Index, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
from decimal import Decimal
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.image import SpotImage
    from app.models.review import Review


class Spot(Base):
    """
    Spot model for a listing owned by exactly one user.
    Derived fields (average rating, preview image) are computed at read time.
    """

    __tablename__ = "spots"

    owner_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the user who owns this spot"
    )

    # Address information
    address: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Street address"
    )

    city: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        index=True
    )

    state: Mapped[str] = mapped_column(
        String(100),
        nullable=False
    )

    country: Mapped[str] = mapped_column(
        String(100),
        nullable=False
    )

    # Coordinates
    lat: Mapped[Decimal] = mapped_column(
        Numeric(precision=10, scale=7),
        nullable=False,
        comment="Latitude coordinate"
    )

    lng: Mapped[Decimal] = mapped_column(
        Numeric(precision=10, scale=7),
        nullable=False,
        comment="Longitude coordinate"
    )

    # Listing details
    name: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Listing name"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False
    )

    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=10, scale=2),
        nullable=False,
        index=True,
        comment="Price per night"
    )

    # Relationships exist for cascading deletes only
    owner: Mapped["User"] = relationship(
        "User",
        back_populates="spots",
        lazy="noload"
    )

    images: Mapped[List["SpotImage"]] = relationship(
        "SpotImage",
        back_populates="spot",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="noload"
    )

    reviews: Mapped[List["Review"]] = relationship(
        "Review",
        back_populates="spot",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="noload"
    )

    def __repr__(self) -> str:
        """String representation of the spot."""
        return f"<Spot(id={self.id}, name={self.name[:30]}, price={self.price})>"

    def validate_coordinates(self) -> None:
        """
        Validate latitude and longitude coordinates.

        Raises:
            ValueError: If coordinates are invalid
        """
        if not (-90 <= self.lat <= 90):
            raise ValueError("Latitude must be within -90 and 90")

        if not (-180 <= self.lng <= 180):
            raise ValueError("Longitude must be within -180 and 180")

    def to_dict(self) -> dict:
        """
        Convert spot to dictionary.

        Coordinates stay numeric here; output formatting happens in the schemas.
        """
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "country": self.country,
            "lat": self.lat,
            "lng": self.lng,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


# Composite index for the price/coordinate filters on the listing endpoint
spot_search_index = Index(
    'idx_spots_price_lat_lng',
    Spot.price,
    Spot.lat,
    Spot.lng
)
