"""
Review repository for spot reviews and the star values behind average ratings.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_
from app.repositories.base import BaseRepository
from app.models.review import Review
from typing import Optional, List, Dict
import logging

logger = logging.getLogger(__name__)


class ReviewRepository(BaseRepository[Review]):
    """Repository for reviews."""

    def __init__(self, db: AsyncSession):
        super().__init__(Review, db)

    async def get_by_spot(self, spot_id: int) -> List[Review]:
        """Get all reviews for a spot, oldest first."""
        query = select(Review).where(Review.spot_id == spot_id).order_by(Review.id.asc())
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_user(self, user_id: int) -> List[Review]:
        """Get all reviews written by a user, oldest first."""
        query = select(Review).where(Review.user_id == user_id).order_by(Review.id.asc())
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_user_and_spot(self, user_id: int, spot_id: int) -> Optional[Review]:
        """Get the review a user left on a spot, if any."""
        query = select(Review).where(
            and_(
                Review.user_id == user_id,
                Review.spot_id == spot_id
            )
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_star_values(self, spot_ids: List[int]) -> Dict[int, List[float]]:
        """
        Collect review star values per spot.

        Args:
            spot_ids: Spots to collect ratings for

        Returns:
            Mapping of spot id to its star values; spots without reviews map to []
        """
        stars: Dict[int, List[float]] = {spot_id: [] for spot_id in spot_ids}
        if not spot_ids:
            return stars

        query = select(Review.spot_id, Review.stars).where(Review.spot_id.in_(spot_ids))
        result = await self.db.execute(query)
        for spot_id, value in result.all():
            stars[spot_id].append(value)

        return stars

    async def lock(self, review_id: int) -> Optional[Review]:
        """
        Re-read a review with a row lock held until the next commit.

        SQLite ignores FOR UPDATE; its writes are already serialized.
        """
        query = select(Review).where(Review.id == review_id).with_for_update()
        result = await self.db.execute(query)
        return result.scalar_one_or_none()
