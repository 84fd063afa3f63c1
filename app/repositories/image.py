"""
Repositories for spot and review images.
"""

from typing import List, Dict
from sqlalchemy import select, update, func, and_
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.image import SpotImage, ReviewImage
from app.repositories.base import BaseRepository
import logging

logger = logging.getLogger(__name__)


class SpotImageRepository(BaseRepository[SpotImage]):
    """Repository for SpotImage database operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(SpotImage, db)

    async def get_by_spot_ids(self, spot_ids: List[int]) -> Dict[int, List[SpotImage]]:
        """
        Get images for several spots at once.

        Returns:
            Mapping of spot id to its images in insertion order
        """
        images: Dict[int, List[SpotImage]] = {spot_id: [] for spot_id in spot_ids}
        if not spot_ids:
            return images

        query = (
            select(SpotImage)
            .where(SpotImage.spot_id.in_(spot_ids))
            .order_by(SpotImage.id.asc())
        )
        result = await self.db.execute(query)
        for image in result.scalars().all():
            images[image.spot_id].append(image)

        return images

    async def get_preview_urls(self, spot_ids: List[int]) -> Dict[int, str]:
        """
        Get the preview image URL of each spot that has one.

        Args:
            spot_ids: Spots to look up

        Returns:
            Mapping of spot id to preview URL; spots without a preview are absent
        """
        if not spot_ids:
            return {}

        query = select(SpotImage.spot_id, SpotImage.url).where(
            and_(
                SpotImage.spot_id.in_(spot_ids),
                SpotImage.preview.is_(True)
            )
        )
        result = await self.db.execute(query)
        return {spot_id: url for spot_id, url in result.all()}

    async def add_image(self, spot_id: int, url: str, preview: bool) -> SpotImage:
        """
        Attach an image to a spot.
        A new preview image demotes the previous one in the same transaction.

        Args:
            spot_id: ID of the spot
            url: Image URL
            preview: Whether the image becomes the spot's preview

        Returns:
            Created spot image
        """
        try:
            if preview:
                await self.db.execute(
                    update(SpotImage)
                    .where(
                        and_(
                            SpotImage.spot_id == spot_id,
                            SpotImage.preview.is_(True)
                        )
                    )
                    .values(preview=False)
                )

            image = SpotImage(spot_id=spot_id, url=url, preview=preview)
            self.db.add(image)
            await self.db.commit()
            await self.db.refresh(image)
            logger.debug(f"Added image {image.id} to spot {spot_id} (preview={preview})")
            return image
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to add image to spot {spot_id}: {e}")
            raise


class ReviewImageRepository(BaseRepository[ReviewImage]):
    """Repository for ReviewImage database operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(ReviewImage, db)

    async def get_by_review_ids(self, review_ids: List[int]) -> Dict[int, List[ReviewImage]]:
        """Get images for several reviews at once."""
        images: Dict[int, List[ReviewImage]] = {review_id: [] for review_id in review_ids}
        if not review_ids:
            return images

        query = (
            select(ReviewImage)
            .where(ReviewImage.review_id.in_(review_ids))
            .order_by(ReviewImage.id.asc())
        )
        result = await self.db.execute(query)
        for image in result.scalars().all():
            images[image.review_id].append(image)

        return images

    async def count_by_review_id(self, review_id: int) -> int:
        """Count images attached to a review."""
        query = select(func.count(ReviewImage.id)).where(ReviewImage.review_id == review_id)
        result = await self.db.execute(query)
        return result.scalar() or 0
