"""
Review service for spot reviews and their images.
Handles authorship validation, the one-review-per-spot rule and the review image limit.
"""

from typing import List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from app.config import settings
from app.repositories.image import SpotImageRepository, ReviewImageRepository
from app.repositories.review import ReviewRepository
from app.repositories.spot import SpotRepository
from app.repositories.user import UserRepository
from app.models.image import ReviewImage
from app.models.review import Review
from app.models.user import User
from app.schemas.image import ReviewImageCreate, ReviewImageResponse
from app.schemas.review import (
    ReviewCreate,
    ReviewUpdate,
    SpotReviewItem,
    SpotReviewsResponse,
    CurrentUserReviewItem,
    CurrentUserReviewsResponse
)
from app.schemas.spot import SpotSummary
from app.schemas.user import UserProfile
from app.utils.exceptions import (
    NotFoundError,
    OwnershipError,
    ConflictError,
    ResourceLimitExceededError
)
from app.utils.formatting import preview_or_sentinel
import logging

logger = logging.getLogger(__name__)

DUPLICATE_REVIEW_MESSAGE = "User already has a review for this spot"


class ReviewService:
    """
    Review service for managing reviews scoped to their author.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.review_repo = ReviewRepository(db_session)
        self.review_image_repo = ReviewImageRepository(db_session)
        self.spot_repo = SpotRepository(db_session)
        self.spot_image_repo = SpotImageRepository(db_session)
        self.user_repo = UserRepository(db_session)

    async def list_spot_reviews(self, spot_id: int) -> SpotReviewsResponse:
        """
        List the reviews of a spot with author profiles and images.

        Raises:
            NotFoundError: If the spot doesn't exist; reviews are not queried
        """
        if not await self.spot_repo.exists(spot_id):
            raise NotFoundError("Spot")

        reviews = await self.review_repo.get_by_spot(spot_id)
        review_ids = [review.id for review in reviews]
        images = await self.review_image_repo.get_by_review_ids(review_ids)
        authors = await self.user_repo.get_many_by_ids([review.user_id for review in reviews])

        return SpotReviewsResponse(reviews=[
            SpotReviewItem(
                **review.to_dict(),
                user=UserProfile.model_validate(authors[review.user_id].to_profile_dict()),
                review_images=[ReviewImageResponse.model_validate(image) for image in images[review.id]]
            )
            for review in reviews
        ])

    async def list_user_reviews(self, current_user: User) -> CurrentUserReviewsResponse:
        """
        List the current user's reviews with the reviewed spot and its preview image.
        """
        reviews = await self.review_repo.get_by_user(current_user.id)
        review_ids = [review.id for review in reviews]
        spot_ids = list({review.spot_id for review in reviews})

        images = await self.review_image_repo.get_by_review_ids(review_ids)
        spots = await self.spot_repo.get_many_by_ids(spot_ids)
        previews = await self.spot_image_repo.get_preview_urls(spot_ids)
        profile = UserProfile.model_validate(current_user.to_profile_dict())

        items: List[CurrentUserReviewItem] = []
        for review in reviews:
            spot = spots.get(review.spot_id)
            spot_summary = None
            if spot:
                spot_data = spot.to_dict()
                for field in ("description", "created_at", "updated_at"):
                    spot_data.pop(field)
                spot_summary = SpotSummary(
                    **spot_data,
                    preview_image=preview_or_sentinel(previews.get(spot.id))
                )

            items.append(CurrentUserReviewItem(
                **review.to_dict(),
                user=profile,
                spot=spot_summary,
                review_images=[ReviewImageResponse.model_validate(image) for image in images[review.id]]
            ))

        return CurrentUserReviewsResponse(reviews=items)

    async def create_review(self, spot_id: int, review_data: ReviewCreate, current_user: User) -> Review:
        """
        Create the current user's review of a spot.

        Raises:
            NotFoundError: If the spot doesn't exist
            ConflictError: If the user already reviewed the spot
        """
        if not await self.spot_repo.exists(spot_id):
            raise NotFoundError("Spot")

        if await self.review_repo.get_by_user_and_spot(current_user.id, spot_id):
            raise ConflictError(DUPLICATE_REVIEW_MESSAGE)

        create_data = review_data.model_dump()
        create_data.update(user_id=current_user.id, spot_id=spot_id)

        try:
            review = await self.review_repo.create(create_data)
        except IntegrityError:
            # Unique (user_id, spot_id) constraint caught a concurrent duplicate
            raise ConflictError(DUPLICATE_REVIEW_MESSAGE)

        logger.info(f"Review {review.id} created by user {current_user.id} for spot {spot_id}")
        return review

    async def add_review_image(
        self,
        review_id: int,
        image_data: ReviewImageCreate,
        current_user: User
    ) -> ReviewImage:
        """
        Attach an image to one of the current user's reviews.

        The review row stays locked between the image count and the insert.

        Raises:
            NotFoundError: If the review doesn't exist
            OwnershipError: If the current user didn't write the review
            ResourceLimitExceededError: If the review already has the maximum number of images
        """
        await self._get_authored_review(review_id, current_user)
        await self.review_repo.lock(review_id)

        image_count = await self.review_image_repo.count_by_review_id(review_id)
        if image_count >= settings.review_image_limit:
            # The request session rolls back on the way out, releasing the lock
            raise ResourceLimitExceededError()

        image = await self.review_image_repo.create({"review_id": review_id, "url": image_data.url})
        logger.info(f"Image {image.id} added to review {review_id} by user {current_user.id}")
        return image

    async def update_review(self, review_id: int, review_data: ReviewUpdate, current_user: User) -> Review:
        """
        Replace a review's text and rating.

        Raises:
            NotFoundError: If the review doesn't exist
            OwnershipError: If the current user didn't write the review
        """
        review = await self._get_authored_review(review_id, current_user)

        updated_review = await self.review_repo.update(review, review_data.model_dump())
        logger.info(f"Review {review_id} updated by user {current_user.id}")
        return updated_review

    async def delete_review(self, review_id: int, current_user: User) -> None:
        """
        Hard-delete a review together with its images.

        Raises:
            NotFoundError: If the review doesn't exist
            OwnershipError: If the current user didn't write the review
        """
        await self._get_authored_review(review_id, current_user)

        if not await self.review_repo.delete(review_id):
            raise NotFoundError("Review")

        logger.info(f"Review {review_id} deleted by user {current_user.id}")

    async def _get_authored_review(self, review_id: int, current_user: User) -> Review:
        """Existence is checked before authorship."""
        review = await self.review_repo.get_by_id(review_id)
        if not review:
            raise NotFoundError("Review")

        if review.user_id != current_user.id:
            logger.warning(f"User {current_user.id} attempted to modify review {review_id}")
            raise OwnershipError()

        return review
