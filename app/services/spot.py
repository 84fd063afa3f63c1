"""
Spot service for listing management with read-time aggregation.
Handles CRUD operations, ownership validation, listing filters and the
derived listing fields (average rating, preview image).
"""

from typing import List, Dict
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from app.repositories.image import SpotImageRepository
from app.repositories.review import ReviewRepository
from app.repositories.spot import SpotRepository, SpotSearchFilters
from app.repositories.user import UserRepository
from app.models.image import SpotImage
from app.models.spot import Spot
from app.models.user import User
from app.schemas.image import SpotImageCreate, SpotImageResponse
from app.schemas.spot import (
    SpotCreate,
    SpotUpdate,
    SpotSearchParams,
    SpotListItem,
    SpotListResponse,
    CurrentUserSpotsResponse,
    SpotDetailResponse
)
from app.schemas.user import UserProfile
from app.utils.exceptions import NotFoundError, OwnershipError, ValidationError, ConflictError
from app.utils.formatting import average_rating, preview_or_sentinel, select_preview_url
from app.utils.validators import RangeValidator
import logging

logger = logging.getLogger(__name__)


class SpotService:
    """
    Spot service for managing listings.
    Aggregates come from explicit repository queries, never from ORM associations.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.spot_repo = SpotRepository(db_session)
        self.image_repo = SpotImageRepository(db_session)
        self.review_repo = ReviewRepository(db_session)
        self.user_repo = UserRepository(db_session)

    async def list_spots(self, params: SpotSearchParams) -> SpotListResponse:
        """
        List spots matching the range filters, one page at a time.

        Args:
            params: Parsed query parameters

        Returns:
            Shaped page of spots with pagination metadata

        Raises:
            ValidationError: If a filter's minimum exceeds its maximum
        """
        self._validate_search_ranges(params)
        page, size = params.page, params.size

        filters = SpotSearchFilters(
            min_lat=params.min_lat,
            max_lat=params.max_lat,
            min_lng=params.min_lng,
            max_lng=params.max_lng,
            min_price=params.min_price,
            max_price=params.max_price
        )

        spots, total = await self.spot_repo.search_spots(filters, skip=(page - 1) * size, limit=size)

        return SpotListResponse(
            spots=await self._shape_listing(spots),
            page=page,
            size=size,
            total=total
        )

    async def list_user_spots(self, current_user: User) -> CurrentUserSpotsResponse:
        """List every spot owned by the current user."""
        spots = await self.spot_repo.get_by_owner(current_user.id)
        return CurrentUserSpotsResponse(spots=await self._shape_listing(spots))

    async def get_spot_detail(self, spot_id: int) -> SpotDetailResponse:
        """
        Get one spot with its review statistics, images and owner profile.

        Raises:
            NotFoundError: If the spot doesn't exist
        """
        spot = await self.get_spot(spot_id)

        stars = (await self.review_repo.get_star_values([spot.id]))[spot.id]
        images = (await self.image_repo.get_by_spot_ids([spot.id]))[spot.id]
        owner = await self.user_repo.get_by_id(spot.owner_id)

        return SpotDetailResponse(
            **spot.to_dict(),
            num_reviews=len(stars),
            avg_star_rating=average_rating(stars),
            preview_image=select_preview_url(images),
            spot_images=[SpotImageResponse.model_validate(image) for image in images],
            owner=UserProfile.model_validate(owner.to_profile_dict())
        )

    async def get_spot(self, spot_id: int) -> Spot:
        """
        Get a spot or fail with 404.

        Raises:
            NotFoundError: If the spot doesn't exist
        """
        spot = await self.spot_repo.get_by_id(spot_id)
        if not spot:
            raise NotFoundError("Spot")
        return spot

    async def create_spot(self, spot_data: SpotCreate, current_user: User) -> Spot:
        """
        Create a spot owned by the current user.

        Args:
            spot_data: Validated spot fields
            current_user: Owner of the new spot

        Returns:
            Created spot instance
        """
        create_data = spot_data.model_dump()
        create_data["owner_id"] = current_user.id

        spot = await self.spot_repo.create(create_data)
        logger.info(f"Spot created by user {current_user.id}: {spot.id}")
        return spot

    async def update_spot(self, spot_id: int, spot_data: SpotUpdate, current_user: User) -> Spot:
        """
        Replace a spot's fields.

        Raises:
            NotFoundError: If the spot doesn't exist
            OwnershipError: If the current user doesn't own the spot
        """
        spot = await self._get_owned_spot(spot_id, current_user)

        updated_spot = await self.spot_repo.update(spot, spot_data.model_dump())
        logger.info(f"Spot updated by user {current_user.id}: {spot_id}")
        return updated_spot

    async def delete_spot(self, spot_id: int, current_user: User) -> None:
        """
        Hard-delete a spot together with its images and reviews.

        Raises:
            NotFoundError: If the spot doesn't exist
            OwnershipError: If the current user doesn't own the spot
        """
        await self._get_owned_spot(spot_id, current_user)

        if not await self.spot_repo.delete(spot_id):
            raise NotFoundError("Spot")

        logger.info(f"Spot deleted by user {current_user.id}: {spot_id}")

    async def add_spot_image(
        self,
        spot_id: int,
        image_data: SpotImageCreate,
        current_user: User
    ) -> SpotImage:
        """
        Attach an image to a spot owned by the current user.

        Raises:
            NotFoundError: If the spot doesn't exist
            OwnershipError: If the current user doesn't own the spot
            ConflictError: If a concurrent request set another preview first
        """
        await self._get_owned_spot(spot_id, current_user)

        try:
            image = await self.image_repo.add_image(spot_id, image_data.url, image_data.preview)
        except IntegrityError:
            raise ConflictError("Spot already has a preview image")

        logger.info(f"Image {image.id} added to spot {spot_id} by user {current_user.id}")
        return image

    async def _get_owned_spot(self, spot_id: int, current_user: User) -> Spot:
        """Existence is checked before ownership."""
        spot = await self.get_spot(spot_id)
        if not self._can_manage_spot(spot, current_user):
            logger.warning(f"User {current_user.id} attempted to modify spot {spot_id}")
            raise OwnershipError()
        return spot

    def _can_manage_spot(self, spot: Spot, user: User) -> bool:
        return spot.owner_id == user.id

    async def _shape_listing(self, spots: List[Spot]) -> List[SpotListItem]:
        """Attach average rating and preview image to each spot."""
        spot_ids = [spot.id for spot in spots]
        stars_by_spot: Dict[int, List[float]] = await self.review_repo.get_star_values(spot_ids)
        previews: Dict[int, str] = await self.image_repo.get_preview_urls(spot_ids)

        return [
            SpotListItem(
                **spot.to_dict(),
                avg_rating=average_rating(stars_by_spot[spot.id]),
                preview_image=preview_or_sentinel(previews.get(spot.id))
            )
            for spot in spots
        ]

    def _validate_search_ranges(self, params: SpotSearchParams) -> None:
        errors = RangeValidator.check_pairs([
            ("minLat", params.min_lat, "maxLat", params.max_lat,
             "Minimum latitude cannot be greater than maximum latitude"),
            ("minLng", params.min_lng, "maxLng", params.max_lng,
             "Minimum longitude cannot be greater than maximum longitude"),
            ("minPrice", params.min_price, "maxPrice", params.max_price,
             "Minimum price cannot be greater than maximum price"),
        ])
        if errors:
            raise ValidationError(field_errors=errors)
