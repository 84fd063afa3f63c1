"""
Spot API endpoints for listings, spot management, spot images and spot reviews.
Write operations require a session and, for existing spots, ownership.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status

from app.models.user import User
from app.services.review import ReviewService
from app.services.spot import SpotService
from app.schemas.auth import MessageResponse
from app.schemas.image import SpotImageCreate, SpotImageResponse
from app.schemas.review import ReviewCreate, ReviewResponse, SpotReviewsResponse
from app.schemas.spot import (
    SpotCreate,
    SpotUpdate,
    SpotResponse,
    SpotListResponse,
    CurrentUserSpotsResponse,
    SpotDetailResponse,
    SpotSearchParams
)
from app.schemas.error import get_error_responses, get_crud_error_responses
from app.utils.dependencies import get_current_user, get_spot_service, get_review_service


router = APIRouter(prefix="/spots", tags=["Spots"])


def get_spot_search_params(
    page: Optional[str] = Query(None, description="Page number, clamped to 1-10"),
    size: Optional[str] = Query(None, description="Page size, clamped to 1-20"),
    min_lat: Optional[str] = Query(None, alias="minLat"),
    max_lat: Optional[str] = Query(None, alias="maxLat"),
    min_lng: Optional[str] = Query(None, alias="minLng"),
    max_lng: Optional[str] = Query(None, alias="maxLng"),
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice")
) -> SpotSearchParams:
    """
    Parse listing query parameters.

    Raises:
        pydantic.ValidationError: If a filter value is malformed or out of range
    """
    return SpotSearchParams.model_validate({
        "page": page,
        "size": size,
        "minLat": min_lat,
        "maxLat": max_lat,
        "minLng": min_lng,
        "maxLng": max_lng,
        "minPrice": min_price,
        "maxPrice": max_price
    })


@router.get(
    "",
    response_model=SpotListResponse,
    status_code=status.HTTP_200_OK,
    summary="List spots",
    description="Paginated spots with optional latitude, longitude and price ranges",
    responses=get_error_responses(400)
)
async def list_spots(
    params: SpotSearchParams = Depends(get_spot_search_params),
    spot_service: SpotService = Depends(get_spot_service)
) -> SpotListResponse:
    return await spot_service.list_spots(params)


@router.get(
    "/current",
    response_model=CurrentUserSpotsResponse,
    status_code=status.HTTP_200_OK,
    summary="List current user's spots",
    responses=get_error_responses(401)
)
async def list_current_user_spots(
    current_user: User = Depends(get_current_user),
    spot_service: SpotService = Depends(get_spot_service)
) -> CurrentUserSpotsResponse:
    return await spot_service.list_user_spots(current_user)


@router.get(
    "/{spot_id}",
    response_model=SpotDetailResponse,
    status_code=status.HTTP_200_OK,
    summary="Get spot details",
    description="Spot with review count, average rating, images and owner",
    responses=get_error_responses(404)
)
async def get_spot(
    spot_id: int,
    spot_service: SpotService = Depends(get_spot_service)
) -> SpotDetailResponse:
    """
    Get details of a spot.

    Raises:
        NotFoundError: If the spot doesn't exist
    """
    return await spot_service.get_spot_detail(spot_id)


@router.post(
    "",
    response_model=SpotResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create spot",
    responses=get_error_responses(400, 401)
)
async def create_spot(
    spot_data: SpotCreate,
    current_user: User = Depends(get_current_user),
    spot_service: SpotService = Depends(get_spot_service)
) -> SpotResponse:
    """
    Create a spot owned by the current user.

    Args:
        spot_data: Spot creation data
        current_user: Current authenticated user
        spot_service: Spot service instance

    Returns:
        The stored spot record
    """
    spot = await spot_service.create_spot(spot_data, current_user)
    return SpotResponse.model_validate(spot.to_dict())


@router.put(
    "/{spot_id}",
    response_model=SpotResponse,
    status_code=status.HTTP_200_OK,
    summary="Update spot",
    responses=get_crud_error_responses()
)
async def update_spot(
    spot_id: int,
    spot_data: SpotUpdate,
    current_user: User = Depends(get_current_user),
    spot_service: SpotService = Depends(get_spot_service)
) -> SpotResponse:
    """
    Update a spot owned by the current user.

    Raises:
        NotFoundError: If the spot doesn't exist
        OwnershipError: If the current user doesn't own the spot
    """
    spot = await spot_service.update_spot(spot_id, spot_data, current_user)
    return SpotResponse.model_validate(spot.to_dict())


@router.delete(
    "/{spot_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete spot",
    responses=get_crud_error_responses()
)
async def delete_spot(
    spot_id: int,
    current_user: User = Depends(get_current_user),
    spot_service: SpotService = Depends(get_spot_service)
) -> MessageResponse:
    await spot_service.delete_spot(spot_id, current_user)
    return MessageResponse(message="Successfully deleted")


@router.post(
    "/{spot_id}/images",
    response_model=SpotImageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add spot image",
    description="Attach an image by URL; a new preview image replaces the old preview",
    responses=get_crud_error_responses()
)
async def add_spot_image(
    spot_id: int,
    image_data: SpotImageCreate,
    current_user: User = Depends(get_current_user),
    spot_service: SpotService = Depends(get_spot_service)
) -> SpotImageResponse:
    image = await spot_service.add_spot_image(spot_id, image_data, current_user)
    return SpotImageResponse.model_validate(image)


@router.get(
    "/{spot_id}/reviews",
    response_model=SpotReviewsResponse,
    status_code=status.HTTP_200_OK,
    summary="List reviews for a spot",
    responses=get_error_responses(404)
)
async def list_spot_reviews(
    spot_id: int,
    review_service: ReviewService = Depends(get_review_service)
) -> SpotReviewsResponse:
    return await review_service.list_spot_reviews(spot_id)


@router.post(
    "/{spot_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create review for a spot",
    responses=get_error_responses(400, 401, 404, 409)
)
async def create_review(
    spot_id: int,
    review_data: ReviewCreate,
    current_user: User = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service)
) -> ReviewResponse:
    """
    Review a spot as the current user.

    Raises:
        NotFoundError: If the spot doesn't exist
        ConflictError: If the user already reviewed this spot
    """
    review = await review_service.create_review(spot_id, review_data, current_user)
    return ReviewResponse.model_validate(review.to_dict())
