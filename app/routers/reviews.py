"""
Review API endpoints. Every route acts on behalf of the logged in user;
changes to an existing review require authorship.
"""

from fastapi import APIRouter, Depends, status

from app.models.user import User
from app.services.review import ReviewService
from app.schemas.auth import MessageResponse
from app.schemas.image import ReviewImageCreate, ReviewImageResponse
from app.schemas.review import ReviewUpdate, ReviewResponse, CurrentUserReviewsResponse
from app.schemas.error import get_error_responses, get_crud_error_responses
from app.utils.dependencies import get_current_user, get_review_service


router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.get(
    "/current",
    response_model=CurrentUserReviewsResponse,
    status_code=status.HTTP_200_OK,
    summary="List current user's reviews",
    description="Reviews written by the logged in user, with the reviewed spot and images",
    responses=get_error_responses(401)
)
async def list_current_user_reviews(
    current_user: User = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service)
) -> CurrentUserReviewsResponse:
    return await review_service.list_user_reviews(current_user)


@router.post(
    "/{review_id}/images",
    response_model=ReviewImageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add review image",
    responses=get_crud_error_responses()
)
async def add_review_image(
    review_id: int,
    image_data: ReviewImageCreate,
    current_user: User = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service)
) -> ReviewImageResponse:
    """
    Attach an image to a review written by the current user.

    Raises:
        NotFoundError: If the review doesn't exist
        OwnershipError: If the current user didn't write the review
        ResourceLimitExceededError: If the review already has 10 images
    """
    image = await review_service.add_review_image(review_id, image_data, current_user)
    return ReviewImageResponse.model_validate(image)


@router.put(
    "/{review_id}",
    response_model=ReviewResponse,
    status_code=status.HTTP_200_OK,
    summary="Update review",
    responses=get_crud_error_responses()
)
async def update_review(
    review_id: int,
    review_data: ReviewUpdate,
    current_user: User = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service)
) -> ReviewResponse:
    review = await review_service.update_review(review_id, review_data, current_user)
    return ReviewResponse.model_validate(review.to_dict())


@router.delete(
    "/{review_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete review",
    responses=get_crud_error_responses()
)
async def delete_review(
    review_id: int,
    current_user: User = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service)
) -> MessageResponse:
    await review_service.delete_review(review_id, current_user)
    return MessageResponse(message="Successfully deleted")
