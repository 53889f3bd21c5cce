"""
Reviews Router

Endpoints for book reviews.

Endpoints:
- POST /books/{book_id}/reviews - Review a book (authenticated)
- PUT /reviews/{review_id} - Update a review (owner only)
- DELETE /reviews/{review_id} - Delete a review (owner only)

Business Rules:
- One review per user per book (enforced by database constraint)
- Only the review author can update or delete their review
- A book's rating summary always reflects its current reviews
"""

import logging

from fastapi import APIRouter, Request, status
from sqlalchemy.orm import Session

from bookreview.config import get_settings
from bookreview.dependencies import CurrentUser, DbSession
from bookreview.exceptions import ForbiddenError, NotFoundError
from bookreview.models.review import Review
from bookreview.schemas.common import ErrorResponse, MessageResponse
from bookreview.schemas.review import (
    ReviewCreate,
    ReviewEnvelope,
    ReviewResponse,
    ReviewUpdate,
)
from bookreview.services.books import get_book_by_id
from bookreview.services.rate_limiter import limiter
from bookreview.services.reviews import (
    create_review,
    delete_review,
    find_review_by_id,
    update_review,
)

logger = logging.getLogger(__name__)
settings = get_settings()

# =============================================================================
# Router Configuration
# =============================================================================

router = APIRouter(
    tags=["Reviews"],
    responses={
        401: {"model": ErrorResponse, "description": "Authentication required"},
        404: {"model": ErrorResponse, "description": "Review or book not found"},
    },
)


# =============================================================================
# Helper Functions
# =============================================================================
def get_owned_review_or_raise(db: Session, review_id: str, user_id: str, action: str) -> Review:
    """
    Get a review the requester is allowed to change.

    Raises:
        NotFoundError: 404 if the review doesn't exist
        ForbiddenError: 403 if it belongs to someone else
    """
    review = find_review_by_id(db, review_id)
    if review is None:
        raise NotFoundError("Review not found")

    if review.user_id != user_id:
        logger.warning(f"User {user_id} tried to {action} review {review_id} owned by {review.user_id}")
        raise ForbiddenError(f"You can only {action} your own reviews")

    return review


# =============================================================================
# Endpoints
# =============================================================================


@router.post(
    "/books/{book_id}/reviews",
    response_model=ReviewEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Review a book",
    description="Add a review to a book. Requires authentication. One review per book per user.",
    responses={409: {"description": "Already reviewed this book"}},
)
@limiter.limit(settings.rate_limit_write)
def add_review(
    request: Request,
    book_id: str,
    current_user: CurrentUser,
    review_data: ReviewCreate,
    db: DbSession,
) -> ReviewEnvelope:
    """
    Create a review for a book.

    Raises:
        NotFoundError: 404 if the book doesn't exist
        ConflictError: 409 if the user already reviewed this book
    """
    if get_book_by_id(db, book_id) is None:
        raise NotFoundError("Book not found")

    review = create_review(
        db,
        book_id=book_id,
        user_id=current_user.id,
        rating=review_data.rating,
        comment=review_data.comment,
    )

    return ReviewEnvelope(
        message="Review added successfully",
        review=ReviewResponse.model_validate(review),
    )


@router.put(
    "/reviews/{review_id}",
    response_model=ReviewEnvelope,
    summary="Update a review",
    description="Change the rating and/or comment of your own review.",
    responses={403: {"description": "Not the review author"}},
)
@limiter.limit(settings.rate_limit_write)
def edit_review(
    request: Request,
    review_id: str,
    current_user: CurrentUser,
    review_data: ReviewUpdate,
    db: DbSession,
) -> ReviewEnvelope:
    """
    Partially update a review. Fields left out of the body keep their values.
    """
    review = get_owned_review_or_raise(db, review_id, current_user.id, "update")

    review = update_review(
        db,
        review,
        rating=review_data.rating,
        comment=review_data.comment,
    )

    logger.info(f"Review {review_id} updated by user {current_user.id}")

    return ReviewEnvelope(
        message="Review updated successfully",
        review=ReviewResponse.model_validate(review),
    )


@router.delete(
    "/reviews/{review_id}",
    response_model=MessageResponse,
    summary="Delete a review",
    description="Delete your own review.",
    responses={403: {"description": "Not the review author"}},
)
@limiter.limit(settings.rate_limit_write)
def remove_review(
    request: Request,
    review_id: str,
    current_user: CurrentUser,
    db: DbSession,
) -> MessageResponse:
    review = get_owned_review_or_raise(db, review_id, current_user.id, "delete")
    delete_review(db, review)

    return MessageResponse(message="Review deleted successfully")
