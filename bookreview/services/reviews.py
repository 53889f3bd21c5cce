"""
Review persistence.

Business Rules:
- One review per user per book. There is no pre-check: the insert runs in
  a SAVEPOINT and the uq_review_book_user constraint decides, so two
  concurrent submissions cannot both succeed.
- Ownership (update/delete) is enforced by the caller before these
  functions are used.
- updated_at is refreshed on every update; created_at never changes.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookreview.database import violates_constraint
from bookreview.exceptions import ConflictError
from bookreview.models import Review, User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReviewWithAuthor:
    """A review annotated with its author's display name."""

    review: Review
    user_name: str


def create_review(
    db: Session,
    book_id: str,
    user_id: str,
    rating: int,
    comment: str,
) -> Review:
    """
    Insert a review. The caller has already checked the book exists.

    Raises:
        ConflictError: the user already reviewed this book
        IntegrityError: any other constraint failure, such as an unknown
            book_id or user_id, is re-raised unchanged
    """
    review = Review(
        book_id=book_id,
        user_id=user_id,
        rating=rating,
        comment=comment,
    )

    try:
        with db.begin_nested():
            db.add(review)
    except IntegrityError as exc:
        if not violates_constraint(exc, "uq_review_book_user", "reviews.book_id, reviews.user_id"):
            raise
        logger.warning(f"Duplicate review rejected: user {user_id} on book {book_id}")
        raise ConflictError("You have already reviewed this book") from None

    db.commit()
    db.refresh(review)

    logger.info(f"Review {review.id} created by user {user_id} for book {book_id}")
    return review


def find_review_by_id(db: Session, review_id: str) -> Review | None:
    return db.get(Review, review_id)


def update_review(
    db: Session,
    review: Review,
    rating: int | None = None,
    comment: str | None = None,
) -> Review:
    """
    Partially update a review.

    Only the fields that are not None change. updated_at is always
    refreshed, even when the new values equal the old ones.
    """
    if rating is not None:
        review.rating = rating
    if comment is not None:
        review.comment = comment
    review.updated_at = datetime.now(UTC)

    db.commit()
    db.refresh(review)
    return review


def delete_review(db: Session, review: Review) -> bool:
    """Delete a review. Returns True once the row is gone."""
    review_id = review.id
    db.delete(review)
    db.commit()

    logger.info(f"Review {review_id} deleted")
    return db.get(Review, review_id) is None


def find_reviews_by_book_id(
    db: Session,
    book_id: str,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[ReviewWithAuthor], int]:
    """
    List a book's reviews newest first, each with the author's name.

    Returns:
        (reviews for the requested page, total number of reviews on the book)
    """
    count_stmt = select(func.count()).select_from(Review).where(Review.book_id == book_id)
    total = db.execute(count_stmt).scalar() or 0

    stmt = (
        select(Review, User.name)
        .join(User, Review.user_id == User.id)
        .where(Review.book_id == book_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )

    items = [
        ReviewWithAuthor(review=review, user_name=user_name)
        for review, user_name in db.execute(stmt).all()
    ]
    return items, total
