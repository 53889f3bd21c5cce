"""
Ratings Service

Rating aggregation for books.

Nothing is denormalized onto the Book row: averageRating and totalReviews
are derived from the live review set on every call. Averages are computed
from the exact SUM/COUNT in Decimal and rounded half-up to one decimal
place, so 4.25 becomes 4.3 on every database backend.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bookreview.models.review import Review

ONE_DECIMAL = Decimal("0.1")


@dataclass(frozen=True)
class RatingSummary:
    """Derived rating fields attached to a book when it is displayed."""

    average_rating: float = 0.0
    total_reviews: int = 0


def average_from_totals(rating_sum: int | None, review_count: int | None) -> float:
    """
    Round the mean of a review set to one decimal, half-up.

    Returns 0 when there are no reviews.

    Example:
        >>> average_from_totals(17, 4)   # 4.25
        4.3
        >>> average_from_totals(None, 0)
        0.0
    """
    if not review_count:
        return 0.0
    mean = Decimal(int(rating_sum or 0)) / Decimal(int(review_count))
    return float(mean.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP))


def summarize(rating_sum: int | None, review_count: int | None) -> RatingSummary:
    return RatingSummary(
        average_rating=average_from_totals(rating_sum, review_count),
        total_reviews=int(review_count or 0),
    )


def rating_totals_subquery():
    """
    Per-book SUM(rating) and COUNT(*) for outer-joining onto book queries.

    Books without reviews get NULLs from the outer join, which summarize()
    turns into 0 / 0.
    """
    return (
        select(
            Review.book_id.label("book_id"),
            func.sum(Review.rating).label("rating_sum"),
            func.count(Review.id).label("review_count"),
        )
        .group_by(Review.book_id)
        .subquery("rating_totals")
    )


def get_book_average_rating(db: Session, book_id: str) -> RatingSummary:
    """
    Compute a book's rating summary from its current reviews.

    Args:
        db: Database session
        book_id: ID of the book

    Returns:
        RatingSummary with average rounded to one decimal (0 when no reviews)
    """
    stmt = select(
        func.sum(Review.rating),
        func.count(Review.id),
    ).where(Review.book_id == book_id)

    rating_sum, review_count = db.execute(stmt).one()
    return summarize(rating_sum, review_count)
