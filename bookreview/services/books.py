"""
Book persistence and listing.

Listing Contract
================
- Filters are case-insensitive substring matches; author and genre are
  ANDed when both are given.
- Search matches the query against title OR author.
- Results are ordered newest-created first (id breaks ties).
- Pagination is offset based: offset = (page - 1) * limit.
- The total count reflects the filtered set, not the whole table.

Every returned book carries a RatingSummary computed from its current
reviews in the same query (outer join on per-book totals).
"""

import logging
from dataclasses import dataclass

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from bookreview.models import Book
from bookreview.services.ratings import (
    RatingSummary,
    rating_totals_subquery,
    summarize,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookWithRating:
    """A Book paired with its derived averageRating / totalReviews."""

    book: Book
    rating: RatingSummary


# =============================================================================
# Helper Functions
# =============================================================================
def _contains_ci(column, value: str):
    """Case-insensitive substring match. LIKE wildcards in value match literally."""
    return func.lower(column).contains(value.lower(), autoescape=True)


def _paginated_books_with_rating(
    db: Session,
    conditions: list,
    page: int,
    limit: int,
) -> tuple[list[BookWithRating], int]:
    """Run the count and page queries for a set of WHERE conditions."""
    count_stmt = select(func.count()).select_from(Book).where(*conditions)
    total = db.execute(count_stmt).scalar() or 0

    totals = rating_totals_subquery()
    stmt = (
        select(Book, totals.c.rating_sum, totals.c.review_count)
        .outerjoin(totals, totals.c.book_id == Book.id)
        .where(*conditions)
        .order_by(Book.created_at.desc(), Book.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )

    items = [
        BookWithRating(book=book, rating=summarize(rating_sum, review_count))
        for book, rating_sum, review_count in db.execute(stmt).all()
    ]
    return items, total


# =============================================================================
# Operations
# =============================================================================
def create_book(db: Session, fields: dict, created_by: str) -> Book:
    """
    Insert a book. Books have no uniqueness constraints.

    Args:
        db: Database session
        fields: title, author, genre, description, published_year
        created_by: id of the authenticated user adding the book
    """
    book = Book(**fields, created_by=created_by)

    db.add(book)
    db.commit()
    db.refresh(book)

    logger.info(f"Book added: {book.title!r} by user {created_by}")
    return book


def get_book_by_id(db: Session, book_id: str) -> Book | None:
    return db.get(Book, book_id)


def list_books(
    db: Session,
    page: int = 1,
    limit: int = 10,
    author: str | None = None,
    genre: str | None = None,
) -> tuple[list[BookWithRating], int]:
    """
    List books newest first with optional author/genre filters.

    Returns:
        (books for the requested page, total number of matching books)
    """
    conditions = []
    if author:
        conditions.append(_contains_ci(Book.author, author))
    if genre:
        conditions.append(_contains_ci(Book.genre, genre))

    return _paginated_books_with_rating(db, conditions, page, limit)


def search_books(
    db: Session,
    query: str,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[BookWithRating], int]:
    """
    Search books whose title or author contains the query.

    Example:
        "dune" matches the title "Dune Messiah" and the author "Duneworth".
    """
    conditions = [
        or_(
            _contains_ci(Book.title, query),
            _contains_ci(Book.author, query),
        )
    ]
    return _paginated_books_with_rating(db, conditions, page, limit)
