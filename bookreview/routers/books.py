"""
Books Router

Endpoints for the book catalogue.

Endpoints:
- POST /books - Add a book (authenticated)
- GET /books - List books newest first, filtered by author/genre
- GET /books/{book_id} - Book detail with rating summary and reviews

Every book in a response carries averageRating and totalReviews,
computed from its current reviews.
"""

import logging

from fastapi import APIRouter, Query, Request, status

from bookreview.config import get_settings
from bookreview.dependencies import CurrentUser, DbSession, Pagination
from bookreview.exceptions import NotFoundError
from bookreview.schemas.book import (
    BookCreate,
    BookDetailEnvelope,
    BookDetailResponse,
    BookEnvelope,
    BookListResponse,
    BookResponse,
    BookWithRatingResponse,
)
from bookreview.schemas.common import PaginationInfo
from bookreview.services.books import (
    BookWithRating,
    create_book,
    get_book_by_id,
    list_books,
)
from bookreview.services.rate_limiter import limiter
from bookreview.services.ratings import get_book_average_rating
from bookreview.services.reviews import find_reviews_by_book_id

logger = logging.getLogger(__name__)
settings = get_settings()

# =============================================================================
# Router Configuration
# =============================================================================

router = APIRouter(
    prefix="/books",
    tags=["Books"],
)


# =============================================================================
# Endpoints
# =============================================================================


@router.post(
    "",
    response_model=BookEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Add a book",
    description="Add a book to the catalogue. Requires authentication.",
)
@limiter.limit(settings.rate_limit_write)
def add_book(
    request: Request,
    current_user: CurrentUser,
    book_data: BookCreate,
    db: DbSession,
) -> BookEnvelope:
    """
    Add a new book.

    Args:
        current_user: Authenticated user, recorded as createdBy
        book_data: Validated title, author, genre, description, publishedYear

    Returns:
        The stored book
    """
    book = create_book(db, book_data.model_dump(), created_by=current_user.id)

    return BookEnvelope(
        message="Book added successfully",
        book=BookResponse.model_validate(book),
    )


@router.get(
    "",
    response_model=BookListResponse,
    summary="List books",
    description="""
    Paginated list of books, newest first.

    **Filters** (case-insensitive substring match, combined with AND):
    - author
    - genre
    """,
)
@limiter.limit(settings.rate_limit_default)
def get_books(
    request: Request,
    db: DbSession,
    pagination: Pagination,
    author: str | None = Query(default=None, description="Filter by author"),
    genre: str | None = Query(default=None, description="Filter by genre"),
) -> BookListResponse:
    """List books with their rating summaries."""
    books, total = list_books(
        db,
        page=pagination.page,
        limit=pagination.limit,
        author=author.strip() if author else None,
        genre=genre.strip() if genre else None,
    )

    return BookListResponse(
        books=[BookWithRatingResponse.from_rated(b) for b in books],
        pagination=PaginationInfo.build(pagination.page, pagination.limit, total),
    )


@router.get(
    "/{book_id}",
    response_model=BookDetailEnvelope,
    summary="Get book details",
    description="A single book with its rating summary and a page of its reviews.",
    responses={404: {"description": "Book not found"}},
)
@limiter.limit(settings.rate_limit_default)
def get_book(
    request: Request,
    book_id: str,
    db: DbSession,
    pagination: Pagination,
) -> BookDetailEnvelope:
    """
    Get a book by ID.

    page/limit paginate the book's reviews (newest first).

    Raises:
        NotFoundError: 404 if the book doesn't exist
    """
    book = get_book_by_id(db, book_id)
    if book is None:
        raise NotFoundError("Book not found")

    rating = get_book_average_rating(db, book_id)
    reviews, total = find_reviews_by_book_id(
        db, book_id, page=pagination.page, limit=pagination.limit
    )

    return BookDetailEnvelope(
        book=BookDetailResponse.build(
            BookWithRating(book=book, rating=rating),
            reviews,
            PaginationInfo.build(pagination.page, pagination.limit, total),
        )
    )
