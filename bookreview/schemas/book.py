"""
Book Pydantic Schemas

Handles:
- Book creation with published year validation
- Book-with-rating (derived averageRating / totalReviews)
- Book detail page with its paginated reviews
- Paginated list and search responses
"""

from datetime import datetime

from pydantic import Field, field_validator

from bookreview.schemas.common import CamelModel, PaginationInfo, require_text
from bookreview.schemas.review import ReviewWithAuthorResponse
from bookreview.services.books import BookWithRating
from bookreview.services.reviews import ReviewWithAuthor
from bookreview.validators import as_whole_number, is_valid_published_year


class BookCreate(CamelModel):
    """
    Schema for adding a book.

    All fields are required. Text fields are trimmed.

    Example request body:
    {
        "title": "1984",
        "author": "George Orwell",
        "genre": "Dystopian",
        "description": "A dystopian novel set in a totalitarian society.",
        "publishedYear": 1949
    }
    """

    title: str = Field(..., max_length=500, examples=["1984"])
    author: str = Field(..., max_length=255, examples=["George Orwell"])
    genre: str = Field(..., max_length=100, examples=["Dystopian"])
    description: str = Field(
        ...,
        max_length=5000,
        examples=["A dystopian novel set in a totalitarian society."],
    )
    published_year: int = Field(
        ...,
        description="Year of publication (1000 to current year)",
        examples=[1949],
    )

    @field_validator("title", "author", "genre", "description")
    @classmethod
    def text_must_not_be_empty(cls, v: str, info) -> str:
        return require_text(v, info.field_name)

    @field_validator("published_year", mode="before")
    @classmethod
    def published_year_must_be_valid(cls, v: object) -> object:
        # Must already be a JSON number; strings and booleans are rejected
        v = as_whole_number(v)
        if isinstance(v, bool) or not isinstance(v, int):
            raise ValueError("Invalid published year")
        if not is_valid_published_year(v):
            raise ValueError("Invalid published year")
        return v


class BookResponse(CamelModel):
    """A catalogue entry as stored."""

    id: str = Field(..., description="Unique identifier")
    title: str
    author: str
    genre: str
    description: str
    published_year: int
    created_at: datetime = Field(..., description="When the book was added")
    created_by: str = Field(..., description="User who added the book")


class BookWithRatingResponse(BookResponse):
    """
    Book augmented with derived rating fields.

    averageRating is rounded to one decimal, 0 when there are no reviews.
    """

    average_rating: float = Field(default=0, ge=0, le=5)
    total_reviews: int = Field(default=0, ge=0)

    @classmethod
    def from_rated(cls, item: BookWithRating) -> "BookWithRatingResponse":
        return cls(
            **BookResponse.model_validate(item.book).model_dump(),
            average_rating=item.rating.average_rating,
            total_reviews=item.rating.total_reviews,
        )


class BookDetailResponse(BookWithRatingResponse):
    """Single book page: rating summary plus one page of reviews."""

    reviews: list[ReviewWithAuthorResponse] = Field(default_factory=list)
    reviews_pagination: PaginationInfo

    @classmethod
    def build(
        cls,
        item: BookWithRating,
        reviews: list[ReviewWithAuthor],
        reviews_pagination: PaginationInfo,
    ) -> "BookDetailResponse":
        return cls(
            **BookWithRatingResponse.from_rated(item).model_dump(),
            reviews=[ReviewWithAuthorResponse.from_item(r) for r in reviews],
            reviews_pagination=reviews_pagination,
        )


class BookEnvelope(CamelModel):
    """{message, book} returned after adding a book."""

    message: str
    book: BookResponse


class BookDetailEnvelope(CamelModel):
    book: BookDetailResponse


class BookListResponse(CamelModel):
    """
    Paginated book list.

    Example:
    {
        "books": [...],
        "pagination": {"currentPage": 1, "totalPages": 3, "totalItems": 25,
                       "itemsPerPage": 10, "hasNext": true, "hasPrev": false}
    }
    """

    books: list[BookWithRatingResponse]
    pagination: PaginationInfo


class SearchResponse(CamelModel):
    """Search results echo the trimmed query."""

    query: str
    books: list[BookWithRatingResponse]
    pagination: PaginationInfo
