"""
Review Pydantic Schemas

Schemas:
- ReviewCreate: rating and comment for a new review
- ReviewUpdate: partial update (at least one of rating / comment)
- ReviewResponse: review as returned by create/update
- ReviewWithAuthorResponse: review listed on a book page, with author name
- ReviewEnvelope: {message, review} wrapper for write responses

Business Rules:
- Rating must be a whole number 1-5 (checked before type coercion, so
  4.5, "5" and true are all rejected while 5.0 is accepted as 5)
- Comment must not be empty
- One review per user per book (enforced at database level)
"""

from datetime import datetime

from pydantic import Field, field_validator, model_validator

from bookreview.schemas.common import CamelModel, require_text
from bookreview.services.reviews import ReviewWithAuthor
from bookreview.validators import MAX_RATING, MIN_RATING, as_whole_number, is_valid_rating

RATING_ERROR = f"Rating must be an integer between {MIN_RATING} and {MAX_RATING}"


def _check_rating(value: object) -> object:
    value = as_whole_number(value)
    if not is_valid_rating(value):
        raise ValueError(RATING_ERROR)
    return value


class ReviewCreate(CamelModel):
    """
    Schema for creating a new review.

    Example request body:
    {
        "rating": 5,
        "comment": "A chilling and prophetic classic."
    }
    """

    rating: int = Field(
        ...,
        description="Rating from 1 to 5 stars",
        examples=[4, 5],
    )

    comment: str = Field(
        ...,
        max_length=5000,
        description="Review text content",
        examples=["A chilling and prophetic classic."],
    )

    @field_validator("rating", mode="before")
    @classmethod
    def rating_must_be_in_range(cls, v: object) -> object:
        return _check_rating(v)

    @field_validator("comment")
    @classmethod
    def comment_must_not_be_empty(cls, v: str) -> str:
        return require_text(v, "comment")


class ReviewUpdate(CamelModel):
    """
    Schema for updating an existing review.

    Both fields are optional, but at least one must be provided.
    """

    rating: int | None = Field(
        default=None,
        description="Rating from 1 to 5 stars",
    )

    comment: str | None = Field(
        default=None,
        max_length=5000,
        description="Review text content",
    )

    @field_validator("rating", mode="before")
    @classmethod
    def rating_must_be_in_range(cls, v: object) -> object:
        if v is None:
            return v
        return _check_rating(v)

    @field_validator("comment")
    @classmethod
    def comment_must_not_be_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return require_text(v, "comment")

    @model_validator(mode="after")
    def at_least_one_field(self) -> "ReviewUpdate":
        if self.rating is None and self.comment is None:
            raise ValueError("At least rating or comment must be provided")
        return self


class ReviewResponse(CamelModel):
    """Schema for review responses."""

    id: str = Field(..., description="Unique review identifier")
    book_id: str = Field(..., description="ID of the reviewed book")
    user_id: str = Field(..., description="ID of the user who wrote the review")
    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING)
    comment: str
    created_at: datetime = Field(..., description="When the review was created")
    updated_at: datetime = Field(..., description="When the review was last updated")


class ReviewWithAuthorResponse(ReviewResponse):
    """Review as listed under a book, annotated with the author's display name."""

    user_name: str = Field(..., description="Display name of the review author")

    @classmethod
    def from_item(cls, item: ReviewWithAuthor) -> "ReviewWithAuthorResponse":
        return cls(
            **ReviewResponse.model_validate(item.review).model_dump(),
            user_name=item.user_name,
        )


class ReviewEnvelope(CamelModel):
    message: str
    review: ReviewResponse
