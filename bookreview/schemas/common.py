"""
Shared schema building blocks.

The wire format is camelCase (publishedYear, averageRating, createdAt...).
Every schema inherits from CamelModel, which generates the camelCase
aliases and still accepts snake_case names on input.
"""

import math

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model: camelCase aliases, populate by name, read ORM attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PaginationInfo(CamelModel):
    """
    Pagination metadata used by every list in the API.

    totalPages = ceil(totalItems / itemsPerPage)
    hasNext = currentPage < totalPages
    """

    current_page: int = Field(..., ge=1, description="Current page number")
    total_pages: int = Field(..., ge=0, description="Total number of pages")
    total_items: int = Field(..., ge=0, description="Items matching the query")
    items_per_page: int = Field(..., ge=1, le=100, description="Page size")
    has_next: bool = Field(..., description="Whether a later page exists")
    has_prev: bool = Field(..., description="Whether an earlier page exists")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationInfo":
        total_pages = math.ceil(total / limit) if total > 0 else 0
        return cls(
            current_page=page,
            total_pages=total_pages,
            total_items=total,
            items_per_page=limit,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


class MessageResponse(CamelModel):
    """Plain acknowledgement, e.g. after deleting a review."""

    message: str


class ErrorResponse(CamelModel):
    """Body of every error response."""

    error: str = Field(..., examples=["Book not found"])


def require_text(value: str, field_name: str) -> str:
    """Strip a string field and reject it if nothing is left."""
    value = value.strip()
    if not value:
        raise ValueError(f"{field_name} is required")
    return value
