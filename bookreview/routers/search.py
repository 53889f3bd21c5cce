"""
Search Router

GET /search?q=...&page=&limit=

Matches the query as a case-insensitive substring of a book's title OR
author. Results come back newest first with rating summaries, in the same
paginated shape as GET /books.
"""

from fastapi import APIRouter, Query, Request

from bookreview.config import get_settings
from bookreview.dependencies import DbSession, Pagination
from bookreview.exceptions import BadRequestError
from bookreview.schemas.book import BookWithRatingResponse, SearchResponse
from bookreview.schemas.common import PaginationInfo
from bookreview.services.books import search_books
from bookreview.services.rate_limiter import limiter

settings = get_settings()

# =============================================================================
# Router Configuration
# =============================================================================

router = APIRouter(
    prefix="/search",
    tags=["Search"],
)


@router.get(
    "",
    response_model=SearchResponse,
    summary="Search books",
    description="Search books by title or author.",
    responses={400: {"description": "Missing search query"}},
)
@limiter.limit(settings.rate_limit_default)
def search(
    request: Request,
    db: DbSession,
    pagination: Pagination,
    q: str | None = Query(
        default=None,
        description="Text to look for in titles and authors",
        examples=["dune", "orwell"],
    ),
) -> SearchResponse:
    """
    Search books by title or author.

    Raises:
        BadRequestError: 400 if q is missing or blank
    """
    query = (q or "").strip()
    if not query:
        raise BadRequestError("Search query (q) is required")

    books, total = search_books(
        db,
        query,
        page=pagination.page,
        limit=pagination.limit,
    )

    return SearchResponse(
        query=query,
        books=[BookWithRatingResponse.from_rated(b) for b in books],
        pagination=PaginationInfo.build(pagination.page, pagination.limit, total),
    )
