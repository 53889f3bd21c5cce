"""
Pydantic Schemas Package

Request/response models for the API. Models are kept apart from the
SQLAlchemy tables so the wire format (camelCase, derived rating fields,
no password hash) can differ from the stored rows.

Schema Naming Convention:
- XxxCreate / XxxRequest: request bodies
- XxxUpdate: partial updates (optional fields)
- XxxResponse: single resource in a response
- XxxEnvelope: {message, resource} wrappers returned by write endpoints
"""

from bookreview.schemas.book import (
    BookCreate,
    BookDetailEnvelope,
    BookDetailResponse,
    BookEnvelope,
    BookListResponse,
    BookResponse,
    BookWithRatingResponse,
    SearchResponse,
)
from bookreview.schemas.common import (
    CamelModel,
    ErrorResponse,
    MessageResponse,
    PaginationInfo,
)
from bookreview.schemas.review import (
    ReviewCreate,
    ReviewEnvelope,
    ReviewResponse,
    ReviewUpdate,
    ReviewWithAuthorResponse,
)
from bookreview.schemas.user import (
    AuthResponse,
    CurrentUserResponse,
    LoginRequest,
    SignupRequest,
    UserResponse,
)

__all__ = [
    # Common
    "CamelModel",
    "ErrorResponse",
    "MessageResponse",
    "PaginationInfo",
    # Book schemas
    "BookCreate",
    "BookResponse",
    "BookWithRatingResponse",
    "BookDetailResponse",
    "BookEnvelope",
    "BookDetailEnvelope",
    "BookListResponse",
    "SearchResponse",
    # Review schemas
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewResponse",
    "ReviewWithAuthorResponse",
    "ReviewEnvelope",
    # User / auth schemas
    "SignupRequest",
    "LoginRequest",
    "UserResponse",
    "AuthResponse",
    "CurrentUserResponse",
]
