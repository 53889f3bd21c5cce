"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers.
FastAPI's Depends() function manages their lifecycle.

Provided here:
- DbSession: one SQLAlchemy session per request
- Pagination: page/limit query values, clamped to usable numbers
- CurrentUser: the user the Authorization bearer token belongs to

A token that verifies but names an account that no longer exists is
rejected the same way as an expired one.
"""

import logging
from typing import Annotated

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from bookreview.database import get_db
from bookreview.exceptions import UnauthorizedError
from bookreview.models.user import User
from bookreview.services.security import verify_token
from bookreview.services.users import find_user_by_id
from bookreview.validators import clamp_pagination

logger = logging.getLogger(__name__)

# =============================================================================
# Type Aliases with Annotated
# =============================================================================
# Route signatures read `db: DbSession` instead of `db: Session = Depends(get_db)`

DbSession = Annotated[Session, Depends(get_db)]


# =============================================================================
# Pagination Parameters
# =============================================================================
class PaginationParams:
    """
    Common pagination parameters for list endpoints.

    page and limit arrive as raw strings so that junk like ?page=abc falls
    back to the defaults instead of failing the request:

        ?page=0&limit=500  ->  page=1, limit=100
        ?page=abc          ->  page=1, limit=10
    """

    def __init__(
        self,
        page: str | None = Query(
            default=None,
            description="Page number (1-indexed)",
            examples=["1", "2"],
        ),
        limit: str | None = Query(
            default=None,
            description="Items per page (1-100, default 10)",
            examples=["10", "25"],
        ),
    ) -> None:
        self.page, self.limit = clamp_pagination(page, limit)

    @property
    def offset(self) -> int:
        """
        Number of records to skip.

        Page 1 -> 0, page 2 -> limit, page 3 -> 2 * limit
        """
        return (self.page - 1) * self.limit


Pagination = Annotated[PaginationParams, Depends()]


# =============================================================================
# Bearer Token Authentication
# =============================================================================
# auto_error=False so a missing header reaches get_current_user and is
# reported in the API's own error format instead of FastAPI's default 403.
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    db: DbSession,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> User:
    """
    Extract and validate the current user from the bearer token.

    This dependency:
    1. Reads the Bearer token from the Authorization header
    2. Verifies its signature and expiry
    3. Looks up the user named by the token's id claim

    Args:
        db: Database session
        credentials: Parsed "Authorization: Bearer <token>" header, if any

    Returns:
        User object for the authenticated user

    Raises:
        UnauthorizedError: header missing, token invalid/expired, or the
            user no longer exists
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Access token required")

    claims = verify_token(credentials.credentials)

    user = find_user_by_id(db, claims.id)
    if user is None:
        logger.warning(f"Token for unknown user id: {claims.id}")
        raise UnauthorizedError("Invalid or expired token")

    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
