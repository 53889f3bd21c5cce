"""
API Error Taxonomy

Every failure a handler can report maps to one of these classes.
main.py registers an exception handler that renders any APIError as:

    {"error": "<message>"}

with the class's status code. Nothing here knows about HTTP transport;
services raise these directly and the app turns them into responses.
"""

from fastapi import status


class APIError(Exception):
    """Base class for errors that are safe to show to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BadRequestError(APIError):
    """Missing or invalid fields, invalid year or rating, missing search query."""

    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(APIError):
    """Missing or invalid bearer token, or wrong credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(APIError):
    """Authenticated, but not the owner of the resource being changed."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(APIError):
    """Book or review does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(APIError):
    """Duplicate email on signup, or a second review of the same book."""

    status_code = status.HTTP_409_CONFLICT


__all__ = [
    "APIError",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
]
