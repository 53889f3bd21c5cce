"""
Validation Helpers

Pure predicates with no side effects and no state. Pydantic schemas call
them from field validators, and the pagination dependency uses
clamp_pagination for query strings.
"""

import re
from datetime import UTC, datetime

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
LEADING_INT_PATTERN = re.compile(r"\s*([+-]?\d+)")

MIN_PASSWORD_LENGTH = 6
MIN_RATING = 1
MAX_RATING = 5
MIN_PUBLISHED_YEAR = 1000

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def is_valid_email(email: str) -> bool:
    """Check the local@domain.tld shape. No normalization is applied."""
    return bool(EMAIL_PATTERN.match(email))


def is_valid_password(password: str) -> bool:
    return len(password) >= MIN_PASSWORD_LENGTH


def is_valid_rating(rating: object) -> bool:
    """
    A rating is a whole number from 1 to 5.

    Booleans are ints in Python, so they are rejected explicitly.
    """
    if isinstance(rating, bool) or not isinstance(rating, int):
        return False
    return MIN_RATING <= rating <= MAX_RATING


def as_whole_number(value: object) -> object:
    """
    Turn a float with no fractional part (5.0) into an int.

    Anything else, fractional floats included, is returned unchanged so
    the caller's own checks can reject it.
    """
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def is_valid_published_year(year: int, current_year: int | None = None) -> bool:
    """Published year must fall between 1000 and the current year inclusive."""
    if current_year is None:
        current_year = datetime.now(UTC).year
    return MIN_PUBLISHED_YEAR <= year <= current_year


def _parse_int(value: str | int | None) -> int | None:
    """Leading digits win: "2abc" and "2.5" are 2, "abc" is None."""
    if value is None:
        return None
    if isinstance(value, int):
        return value
    match = LEADING_INT_PATTERN.match(value)
    if match is None:
        return None
    return int(match.group(1))


def clamp_pagination(
    page: str | int | None = None,
    limit: str | int | None = None,
) -> tuple[int, int]:
    """
    Turn raw page/limit query values into usable numbers.

    Values that don't parse fall back to page=1, limit=10. Parsed values
    are clamped to page >= 1 and 1 <= limit <= 100.

    Example:
        >>> clamp_pagination("3", "500")
        (3, 100)
        >>> clamp_pagination("abc", None)
        (1, 10)
    """
    page_num = _parse_int(page)
    limit_num = _parse_int(limit)

    if page_num is None:
        page_num = DEFAULT_PAGE
    if limit_num is None:
        limit_num = DEFAULT_LIMIT

    return max(1, page_num), min(max(1, limit_num), MAX_LIMIT)
