"""
Rate Limiting Service

Rate limiting with slowapi to protect signup/login from brute force and
the write routes from floods.

Rate Limit Tiers:
=================
- Default (every route, via SlowAPIMiddleware): settings.rate_limit_default
- Signup / login: settings.rate_limit_auth
- Book and review writes: settings.rate_limit_write

Counters live in settings.rate_limit_storage_uri (in-process memory by
default). Tests switch the limiter off with RATE_LIMIT_ENABLED=false.
"""

import logging

from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from bookreview.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


def get_client_ip(request: Request) -> str:
    """
    Get client IP address for rate limiting.

    Honours X-Forwarded-For (first hop) and X-Real-IP set by proxies,
    then falls back to the direct connection address.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return get_remote_address(request)


def create_limiter() -> Limiter:
    """Create and configure the rate limiter."""
    limiter = Limiter(
        key_func=get_client_ip,
        default_limits=[settings.rate_limit_default],
        storage_uri=settings.rate_limit_storage_uri,
        strategy="fixed-window",
        enabled=settings.rate_limit_enabled,
    )

    logger.info(
        f"Rate limiter initialized - enabled: {settings.rate_limit_enabled}, "
        f"default: {settings.rate_limit_default}"
    )

    return limiter


limiter = create_limiter()


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Render a rate limit hit in the API's error format.

    Returns 429 with a Retry-After header.
    """
    limit_detail = str(exc.detail)

    response = JSONResponse(
        status_code=429,
        content={"error": f"Too many requests. Limit: {limit_detail}"},
    )
    response.headers["Retry-After"] = str(60)

    logger.warning(
        f"Rate limit exceeded for {get_client_ip(request)}: {limit_detail}"
    )

    return response
