"""
Security Service

Handles password hashing and bearer token operations.

Security Features:
==================
1. Password hashing with bcrypt (passlib), fixed work factor
2. HS256 JWT issuance with a fixed 24-hour lifetime
3. Token verification that raises UnauthorizedError on any failure

Usage:
    from bookreview.services.security import hash_password, verify_password

    hashed = hash_password("secret1")
    is_valid = verify_password("secret1", hashed)
"""

import logging
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel, ValidationError

from bookreview.config import get_settings
from bookreview.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)
settings = get_settings()

# -------------------------------------------------------------------------
# Password Hashing Configuration
# -------------------------------------------------------------------------
BCRYPT_ROUNDS = 10

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=BCRYPT_ROUNDS,
)


def hash_password(password: str) -> str:
    """
    Hash a plain text password using bcrypt.

    Example:
        >>> hashed = hash_password("secret1")
        >>> hashed.startswith("$2b$10$")
        True
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a stored bcrypt hash.

    Returns False (instead of raising) for hashes passlib cannot identify.
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        logger.warning("Stored password hash has an unrecognized format")
        return False


# -------------------------------------------------------------------------
# Bearer Token Configuration
# -------------------------------------------------------------------------
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_HOURS = 24


class TokenClaims(BaseModel):
    """Identity carried inside every access token."""

    id: str
    email: str
    name: str


def create_access_token(claims: TokenClaims | dict) -> str:
    """
    Create a signed access token valid for 24 hours.

    Args:
        claims: The user's id, email and name

    Returns:
        Encoded JWT token string

    Example:
        >>> token = create_access_token({"id": "u1", "email": "a@b.co", "name": "A"})
        >>> token.count(".") == 2
        True
    """
    if isinstance(claims, dict):
        claims = TokenClaims(**claims)

    now = datetime.now(UTC)
    to_encode = claims.model_dump()
    to_encode.update({
        "sub": claims.id,
        "iat": now,
        "exp": now + timedelta(hours=ACCESS_TOKEN_EXPIRE_HOURS),
    })

    return jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=ALGORITHM,
    )


def verify_token(token: str) -> TokenClaims:
    """
    Decode and validate an access token.

    Raises:
        UnauthorizedError: bad signature, expired, malformed, or missing claims
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[ALGORITHM],
        )
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        raise UnauthorizedError("Invalid or expired token") from None

    try:
        return TokenClaims.model_validate(payload)
    except ValidationError:
        logger.warning("JWT payload is missing identity claims")
        raise UnauthorizedError("Invalid or expired token") from None
