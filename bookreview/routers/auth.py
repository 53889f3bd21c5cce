"""
Authentication Router

Handles user authentication endpoints:
- Signup (email/password/name -> user + token)
- Login (email/password -> token)
- Current user (from bearer token)

Security:
=========
- Passwords are hashed with bcrypt before storage
- Plain text passwords are never logged or stored
- Tokens are HS256 JWTs carrying {id, email, name}, valid for 24 hours
- Login failures never reveal whether the email exists
"""

import logging

from fastapi import APIRouter, Request, status

from bookreview.config import get_settings
from bookreview.dependencies import CurrentUser, DbSession
from bookreview.exceptions import ConflictError, UnauthorizedError
from bookreview.models.user import User
from bookreview.schemas.common import ErrorResponse
from bookreview.schemas.user import (
    AuthResponse,
    CurrentUserResponse,
    LoginRequest,
    SignupRequest,
    UserResponse,
)
from bookreview.services.rate_limiter import limiter
from bookreview.services.security import (
    TokenClaims,
    create_access_token,
    hash_password,
    verify_password,
)
from bookreview.services.users import create_user, find_user_by_email

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={
        400: {"model": ErrorResponse, "description": "Missing or invalid fields"},
        401: {"model": ErrorResponse, "description": "Unauthorized"},
    },
)


def _issue_token(user: User) -> str:
    return create_access_token(
        TokenClaims(id=user.id, email=user.email, name=user.name)
    )


# -------------------------------------------------------------------------
# Signup Endpoint
# -------------------------------------------------------------------------
@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="""
    Create an account and receive a bearer token straight away.

    **Requirements:**
    - Email in local@domain.tld form (stored exactly as entered)
    - Password of at least 6 characters
    - Non-empty name
    """,
    responses={409: {"description": "Email already registered"}},
)
@limiter.limit(settings.rate_limit_auth)
def signup(
    request: Request,
    user_data: SignupRequest,
    db: DbSession,
) -> AuthResponse:
    """
    Register a new user.

    1. Validates email, password and name (handled by Pydantic)
    2. Rejects an email that is already registered
    3. Hashes the password with bcrypt and stores the user
    4. Returns the public profile and a token
    """
    if find_user_by_email(db, user_data.email) is not None:
        logger.warning(f"Signup attempt with existing email: {user_data.email}")
        raise ConflictError("User with this email already exists")

    user = create_user(
        db,
        email=user_data.email,
        hashed_password=hash_password(user_data.password),
        name=user_data.name,
    )

    logger.info(f"New user registered: {user.email}")

    return AuthResponse(
        message="User created successfully",
        token=_issue_token(user),
        user=UserResponse.model_validate(user),
    )


# -------------------------------------------------------------------------
# Login Endpoint
# -------------------------------------------------------------------------
@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login with email and password",
    description="Exchange credentials for a bearer token valid for 24 hours.",
)
@limiter.limit(settings.rate_limit_auth)
def login(
    request: Request,
    credentials: LoginRequest,
    db: DbSession,
) -> AuthResponse:
    """
    Authenticate a user.

    Unknown email and wrong password get the same 401 so the response
    does not reveal which accounts exist.
    """
    user = find_user_by_email(db, credentials.email)

    if user is None or not verify_password(credentials.password, user.hashed_password):
        logger.warning(f"Failed login attempt for: {credentials.email}")
        raise UnauthorizedError("Invalid credentials")

    logger.info(f"User logged in: {user.email}")

    return AuthResponse(
        message="Login successful",
        token=_issue_token(user),
        user=UserResponse.model_validate(user),
    )


# -------------------------------------------------------------------------
# Current User Endpoint
# -------------------------------------------------------------------------
@router.get(
    "/me",
    response_model=CurrentUserResponse,
    summary="Get current user",
    description="Profile of the user the bearer token belongs to.",
)
def get_me(current_user: CurrentUser) -> CurrentUserResponse:
    return CurrentUserResponse(user=UserResponse.model_validate(current_user))
