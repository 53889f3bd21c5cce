"""
User Pydantic Schemas

Schemas:
- SignupRequest: Registration data (email, password, name)
- LoginRequest: Credentials for login
- UserResponse: Public user data (never exposes the password hash)
- AuthResponse: Token plus profile returned by signup and login
- CurrentUserResponse: Profile of the token holder

Email is checked for shape only (local@domain.tld) and stored exactly as
entered, so lookups stay case-sensitive.
"""

from pydantic import Field, field_validator

from bookreview.schemas.common import CamelModel, require_text
from bookreview.validators import (
    MIN_PASSWORD_LENGTH,
    is_valid_email,
    is_valid_password,
)


class SignupRequest(CamelModel):
    """
    Schema for user registration.

    Example request body:
    {
        "email": "reader@example.com",
        "password": "secret1",
        "name": "Avid Reader"
    }
    """

    email: str = Field(
        ...,
        max_length=255,
        description="User's email address",
        examples=["reader@example.com"],
    )

    password: str = Field(
        ...,
        max_length=128,
        description=f"Password (at least {MIN_PASSWORD_LENGTH} characters)",
        examples=["secret1"],
    )

    name: str = Field(
        ...,
        max_length=255,
        description="Display name shown next to reviews",
        examples=["Avid Reader"],
    )

    @field_validator("email")
    @classmethod
    def email_must_be_valid(cls, v: str) -> str:
        v = require_text(v, "email")
        if not is_valid_email(v):
            raise ValueError("Invalid email format")
        return v

    @field_validator("password")
    @classmethod
    def password_must_be_long_enough(cls, v: str) -> str:
        if not v:
            raise ValueError("password is required")
        if not is_valid_password(v):
            raise ValueError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )
        return v

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        return require_text(v, "name")


class LoginRequest(CamelModel):
    """Credentials for login. Format is not re-validated here."""

    email: str = Field(..., examples=["reader@example.com"])
    password: str = Field(..., examples=["secret1"])

    @field_validator("email", "password")
    @classmethod
    def must_not_be_empty(cls, v: str, info) -> str:
        if not v.strip():
            raise ValueError(f"{info.field_name} is required")
        return v


class UserResponse(CamelModel):
    """
    Schema for user responses.

    SECURITY: Never includes the password hash.
    """

    id: str = Field(..., description="Unique user identifier")
    email: str = Field(..., description="User's email address")
    name: str = Field(..., description="Display name")


class AuthResponse(CamelModel):
    """Returned by signup (201) and login (200)."""

    message: str
    token: str = Field(..., description="Bearer token valid for 24 hours")
    user: UserResponse


class CurrentUserResponse(CamelModel):
    user: UserResponse
