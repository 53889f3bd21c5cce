"""
Tests for password hashing and bearer tokens.
"""

from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from bookreview.config import get_settings
from bookreview.exceptions import UnauthorizedError
from bookreview.services.security import (
    ALGORITHM,
    TokenClaims,
    create_access_token,
    hash_password,
    verify_password,
    verify_token,
)

settings = get_settings()


class TestPasswordHashing:
    def test_hash_is_bcrypt_with_cost_10(self):
        hashed = hash_password("secret1")

        assert hashed != "secret1"
        assert hashed.startswith("$2b$10$")

    def test_same_password_hashes_differently(self):
        assert hash_password("secret1") != hash_password("secret1")

    def test_verify_correct_password(self):
        hashed = hash_password("secret1")
        assert verify_password("secret1", hashed) is True

    def test_verify_wrong_password(self):
        hashed = hash_password("secret1")
        assert verify_password("secret2", hashed) is False

    def test_verify_unrecognized_hash_returns_false(self):
        assert verify_password("secret1", "not-a-bcrypt-hash") is False


class TestAccessTokens:
    def test_round_trip_claims(self):
        token = create_access_token({"id": "user-1", "email": "a@b.co", "name": "Ann"})

        claims = verify_token(token)

        assert claims == TokenClaims(id="user-1", email="a@b.co", name="Ann")

    def test_token_expires_after_24_hours(self):
        token = create_access_token(TokenClaims(id="user-1", email="a@b.co", name="Ann"))

        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])

        assert payload["sub"] == "user-1"
        assert payload["exp"] - payload["iat"] == 24 * 60 * 60

    def test_expired_token_rejected(self):
        past = datetime.now(UTC) - timedelta(hours=25)
        token = jwt.encode(
            {"id": "user-1", "email": "a@b.co", "name": "Ann", "iat": past, "exp": past + timedelta(hours=1)},
            settings.secret_key,
            algorithm=ALGORITHM,
        )

        with pytest.raises(UnauthorizedError) as exc_info:
            verify_token(token)
        assert exc_info.value.message == "Invalid or expired token"

    def test_wrong_signature_rejected(self):
        token = jwt.encode(
            {"id": "user-1", "email": "a@b.co", "name": "Ann"},
            "another-secret-key-that-is-also-32-characters",
            algorithm=ALGORITHM,
        )

        with pytest.raises(UnauthorizedError):
            verify_token(token)

    def test_token_without_identity_claims_rejected(self):
        token = jwt.encode(
            {"sub": "user-1", "exp": datetime.now(UTC) + timedelta(hours=1)},
            settings.secret_key,
            algorithm=ALGORITHM,
        )

        with pytest.raises(UnauthorizedError):
            verify_token(token)

    def test_garbage_rejected(self):
        with pytest.raises(UnauthorizedError):
            verify_token("not.a.token")
