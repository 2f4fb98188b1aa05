"""
Unit tests for core.security module.
Tests password hashing and session token creation/validation.
"""
import pytest
import datetime as dt
import jwt
from forum.config import settings
from forum.core.security import (
    JWT_ALG,
    hash_password,
    verify_password,
    create_access_token,
    decode_access_token,
)


class TestPasswordHashing:
    """Tests for password hashing and verification."""

    def test_hash_password_returns_different_hash_each_time(self):
        """Password hashing should produce different hashes (salt included)."""
        password = "TestPassword123"
        assert hash_password(password) != hash_password(password)

    def test_hash_password_is_not_plain_text(self):
        password = "TestPassword123"
        hashed = hash_password(password)
        assert isinstance(hashed, str)
        assert hashed != password
        assert hashed.startswith("$argon2")

    def test_verify_password_correct_password(self):
        hashed = hash_password("TestPassword123")
        assert verify_password("TestPassword123", hashed) is True

    def test_verify_password_incorrect_password(self):
        hashed = hash_password("TestPassword123")
        assert verify_password("WrongPassword456", hashed) is False


class TestSessionTokens:
    """Tests for session token creation and validation."""

    def _token(self, **kwargs):
        return create_access_token("user-123", "alice", "alice@example.com", "user", **kwargs)

    def test_token_carries_identity_claims(self):
        payload = decode_access_token(self._token())
        assert payload["sub"] == "user-123"
        assert payload["username"] == "alice"
        assert payload["email"] == "alice@example.com"
        assert payload["role"] == "user"

    def test_token_lifetime_matches_configuration(self):
        payload = decode_access_token(self._token())
        diff_minutes = (payload["exp"] - payload["iat"]) / 60
        assert abs(diff_minutes - settings.jwt_expires_minutes) < 1

    def test_expired_token_raises_expired_signature(self):
        token = self._token(expires_minutes=-5)
        with pytest.raises(jwt.ExpiredSignatureError):
            decode_access_token(token)

    def test_wrong_secret_raises_invalid_signature(self):
        now = dt.datetime.now(dt.timezone.utc)
        forged = jwt.encode(
            {"sub": "user-123", "iat": now, "exp": now + dt.timedelta(minutes=5)},
            "not-the-secret",
            algorithm=JWT_ALG,
        )
        with pytest.raises(jwt.InvalidSignatureError):
            decode_access_token(forged)

    def test_garbage_token_is_invalid(self):
        with pytest.raises(jwt.InvalidTokenError):
            decode_access_token("invalid.token.here")

    def test_missing_secret_refuses_to_sign(self, monkeypatch):
        monkeypatch.setattr(settings, "jwt_secret", None)
        with pytest.raises(RuntimeError, match="JWT_SECRET"):
            self._token()
