# forum/core/security.py
"""
Security module for authentication.
Handles password hashing and session token creation/validation.
"""
import datetime as dt
import jwt  # PyJWT
from passlib.context import CryptContext

from forum.config import settings

# Password hashing context
# Argon2 is a modern, secure password hashing algorithm
pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
)

JWT_ALG = "HS256"  # JWT signing algorithm (HMAC SHA-256)


def hash_password(plain: str) -> str:
    """
    Hash a plain text password using Argon2.

    Args:
        plain: Plain text password to hash

    Returns:
        Hashed password string (safe to store in database)
    """
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """
    Verify a plain text password against a hashed password.

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain, hashed)


def create_access_token(
    user_id: str,
    username: str,
    email: str,
    role: str,
    expires_minutes: int | None = None,
) -> str:
    """
    Create a signed session token.

    The token embeds the identity claims so clients can render the current
    user without a round trip; the server still re-resolves the user by `sub`
    on every protected request.

    Args:
        user_id: User identifier (UUID string)
        username: Login name
        email: Email address
        role: "user" or "admin"
        expires_minutes: Lifetime override (defaults to JWT_EXPIRES_MINUTES)

    Returns:
        Encoded JWT token string
    """
    if expires_minutes is None:
        expires_minutes = settings.jwt_expires_minutes
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "sub": user_id,
        "username": username,
        "email": email,
        "role": role,
        "iat": now,
        "exp": now + dt.timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, settings.require_jwt_secret(), algorithm=JWT_ALG)


def decode_access_token(token: str) -> dict:
    """
    Decode and validate a session token.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid or malformed
    """
    return jwt.decode(token, settings.require_jwt_secret(), algorithms=[JWT_ALG])
