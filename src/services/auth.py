"""Verification of identity-provider access tokens."""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from src.config import get_settings

settings = get_settings()


def create_access_token(profile_id: int, email: str | None = None) -> str:
    """Create a JWT access token for a profile.

    Production tokens come from the identity provider; this is used by scripts and tests.
    """
    expire = datetime.now(UTC) + timedelta(minutes=settings.jwt_expiration_minutes)
    to_encode = {
        "sub": str(profile_id),
        "email": email,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
