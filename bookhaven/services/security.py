"""
Security Service

Password hashing and the bearer tokens BookHaven hands out at login.

Tokens
======
An access token is an HS256 JWT signed with the application's
settings.secret_key:

    {"sub": "<user id>", "type": "access", "exp": <now + 7 days>}

Token functions take the Settings of the running application
(app.state.settings), so an app built with its own secret and lifetime
signs and verifies with those.

Reading a token never raises. A token that is malformed, expired, signed
with another key, of another type or without a numeric subject simply
reads as None, and callers treat that as "not authenticated".
"""

import logging
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from bookhaven.config import Settings

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ACCESS_TOKEN_TYPE = "access"

# bcrypt only; "auto" re-hashes anything weaker on next login
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# =============================================================================
# Passwords
# =============================================================================


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Constant-time check of a password against its bcrypt hash."""
    return pwd_context.verify(plain_password, hashed_password)


# =============================================================================
# Access tokens
# =============================================================================


def access_token_lifetime(settings: Settings) -> timedelta:
    """How long a freshly issued token stays valid."""
    return timedelta(days=settings.access_token_expire_days)


def create_access_token(
    data: dict,
    settings: Settings,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Sign an access token.

    Args:
        data: Claims to carry, normally {"sub": str(user.id)}
        settings: Application settings (secret key, token lifetime)
        expires_delta: Lifetime override (tests use a negative one)

    Example:
        >>> token = create_access_token({"sub": "42"}, settings)
        >>> read_access_token(token, settings)
        42
    """
    claims = dict(data)
    claims["exp"] = datetime.now(UTC) + (expires_delta or access_token_lifetime(settings))
    claims["type"] = ACCESS_TOKEN_TYPE
    return jwt.encode(claims, settings.secret_key, algorithm=ALGORITHM)


def decode_token(token: str, settings: Settings) -> dict | None:
    """Verified claims of a token, or None if it fails verification."""
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        return None


def read_access_token(token: str, settings: Settings) -> int | None:
    """
    The user id an access token was issued for.

    Returns:
        The id from `sub`, or None for any token that is not a valid,
        unexpired access token with a numeric subject
    """
    claims = decode_token(token, settings)
    if claims is None:
        return None

    if claims.get("type") != ACCESS_TOKEN_TYPE:
        logger.warning(f"Rejected token of type {claims.get('type')!r}")
        return None

    try:
        return int(claims.get("sub"))
    except (TypeError, ValueError):
        logger.warning("Token subject is not a user id")
        return None
