"""Password hashing and JWT bearer tokens."""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from passlib.context import CryptContext

from metalflow.core.config import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

ROLE_CLAIM = "role"

# Registered claim names a user claim is not allowed to overwrite.
RESERVED_CLAIMS = frozenset({"sub", "name", "jti", "iat", "exp", "iss", "aud", ROLE_CLAIM})


def get_password_hash(password: str) -> str:
    """Hash a password with Argon2."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    user_id: int,
    username: str,
    roles: list[str],
    claims: list[tuple[str, str]],
    expires_delta: timedelta | None = None,
) -> tuple[str, datetime]:
    """Issue a signed access token for a user.

    Every role goes into the ``role`` claim as a list. User claims are
    added under their own type, collapsing repeated types into a list.
    Returns the encoded token and its expiry.
    """
    now = datetime.now(timezone.utc)
    expires_at = now + (expires_delta or timedelta(minutes=settings.JWT_EXPIRATION_MINUTES))

    payload: dict[str, Any] = {}
    for claim_type, claim_value in claims:
        if claim_type in RESERVED_CLAIMS:
            continue
        existing = payload.get(claim_type)
        if existing is None:
            payload[claim_type] = claim_value
        elif isinstance(existing, list):
            existing.append(claim_value)
        else:
            payload[claim_type] = [existing, claim_value]

    payload.update(
        {
            "sub": str(user_id),
            "name": username,
            "jti": str(uuid.uuid4()),
            "iat": now,
            "exp": expires_at,
            "iss": settings.JWT_ISSUER,
            "aud": settings.JWT_AUDIENCE,
            ROLE_CLAIM: list(roles),
        }
    )
    token = jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return token, expires_at


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Verify signature, expiry, issuer and audience.

    Returns the payload, or None when the token is not acceptable.
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
            options={"require": ["exp", "sub"]},
        )
    except jwt.InvalidTokenError as exc:
        logger.warning("Rejected bearer token: %s", exc)
        return None
