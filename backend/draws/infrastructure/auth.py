"""Bearer JWT Authentication — resolves the calling User from the Authorization header.

Invariants:
    - Header must be exactly "Bearer <token>"; anything else is a 401
    - Token verified with the configured secret/algorithm, `exp` enforced when present
    - User id read from the first present claim of sub, user_id, id
    - Unknown or inactive users are rejected (401)
    - get_optional_user never fails on credentials it cannot verify (bad token,
      no secret configured): it returns None

Design Decisions:
    - PyJWT for verification: tokens are issued by an external identity provider,
      this service only verifies them
    - create_access_token exists for local development and tests, signing with
      the same settings the verifier reads
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends, Header
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from draws.config import get_settings
from draws.core.errors import AuthNotConfiguredError, AuthenticationError
from draws.infrastructure.database import get_db
from draws.models.user import User

logger = logging.getLogger(__name__)

USER_ID_CLAIMS = ("sub", "user_id", "id")


def _get_jwt_secret() -> str:
    secret = get_settings().jwt_secret
    if not secret:
        logger.error("JWT_SECRET (or SUPABASE_SERVICE_KEY) is not configured")
        raise AuthNotConfiguredError()
    return secret


def extract_bearer_token(authorization: str | None) -> str:
    """Return the token part of an Authorization header."""
    if not authorization:
        raise AuthenticationError("Authorization header is missing")
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise AuthenticationError("Invalid Authorization header format")
    return parts[1]


def decode_token(token: str) -> dict:
    """Verify signature and expiry, return the claims."""
    settings = get_settings()
    secret = _get_jwt_secret()
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[settings.jwt_algorithm],
            options={"verify_aud": False},
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired", code="TOKEN_EXPIRED")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid or expired token", code="INVALID_TOKEN")


def user_id_from_claims(claims: dict) -> uuid.UUID:
    """First present id claim, parsed as UUID."""
    for claim in USER_ID_CLAIMS:
        value = claims.get(claim)
        if value:
            try:
                return uuid.UUID(str(value))
            except ValueError:
                raise AuthenticationError("User ID in token is not a valid UUID")
    raise AuthenticationError("User ID not found in token")


def create_access_token(
    user_id: uuid.UUID, expires_minutes: int | None = None,
) -> str:
    """Sign a token for `user_id`. Development and test helper."""
    settings = get_settings()
    now = datetime.now(timezone.utc)
    minutes = expires_minutes if expires_minutes is not None else settings.jwt_expiry_minutes
    payload = {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=minutes)).timestamp()),
    }
    return jwt.encode(payload, _get_jwt_secret(), algorithm=settings.jwt_algorithm)


async def authenticate(authorization: str | None, db: AsyncSession) -> User:
    """Resolve an active User from the Authorization header or raise 401."""
    token = extract_bearer_token(authorization)
    user_id = user_id_from_claims(decode_token(token))

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise AuthenticationError("User not found")
    if not user.is_active:
        raise AuthenticationError("User is not active")
    return user


async def get_current_user(
    authorization: str | None = Header(None),
    db: AsyncSession = Depends(get_db),
) -> User:
    """FastAPI dependency — authenticated caller (401 otherwise)."""
    return await authenticate(authorization, db)


async def get_optional_user(
    authorization: str | None = Header(None),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """FastAPI dependency — authenticated caller, or None for anonymous/invalid."""
    if not authorization:
        return None
    try:
        return await authenticate(authorization, db)
    except AuthenticationError as e:
        logger.info(f"Ignoring invalid credentials on public endpoint: {e.message}")
        return None
    except AuthNotConfiguredError:
        logger.warning("Ignoring credentials on public endpoint: JWT secret not configured")
        return None
