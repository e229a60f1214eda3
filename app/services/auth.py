"""Authentication service: verify identity-provider JWTs and resolve profiles.

Tokens are issued by the external identity provider and signed HS256 with
``SECRET_KEY``. The ``sub`` claim is the user's id, which is also the
profile's primary key.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.profile import Profile, ProfileRole

logger = logging.getLogger(__name__)

# JWT configuration
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_HOURS = 24


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT access token (used by scripts and tests)."""
    settings = get_settings()
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(hours=ACCESS_TOKEN_EXPIRE_HOURS)
    )
    to_encode.update({"exp": expire})
    if settings.jwt_audience and "aud" not in to_encode:
        to_encode["aud"] = settings.jwt_audience
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """Decode and validate a JWT token. Returns payload or None."""
    settings = get_settings()
    if not settings.secret_key:
        logger.warning("SECRET_KEY is not set; rejecting bearer token")
        return None
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[ALGORITHM],
            audience=settings.jwt_audience,
            options={"verify_aud": bool(settings.jwt_audience)},
        )
    except JWTError:
        return None


def get_profile_from_token(db: Session, token: str, provision: bool = True) -> Optional[Profile]:
    """Resolve the profile for a token. Returns None if the token is invalid.

    A valid token for a user with no profile row yet creates one with the
    default role when provision is True.
    """
    payload = decode_access_token(token)
    if payload is None:
        return None
    try:
        profile_id = uuid.UUID(str(payload.get("sub")))
    except (ValueError, TypeError):
        return None

    profile = db.get(Profile, profile_id)
    if profile is not None or not provision:
        return profile

    profile = Profile(id=profile_id, email=payload.get("email"), role=ProfileRole.user.value)
    db.add(profile)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return db.get(Profile, profile_id)
    logger.info("Provisioned profile %s", profile_id)
    return profile
