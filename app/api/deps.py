"""Shared FastAPI dependencies for API routes."""

from __future__ import annotations

from fastapi import Cookie, Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from app.config import get_settings
from app.db.session import get_db  # re-export
from app.models.profile import Profile
from app.services.auth import get_profile_from_token
from app.storage import get_blob_store
from app.storage.base import BlobStore

__all__ = [
    "get_db",
    "get_blob_store_dep",
    "get_current_user",
    "require_admin",
    "require_auth",
]

# Cookie name for browser sessions
AUTH_COOKIE = "access_token"


def get_current_user(
    db: Session = Depends(get_db),
    authorization: str | None = Header(None),
    access_token: str | None = Cookie(None),
) -> Profile | None:
    """Return the authenticated profile or None.

    Checks (in order):
    1. Authorization: Bearer <token> header
    2. access_token cookie
    """
    token: str | None = None

    # Check Authorization header
    if authorization and authorization.startswith("Bearer "):
        token = authorization[len("Bearer ") :]

    # Fall back to cookie
    if token is None and access_token:
        token = access_token

    if token is None:
        return None

    return get_profile_from_token(db, token)


def require_auth(user: Profile | None = Depends(get_current_user)) -> Profile:
    """Dependency that requires authentication; 401 otherwise."""
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    return user


def require_admin(user: Profile = Depends(require_auth)) -> Profile:
    """Dependency that requires an admin profile; 403 otherwise."""
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user


def get_blob_store_dep() -> BlobStore:
    """Blob store for the configured backend."""
    return get_blob_store(get_settings())
