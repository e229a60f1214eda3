"""Authentication routes. Sign-in itself happens at the identity provider."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.deps import require_auth
from app.models.profile import Profile
from app.schemas.auth import ProfileRead

router = APIRouter()


@router.get("/me", response_model=ProfileRead)
def me(user: Profile = Depends(require_auth)):
    """Return the profile behind the bearer token."""
    return user
