"""Dashboard routes: the caller's profile, own startups and investor wishlist."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_auth
from app.models.profile import Profile
from app.schemas.auth import ProfileRead, ProfileUpdate
from app.schemas.startup import StartupRead
from app.schemas.wishlist import WishlistAddRequest, WishlistItem, WishlistListResponse
from app.services.profiles import get_own_profile, update_profile
from app.services.startups import list_user_startups
from app.services.wishlist import add_to_wishlist, list_wishlist, remove_from_wishlist

router = APIRouter()


@router.get("/startups", response_model=list[StartupRead])
def api_my_startups(
    db: Session = Depends(get_db),
    user: Profile = Depends(require_auth),
):
    """Startups owned by the caller, any status."""
    return list_user_startups(db, user)


@router.post("/wishlist", status_code=201)
def api_add_to_wishlist(
    data: WishlistAddRequest,
    db: Session = Depends(get_db),
    user: Profile = Depends(require_auth),
) -> dict:
    """Add a startup to the wishlist."""
    entry = add_to_wishlist(db, user, data.startup_id, data.notes)
    return {"startupId": str(entry.startup_id), "addedAt": entry.created_at.isoformat()}


@router.delete("/wishlist/{startup_id}", status_code=204)
def api_remove_from_wishlist(
    startup_id: str,
    db: Session = Depends(get_db),
    user: Profile = Depends(require_auth),
) -> None:
    """Remove a startup from the wishlist."""
    remove_from_wishlist(db, user, startup_id)


@router.get("/wishlist", response_model=WishlistListResponse)
def api_list_wishlist(
    db: Session = Depends(get_db),
    user: Profile = Depends(require_auth),
) -> WishlistListResponse:
    """List wishlist entries, newest first."""
    entries = list_wishlist(db, user)
    return WishlistListResponse(items=[WishlistItem.model_validate(e) for e in entries])


@router.get("/profile", response_model=ProfileRead)
def api_get_profile(user: Profile = Depends(require_auth)):
    """The caller's own profile."""
    return get_own_profile(user)


@router.patch("/profile", response_model=ProfileRead)
def api_update_profile(
    data: ProfileUpdate,
    db: Session = Depends(get_db),
    user: Profile = Depends(require_auth),
):
    """Update the caller's name or avatar; omitted fields stay as they are."""
    return update_profile(db, user, data.model_dump(exclude_unset=True))
