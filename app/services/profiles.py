"""Profiles: the caller's own profile and the admin user directory."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.profile import Profile, ProfileRole
from app.services.audit import record_audit
from app.services.errors import AuthenticationError, DependencyError
from app.services.startup_access import require_admin_actor

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("full_name", "avatar_url")


def get_own_profile(actor: Profile | None) -> Profile:
    if actor is None:
        raise AuthenticationError("Unauthorized")
    return actor


def update_profile(db: Session, actor: Profile | None, changes: dict[str, Any]) -> Profile:
    """Apply the provided editable fields to the actor's profile.

    Keys outside ``EDITABLE_FIELDS`` are ignored (role and email come from the
    identity provider and the admin script). Empty strings clear a field.
    """
    profile = get_own_profile(actor)
    applied: dict[str, Optional[str]] = {}
    for key in EDITABLE_FIELDS:
        if key in changes:
            value = changes[key] or None
            setattr(profile, key, value)
            applied[key] = value
    if not applied:
        return profile

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Profile update failed for %s: %s", profile.id, exc)
        raise DependencyError("Failed to update profile", error=str(exc)) from exc

    db.refresh(profile)
    record_audit(
        db,
        user_id=profile.id,
        action="update_profile",
        entity_type="profile",
        entity_id=profile.id,
        details=applied,
    )
    return profile


def list_profiles(
    db: Session,
    actor: Profile | None,
    search: Optional[str] = None,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """All profiles newest first, with total, admin and new-this-week counts.

    search filters by name or email; the counts always cover every profile.
    """
    require_admin_actor(actor)
    now = now or datetime.now(timezone.utc)

    query = db.query(Profile)
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(Profile.full_name.ilike(pattern), Profile.email.ilike(pattern)))
    items = query.order_by(Profile.created_at.desc()).all()

    return {
        "items": items,
        "total": db.query(Profile).count(),
        "admins": db.query(Profile).filter(Profile.role == ProfileRole.admin.value).count(),
        "new_this_week": db.query(Profile)
        .filter(Profile.created_at > now - timedelta(days=7))
        .count(),
    }
