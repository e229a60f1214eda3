"""Startup ownership checks.

Writes to a startup or its dependent rows are allowed for the owner
(``startup.user_id``) and for admin profiles.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Session

from app.models.profile import Profile
from app.models.startup import Startup
from app.services.errors import AuthenticationError, AuthorizationError, NotFoundError


def parse_startup_id(startup_id: str | UUID) -> UUID:
    """Return startup_id as UUID. Malformed ids resolve to nothing, so they 404."""
    if isinstance(startup_id, UUID):
        return startup_id
    try:
        return UUID(str(startup_id).strip())
    except (ValueError, TypeError):
        raise NotFoundError("Startup not found") from None


def can_manage_startup(actor: Profile, startup: Startup) -> bool:
    """Return True if actor owns the startup or is an admin."""
    return actor.is_admin or startup.user_id == actor.id


def get_startup_for_write(
    db: Session, actor: Profile | None, startup_id: str | UUID
) -> Startup:
    """Load a startup the actor may modify.

    Raises AuthenticationError (no actor), NotFoundError (unknown id) or
    AuthorizationError (neither owner nor admin), in that order.
    """
    if actor is None:
        raise AuthenticationError("Unauthorized")
    sid = parse_startup_id(startup_id)
    startup = db.query(Startup).filter(Startup.id == sid).first()
    if startup is None:
        raise NotFoundError("Startup not found")
    if not can_manage_startup(actor, startup):
        raise AuthorizationError("You don't have permission to edit this startup")
    return startup


def require_admin_actor(actor: Profile | None) -> Profile:
    """Return actor if it is an admin profile; raise otherwise."""
    if actor is None:
        raise AuthenticationError("Unauthorized")
    if not actor.is_admin:
        raise AuthorizationError("Admin access required")
    return actor
