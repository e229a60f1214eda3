"""Moderation workflow: admin-driven startup status transitions.

Every status is reachable from every other status. The only guard is that the
actor is an admin. A transition stamps ``updated_at``, writes an audit entry
and invalidates the cached public pages that list or show the startup.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.models.profile import Profile
from app.models.startup import VALID_STATUSES, Startup, StartupStatus
from app.services.audit import record_audit
from app.services.email_service import notify_admin_startup_approved
from app.services.errors import DependencyError, NotFoundError, ValidationError
from app.services.page_cache import revalidate_startup_pages
from app.services.spam import build_spam_report
from app.services.startup_access import parse_startup_id, require_admin_actor

logger = logging.getLogger(__name__)


def _validate_status(status: str | None) -> str:
    value = (status or "").strip().lower()
    if value not in VALID_STATUSES:
        raise ValidationError(
            f"Invalid status. Must be one of: {', '.join(sorted(VALID_STATUSES))}"
        )
    return value


def _revalidate(startup: Startup) -> None:
    revalidate_startup_pages(startup.slug, startup.category.slug if startup.category else None)


def _after_transition(db: Session, actor: Profile, startup: Startup, previous: str) -> None:
    """Side effects of a committed transition. None of them can fail the caller."""
    record_audit(
        db,
        user_id=actor.id,
        action=f"status_change_to_{startup.status}",
        entity_type="startup",
        entity_id=startup.id,
        details={"previousStatus": previous, "newStatus": startup.status},
    )
    _revalidate(startup)
    if startup.status == StartupStatus.approved.value and previous != startup.status:
        notify_admin_startup_approved(startup.name, startup.slug)


def list_startups_for_moderation(
    db: Session,
    actor: Profile | None,
    status: str | None = None,
    search: str | None = None,
) -> list[Startup]:
    """All startups (optionally one status), newest first."""
    require_admin_actor(actor)
    query = db.query(Startup).options(
        selectinload(Startup.category), selectinload(Startup.owner), selectinload(Startup.media)
    )
    if status:
        query = query.filter(Startup.status == _validate_status(status))
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(
            or_(
                Startup.name.ilike(pattern),
                Startup.description.ilike(pattern),
                Startup.slug.ilike(pattern),
            )
        )
    return query.order_by(Startup.created_at.desc()).all()


def spam_report(db: Session, actor: Profile | None, search: str | None = None) -> dict:
    """Score every startup and return the spam / potential_spam groups."""
    startups = list_startups_for_moderation(db, actor)
    return build_spam_report(startups, search=search)


def set_status(
    db: Session, actor: Profile | None, startup_id: str | UUID, status: str | None
) -> Startup:
    """Move one startup to status.

    Re-applying the current status is a plain write (updated_at still moves).

    Raises:
        AuthenticationError / AuthorizationError: actor missing or not admin.
        ValidationError: status not one of the four moderation states.
        NotFoundError: unknown startup.
        DependencyError: the update failed; the session is rolled back.
    """
    require_admin_actor(actor)
    new_status = _validate_status(status)
    sid = parse_startup_id(startup_id)
    startup = db.get(Startup, sid)
    if startup is None:
        raise NotFoundError("Startup not found")

    previous = startup.status
    try:
        startup.status = new_status
        startup.updated_at = datetime.now(timezone.utc)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Status update failed for startup %s: %s", sid, exc)
        raise DependencyError("Failed to update startup status", error=str(exc)) from exc

    logger.info("Startup %s status %s -> %s by %s", sid, previous, new_status, actor.id)
    _after_transition(db, actor, startup, previous)
    return startup


def bulk_set_status(
    db: Session,
    actor: Profile | None,
    startup_ids: list[str | UUID],
    status: str | None,
) -> list[Startup]:
    """Move several startups to one status in a single transaction.

    Either every startup changes or none does: an unknown id raises
    NotFoundError before anything is written.
    """
    require_admin_actor(actor)
    new_status = _validate_status(status)
    if not startup_ids:
        raise ValidationError("No startups selected")

    ids = list(dict.fromkeys(parse_startup_id(sid) for sid in startup_ids))
    startups = db.query(Startup).filter(Startup.id.in_(ids)).all()
    found = {s.id for s in startups}
    missing = [str(sid) for sid in ids if sid not in found]
    if missing:
        raise NotFoundError(f"Startup not found: {', '.join(missing)}")

    previous = {s.id: s.status for s in startups}
    now = datetime.now(timezone.utc)
    try:
        for startup in startups:
            startup.status = new_status
            startup.updated_at = now
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Bulk status update failed (%d startups): %s", len(startups), exc)
        raise DependencyError("Failed to update startup status", error=str(exc)) from exc

    logger.info("Bulk status -> %s for %d startups by %s", new_status, len(startups), actor.id)
    for startup in startups:
        _after_transition(db, actor, startup, previous[startup.id])
    return startups


def normalize_invalid_statuses(db: Session) -> list[dict]:
    """Reset any status outside the moderation states to pending.

    Returns one ``{"id", "name", "oldStatus"}`` entry per repaired startup.
    """
    broken = (
        db.query(Startup)
        .filter(or_(Startup.status.is_(None), Startup.status.not_in(sorted(VALID_STATUSES))))
        .all()
    )
    if not broken:
        return []

    repaired = [{"id": str(s.id), "name": s.name, "oldStatus": s.status} for s in broken]
    now = datetime.now(timezone.utc)
    try:
        for startup in broken:
            startup.status = StartupStatus.pending.value
            startup.updated_at = now
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Status normalization failed: %s", exc)
        raise DependencyError("Failed to update startups", error=str(exc)) from exc

    logger.info("Reset %d startup(s) with invalid status to pending", len(repaired))
    return repaired
