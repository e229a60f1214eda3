"""Social links: one URL per (startup, platform), replaced wholesale."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.profile import Profile
from app.models.social_link import SocialLink
from app.models.startup import Startup
from app.schemas.startup import is_http_url
from app.services.audit import record_audit
from app.services.errors import DependencyError, ValidationError
from app.services.startup_access import get_startup_for_write

logger = logging.getLogger(__name__)


def clean_links(links: dict[str, str | None] | None) -> dict[str, str]:
    """Lower-case platforms, drop empty URLs, reject non-http(s) URLs."""
    cleaned: dict[str, str] = {}
    for platform, url in (links or {}).items():
        key = str(platform).strip().lower()
        value = (url or "").strip()
        if not key or not value:
            continue
        if not is_http_url(value):
            raise ValidationError(f"Invalid URL for {key}")
        cleaned[key] = value
    return cleaned


def stage_social_links(db: Session, startup: Startup, links: dict[str, str]) -> None:
    """Replace the startup's links in the session without committing."""
    if startup.social_links:
        startup.social_links.clear()
        # Deletes must reach the database before inserts reuse (startup, platform).
        db.flush()
    for platform, url in links.items():
        startup.social_links.append(SocialLink(platform=platform, url=url))


def replace_social_links(
    db: Session,
    actor: Profile | None,
    startup_id: str | UUID,
    links: dict[str, str | None] | None,
) -> list[SocialLink]:
    """Replace all social links of a startup the actor may edit.

    Delete and insert happen in one transaction; a failure leaves the old
    links in place.
    """
    startup = get_startup_for_write(db, actor, startup_id)
    cleaned = clean_links(links)
    try:
        stage_social_links(db, startup, cleaned)
        startup.updated_at = datetime.now(timezone.utc)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Social link update failed for startup %s: %s", startup.id, exc)
        raise DependencyError("Failed to update social links", error=str(exc)) from exc

    db.refresh(startup)
    record_audit(
        db,
        user_id=actor.id,
        action="update_social_links",
        entity_type="startup",
        entity_id=startup.id,
        details={"platforms": sorted(cleaned)},
    )
    return list(startup.social_links)
