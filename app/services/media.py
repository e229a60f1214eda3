"""Media reconciliation: attach and detach logos, images, documents and videos.

Media lives in ``startup_media`` rows. The logo is the primary image row and
the pitch deck is the primary document row, so the denormalized view exposed
on ``Startup`` (logo_url, media_images, media_documents, media_videos,
pitch_deck_url) stays consistent by construction:

- attaching the same url twice is a no-op (unique on startup/type/url);
- attaching a logo adds it to the images and makes it the primary image;
- the first document, or any document whose label mentions "pitch", becomes
  the pitch deck;
- detaching a url removes its row; if it was the logo or pitch deck that
  pointer clears. No other document is promoted in its place.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.profile import Profile
from app.models.startup import Startup, StartupStatus
from app.models.startup_media import StartupMedia
from app.services.audit import record_audit
from app.services.errors import DependencyError, ValidationError
from app.services.file_upload import delete_file, path_from_url
from app.services.media_types import (
    CANONICAL_MEDIA_TYPES,
    MEDIA_DOCUMENT,
    MEDIA_IMAGE,
    MEDIA_LOGO,
    MEDIA_VIDEO,
    normalize_media_type,
)
from app.services.page_cache import revalidate_startup_pages
from app.services.startup_access import get_startup_for_write
from app.storage.base import BlobStore, StorageError

__all__ = [
    "MEDIA_DOCUMENT",
    "MEDIA_IMAGE",
    "MEDIA_LOGO",
    "MEDIA_VIDEO",
    "MediaState",
    "attach_media",
    "detach_media",
    "normalize_media_type",
    "release_blob",
    "stage_media",
]

logger = logging.getLogger(__name__)

PITCH_MARKER = "pitch"


@dataclass
class MediaState:
    """Denormalized media fields of one startup after a change."""

    logo_url: str | None = None
    media_images: list[str] = field(default_factory=list)
    media_documents: list[str] = field(default_factory=list)
    media_videos: list[str] = field(default_factory=list)
    pitch_deck_url: str | None = None

    @classmethod
    def from_startup(cls, startup: Startup) -> MediaState:
        return cls(
            logo_url=startup.logo_url,
            media_images=startup.media_images,
            media_documents=startup.media_documents,
            media_videos=startup.media_videos,
            pitch_deck_url=startup.pitch_deck_url,
        )

    def to_dict(self) -> dict:
        return asdict(self)


def _stored_type(canonical: str) -> str:
    """Logos are stored as image rows."""
    return MEDIA_IMAGE if canonical == MEDIA_LOGO else canonical


def _require_fields(raw_type: str | None, url: str | None) -> tuple[str, str, str]:
    """Return (raw_label, canonical_type, url) or raise ValidationError."""
    raw_label = str(raw_type).strip() if raw_type is not None else ""
    clean_url = str(url).strip() if url is not None else ""
    if not raw_label or not clean_url:
        raise ValidationError("Media type and URL are required")
    canonical = normalize_media_type(raw_label)
    if canonical not in CANONICAL_MEDIA_TYPES:
        raise ValidationError("Invalid media type")
    return raw_label, canonical, clean_url


def _set_primary(db: Session, startup: Startup, row: StartupMedia) -> None:
    """Make row the only primary row of its type."""
    if row.is_primary:
        return
    cleared = False
    for other in startup.media:
        if other is not row and other.media_type == row.media_type and other.is_primary:
            other.is_primary = False
            cleared = True
    if cleared:
        # Flush the demotion first; the partial unique index allows one primary per type.
        db.flush()
    row.is_primary = True


def stage_media(
    db: Session,
    startup: Startup,
    raw_type: str,
    url: str,
    title: str | None = None,
    description: str | None = None,
) -> StartupMedia:
    """Apply the attach rules to startup in the session without committing.

    raw_type may be any accepted label (e.g. "coverImage", "pitch_deck").
    Returns the (new or existing) media row for url.
    """
    raw_label, canonical, url = _require_fields(raw_type, url)
    stored_type = _stored_type(canonical)

    same_type = [m for m in startup.media if m.media_type == stored_type]
    row = next((m for m in same_type if m.url == url), None)
    if row is None:
        row = StartupMedia(
            media_type=stored_type,
            url=url,
            title=title,
            description=description,
            is_primary=False,
            position=max((m.position for m in same_type), default=-1) + 1,
        )
        startup.media.append(row)

    if canonical == MEDIA_LOGO:
        _set_primary(db, startup, row)
    elif canonical == MEDIA_DOCUMENT and (not same_type or PITCH_MARKER in raw_label.lower()):
        _set_primary(db, startup, row)
    return row


def _revalidate_if_public(startup: Startup) -> None:
    if startup.status == StartupStatus.approved.value:
        revalidate_startup_pages(
            startup.slug, startup.category.slug if startup.category else None
        )


def attach_media(
    db: Session,
    actor: Profile | None,
    startup_id: str | UUID,
    raw_type: str | None,
    url: str | None,
    title: str | None = None,
    description: str | None = None,
) -> MediaState:
    """Attach one media item to a startup the actor may edit.

    Ownership is checked before the payload: a non-owner gets 403 whatever
    the body contains.

    Raises:
        AuthenticationError, NotFoundError, AuthorizationError: access checks.
        ValidationError: mediaType/url missing or mediaType not recognised.
        DependencyError: the database write failed.
    """
    startup = get_startup_for_write(db, actor, startup_id)
    raw_label, _canonical, clean_url = _require_fields(raw_type, url)

    for attempt in range(2):
        try:
            stage_media(db, startup, raw_label, clean_url, title, description)
            startup.updated_at = datetime.now(timezone.utc)
            db.commit()
            break
        except IntegrityError as exc:
            # A concurrent request inserted the same url; re-run against fresh rows.
            db.rollback()
            if attempt == 1:
                logger.error("Media attach failed for startup %s: %s", startup.id, exc)
                raise DependencyError("Failed to update media", error=str(exc.orig)) from exc
            logger.warning("Media attach conflict for startup %s; retrying", startup.id)
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Media attach failed for startup %s: %s", startup.id, exc)
            raise DependencyError("Failed to update media", error=str(exc)) from exc

    db.refresh(startup)
    record_audit(
        db,
        user_id=actor.id,
        action="update_media",
        entity_type="startup",
        entity_id=startup.id,
        details={"mediaType": raw_label, "title": title, "url": clean_url},
    )
    _revalidate_if_public(startup)
    return MediaState.from_startup(startup)


def release_blob(db: Session, store: BlobStore | None, owner_id: UUID, url: str) -> bool:
    """Delete the blob behind url once nothing references it.

    Only blobs under the owner's own storage prefix are touched, and only when
    no ``startup_media`` row still points at the url. Storage failures are
    logged, not raised. Returns True when a blob was deleted.
    """
    if store is None:
        return False
    path = path_from_url(store, url)
    if path is None or not path.startswith(f"{owner_id}/"):
        logger.debug("Keeping blob for %s: not stored under owner %s", url, owner_id)
        return False
    if db.query(StartupMedia.id).filter(StartupMedia.url == url).first() is not None:
        logger.debug("Keeping blob for %s: still referenced", url)
        return False
    try:
        return delete_file(store, url)
    except StorageError as exc:
        logger.warning("Failed to delete blob for %s: %s", url, exc)
        return False


def detach_media(
    db: Session,
    actor: Profile | None,
    startup_id: str | UUID,
    raw_type: str | None,
    url: str | None,
    store: BlobStore | None = None,
) -> MediaState:
    """Detach one media item from a startup the actor may edit.

    After the row is removed the underlying blob is released (see
    ``release_blob``); a storage failure is logged and never undoes the detach.
    """
    startup = get_startup_for_write(db, actor, startup_id)
    raw_label, canonical, clean_url = _require_fields(raw_type, url)
    stored_type = _stored_type(canonical)

    removed = [m for m in startup.media if m.media_type == stored_type and m.url == clean_url]

    try:
        for row in removed:
            startup.media.remove(row)
        startup.updated_at = datetime.now(timezone.utc)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Media detach failed for startup %s: %s", startup.id, exc)
        raise DependencyError("Failed to remove media", error=str(exc)) from exc

    if removed:
        release_blob(db, store, startup.user_id, clean_url)
    db.refresh(startup)
    record_audit(
        db,
        user_id=actor.id,
        action="delete_media",
        entity_type="startup",
        entity_id=startup.id,
        details={"mediaType": raw_label, "url": clean_url, "removed": len(removed)},
    )
    _revalidate_if_public(startup)
    return MediaState.from_startup(startup)
