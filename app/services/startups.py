"""Startup service: create, update, delete and read startups.

Create and update take the wizard's three JSON blocks (already parsed into a
``StartupForm``) plus optional uploaded files. Uploads go through the file
upload helper; an upload that fails is logged and skipped so the rest of the
submission still goes through. Media rows are created with the same rules as
the media endpoints (see ``app.services.media``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.config import get_settings
from app.models.category import Category
from app.models.profile import Profile
from app.models.startup import Startup, StartupStatus
from app.schemas.startup import StartupForm, parse_funding_amount, parse_team_size
from app.services.audit import record_audit
from app.services.categories import get_looking_for_options
from app.services.email_service import notify_admin_startup_created
from app.services.errors import (
    AuthenticationError,
    ConflictError,
    DependencyError,
    NotFoundError,
    ServiceError,
    ValidationError,
)
from app.services.file_upload import upload_file
from app.services.media import release_blob, stage_media
from app.services.page_cache import revalidate_startup_pages
from app.services.slugs import check_slug_availability, generate_slug, generate_unique_slug
from app.services.social_links import stage_social_links
from app.services.startup_access import can_manage_startup, get_startup_for_write
from app.storage.base import BlobStore

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 12
MAX_PAGE_SIZE = 100


@dataclass
class UploadedFile:
    """One file part of the multipart request."""

    field: str
    filename: Optional[str]
    content_type: Optional[str]
    data: bytes


# Multipart field -> (media label, title). The label drives media reconciliation.
FILE_FIELDS: dict[str, tuple[str, Optional[str]]] = {
    "logo": ("logo", "Logo"),
    "coverImage": ("coverImage", "Cover Image"),
    "banner": ("coverImage", "Cover Image"),
    "gallery": ("image", None),
    "pitchDeck": ("pitchDeck", "Pitch Deck"),
}


def _load_options():
    return (
        selectinload(Startup.category),
        selectinload(Startup.media),
        selectinload(Startup.social_links),
        selectinload(Startup.looking_for),
    )


def _upload_all(
    store: Optional[BlobStore], user_id: UUID, files: Iterable[UploadedFile]
) -> list[tuple[str, str, Optional[str]]]:
    """Upload files; return (media label, url, title) for each one that succeeded."""
    uploaded: list[tuple[str, str, Optional[str]]] = []
    files = [f for f in files if f.data]
    if not files:
        return uploaded
    if store is None:
        logger.warning("No blob store configured; skipping %d upload(s)", len(files))
        return uploaded
    max_bytes = get_settings().max_upload_bytes
    for item in files:
        label, title = FILE_FIELDS.get(item.field, (item.field, None))
        try:
            url = upload_file(
                store,
                user_id=str(user_id),
                media_type=label,
                filename=item.filename,
                content_type=item.content_type,
                data=item.data,
                max_bytes=max_bytes,
            )
        except ServiceError as exc:
            logger.error("Skipping %s upload %r: %s", item.field, item.filename, exc.message)
            continue
        uploaded.append((label, url, title))
    return uploaded


def _media_entries(form: StartupForm, uploaded: list[tuple[str, str, Optional[str]]]):
    """All media to attach: hosted URLs from the form, then fresh uploads."""
    media = form.media_info
    entries: list[tuple[str, str, Optional[str]]] = []
    if media.cover_image_url:
        entries.append(("coverImage", media.cover_image_url, "Cover Image"))
    if media.logo_url:
        entries.append(("logo", media.logo_url, "Logo"))
    entries.extend(("image", url, None) for url in media.gallery_urls)
    if media.pitch_deck_url:
        entries.append(("pitchDeck", media.pitch_deck_url, "Pitch Deck"))
    if media.video_url:
        entries.append(("video", media.video_url, None))
    entries.extend(uploaded)
    return entries


def _require_category(db: Session, category_id: Optional[int]) -> Optional[Category]:
    if category_id is None:
        return None
    category = db.get(Category, category_id)
    if category is None:
        raise ValidationError("Unknown category")
    return category


def _apply_form_fields(db: Session, startup: Startup, form: StartupForm) -> None:
    basic, detailed = form.basic_info, form.detailed_info
    startup.name = basic.name
    startup.tagline = basic.tagline
    startup.category = _require_category(db, basic.category_id)
    startup.founding_date = date.fromisoformat(basic.founding_date) if basic.founding_date else None
    startup.website_url = basic.website_url
    startup.description = detailed.description
    startup.funding_stage = detailed.funding_stage
    startup.funding_amount = parse_funding_amount(detailed.funding_amount)
    startup.employee_count = parse_team_size(detailed.team_size)
    startup.location = detailed.location
    startup.looking_for = get_looking_for_options(db, detailed.looking_for)


def _stage_media_entries(db: Session, startup: Startup, entries) -> None:
    for label, url, title in entries:
        stage_media(db, startup, label, url, title=title)


def create_startup(
    db: Session,
    actor: Profile | None,
    form: StartupForm,
    files: Iterable[UploadedFile] = (),
    store: Optional[BlobStore] = None,
) -> Startup:
    """Create a pending startup owned by actor.

    The slug is derived from the submitted slug (or the name) and suffixed
    until unique. Returns the committed startup.
    """
    if actor is None:
        raise AuthenticationError("Unauthorized")

    uploaded = _upload_all(store, actor.id, files)
    slug = generate_unique_slug(db, form.basic_info.slug or form.basic_info.name)
    startup = Startup(slug=slug, status=StartupStatus.pending.value, user_id=actor.id)

    try:
        _apply_form_fields(db, startup, form)
        db.add(startup)
        _stage_media_entries(db, startup, _media_entries(form, uploaded))
        stage_social_links(db, startup, form.media_info.social_links or {})
        db.commit()
    except ServiceError:
        db.rollback()
        raise
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Startup create conflict for slug %s: %s", slug, exc)
        raise ConflictError("A startup with this slug already exists") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Startup create failed: %s", exc)
        raise DependencyError("Failed to create startup", error=str(exc)) from exc

    logger.info("Startup created: id=%s slug=%s user=%s", startup.id, startup.slug, actor.id)
    record_audit(
        db,
        user_id=actor.id,
        action="create",
        entity_type="startup",
        entity_id=startup.id,
        details={"name": startup.name, "slug": startup.slug},
    )
    notify_admin_startup_created(startup.name, startup.slug)
    return startup


def update_startup(
    db: Session,
    actor: Profile | None,
    startup_id: str | UUID,
    form: StartupForm,
    files: Iterable[UploadedFile] = (),
    store: Optional[BlobStore] = None,
) -> Startup:
    """Update a startup the actor may edit.

    Replaces fields, social links and looking-for tags; new uploads and URLs
    are attached to the existing media. Raises ConflictError if the requested
    slug belongs to another startup.
    """
    startup = get_startup_for_write(db, actor, startup_id)
    old_slug = startup.slug
    old_category = startup.category.slug if startup.category else None

    requested = generate_slug(form.basic_info.slug) if form.basic_info.slug else old_slug
    if requested != old_slug and not check_slug_availability(db, requested, startup.id):
        raise ConflictError("Slug is already taken")

    uploaded = _upload_all(store, actor.id, files)
    try:
        _apply_form_fields(db, startup, form)
        startup.slug = requested
        _stage_media_entries(db, startup, _media_entries(form, uploaded))
        if form.media_info.social_links is not None:
            stage_social_links(db, startup, form.media_info.social_links)
        startup.updated_at = datetime.now(timezone.utc)
        db.commit()
    except ServiceError:
        db.rollback()
        raise
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("Slug is already taken") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Startup update failed for %s: %s", startup_id, exc)
        raise DependencyError("Failed to update startup", error=str(exc)) from exc

    db.refresh(startup)
    record_audit(
        db,
        user_id=actor.id,
        action="update",
        entity_type="startup",
        entity_id=startup.id,
        details={"name": startup.name, "slug": startup.slug},
    )
    if startup.status == StartupStatus.approved.value:
        revalidate_startup_pages(old_slug, old_category)
        revalidate_startup_pages(startup.slug, startup.category.slug if startup.category else None)
    return startup


def delete_startup(
    db: Session,
    actor: Profile | None,
    startup_id: str | UUID,
    store: Optional[BlobStore] = None,
) -> None:
    """Hard-delete a startup and its dependent rows, then release the owner's unreferenced blobs."""
    startup = get_startup_for_write(db, actor, startup_id)
    sid, name, slug, owner_id = startup.id, startup.name, startup.slug, startup.user_id
    category_slug = startup.category.slug if startup.category else None
    was_public = startup.status == StartupStatus.approved.value
    urls = [m.url for m in startup.media]

    try:
        db.delete(startup)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Startup delete failed for %s: %s", sid, exc)
        raise DependencyError("Failed to delete startup", error=str(exc)) from exc

    logger.info("Startup deleted: id=%s slug=%s by=%s", sid, slug, actor.id)
    for url in dict.fromkeys(urls):
        release_blob(db, store, owner_id, url)

    record_audit(
        db,
        user_id=actor.id,
        action="delete",
        entity_type="startup",
        entity_id=sid,
        details={"name": name, "slug": slug},
    )
    if was_public:
        revalidate_startup_pages(slug, category_slug)


# ── Reads ────────────────────────────────────────────────────────────


def get_startup(db: Session, actor: Profile | None, startup_id: str | UUID) -> Startup:
    """Any-status read for the owner or an admin."""
    return get_startup_for_write(db, actor, startup_id)


def get_startup_by_slug(db: Session, slug: str, viewer: Profile | None = None) -> Startup:
    """Public detail lookup. Non-approved startups are visible to owner and admins only."""
    startup = db.query(Startup).options(*_load_options()).filter(Startup.slug == slug).first()
    if startup is None:
        raise NotFoundError("Startup not found")
    if startup.status != StartupStatus.approved.value and not (
        viewer is not None and can_manage_startup(viewer, startup)
    ):
        raise NotFoundError("Startup not found")
    return startup


def list_public_startups(
    db: Session,
    category: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> tuple[list[Startup], int]:
    """Approved startups, newest first. category is a category slug."""
    page = max(page, 1)
    page_size = min(max(page_size, 1), MAX_PAGE_SIZE)
    query = db.query(Startup).filter(Startup.status == StartupStatus.approved.value)
    if category:
        query = query.join(Startup.category).filter(Category.slug == category)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(
            or_(
                Startup.name.ilike(pattern),
                Startup.tagline.ilike(pattern),
                Startup.description.ilike(pattern),
            )
        )
    total = query.count()
    items = (
        query.options(*_load_options())
        .order_by(Startup.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return items, total


def list_user_startups(db: Session, actor: Profile | None) -> list[Startup]:
    """The actor's own startups, any status, newest first."""
    if actor is None:
        raise AuthenticationError("Unauthorized")
    return (
        db.query(Startup)
        .options(*_load_options())
        .filter(Startup.user_id == actor.id)
        .order_by(Startup.created_at.desc())
        .all()
    )
