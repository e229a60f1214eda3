"""Startup API routes: wizard, CRUD, media, social links and votes."""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from app.api.deps import get_blob_store_dep, get_current_user, get_db, require_auth
from app.models.profile import Profile
from app.schemas.media import MediaAttachResponse, MediaDetachResponse, MediaStateRead
from app.schemas.social import SocialLinksResponse, SocialLinksUpdate
from app.schemas.startup import (
    MessageResponse,
    SlugAvailability,
    SocialLinkRead,
    StartupCreateResponse,
    StartupRead,
    StartupUpdateResponse,
    StepValidationResult,
)
from app.schemas.vote import VoteRequest, VoteSummary
from app.services.media import attach_media, detach_media
from app.services.slugs import check_slug_availability, generate_slug, generate_unique_slug
from app.services.social_links import replace_social_links
from app.services.startup_access import parse_startup_id
from app.services.startups import (
    UploadedFile,
    create_startup,
    delete_startup,
    get_startup,
    update_startup,
)
from app.services.votes import cast_vote, remove_vote, vote_summary
from app.services.wizard import normalize_step, parse_startup_form, validate_step
from app.storage.base import BlobStore

logger = logging.getLogger(__name__)

router = APIRouter()


def _collect_files(**parts: UploadFile | list[UploadFile] | None) -> list[UploadedFile]:
    """Read multipart file parts into memory, keyed by their form field name."""
    files: list[UploadedFile] = []
    for field, value in parts.items():
        uploads = value if isinstance(value, list) else [value]
        for upload in uploads:
            if upload is None or not upload.filename:
                continue
            files.append(
                UploadedFile(
                    field=field,
                    filename=upload.filename,
                    content_type=upload.content_type,
                    data=upload.file.read(),
                )
            )
    return files


# ── Wizard helpers ──────────────────────────────────────────────────


@router.get("/slug-availability", response_model=SlugAvailability)
def api_slug_availability(
    slug: str = Query(..., min_length=1),
    exclude_id: Optional[str] = Query(None, alias="excludeId"),
    db: Session = Depends(get_db),
) -> SlugAvailability:
    """Check whether a slug is free; suggest an available one either way."""
    exclude = parse_startup_id(exclude_id) if exclude_id else None
    normalized = generate_slug(slug)
    available = normalized == slug and check_slug_availability(db, slug, exclude)
    suggestion = slug if available else generate_unique_slug(db, slug, exclude)
    return SlugAvailability(slug=slug, available=available, suggestion=suggestion)


@router.post("/wizard/{step}/validate", response_model=StepValidationResult)
def api_validate_step(step: str, payload: Optional[dict[str, Any]] = Body(None)):
    """Validate one wizard step without saving anything."""
    key = normalize_step(step)
    errors = validate_step(key, payload)
    return StepValidationResult(step=key, valid=not errors, errors=errors)


# ── CRUD ────────────────────────────────────────────────────────────


@router.post("", response_model=StartupCreateResponse, status_code=201)
def api_create_startup(
    basic_info: Optional[str] = Form(None, alias="basicInfo"),
    detailed_info: Optional[str] = Form(None, alias="detailedInfo"),
    media_info: Optional[str] = Form(None, alias="mediaInfo"),
    logo: Optional[UploadFile] = File(None),
    cover_image: Optional[UploadFile] = File(None, alias="coverImage"),
    banner: Optional[UploadFile] = File(None),
    gallery: Optional[list[UploadFile]] = File(None),
    pitch_deck: Optional[UploadFile] = File(None, alias="pitchDeck"),
    db: Session = Depends(get_db),
    user: Profile = Depends(require_auth),
    store: BlobStore = Depends(get_blob_store_dep),
) -> StartupCreateResponse:
    """Create a startup from the wizard's multipart submission."""
    form = parse_startup_form(basic_info, detailed_info, media_info)
    files = _collect_files(
        logo=logo, coverImage=cover_image, banner=banner, gallery=gallery, pitchDeck=pitch_deck
    )
    startup = create_startup(db, user, form, files, store)
    return StartupCreateResponse(
        id=startup.id, slug=startup.slug, message="Startup created successfully"
    )


@router.get("/{startup_id}", response_model=StartupRead)
def api_get_startup(
    startup_id: str,
    db: Session = Depends(get_db),
    user: Profile = Depends(require_auth),
):
    """Any-status read for the owner or an admin (dashboard edit page)."""
    return get_startup(db, user, startup_id)


@router.put("/{startup_id}", response_model=StartupUpdateResponse)
def api_update_startup(
    startup_id: str,
    basic_info: Optional[str] = Form(None, alias="basicInfo"),
    detailed_info: Optional[str] = Form(None, alias="detailedInfo"),
    media_info: Optional[str] = Form(None, alias="mediaInfo"),
    logo: Optional[UploadFile] = File(None),
    cover_image: Optional[UploadFile] = File(None, alias="coverImage"),
    banner: Optional[UploadFile] = File(None),
    gallery: Optional[list[UploadFile]] = File(None),
    pitch_deck: Optional[UploadFile] = File(None, alias="pitchDeck"),
    db: Session = Depends(get_db),
    user: Profile = Depends(require_auth),
    store: BlobStore = Depends(get_blob_store_dep),
) -> StartupUpdateResponse:
    """Update a startup from the same multipart shape as create."""
    form = parse_startup_form(basic_info, detailed_info, media_info)
    files = _collect_files(
        logo=logo, coverImage=cover_image, banner=banner, gallery=gallery, pitchDeck=pitch_deck
    )
    startup = update_startup(db, user, startup_id, form, files, store)
    return StartupUpdateResponse(
        message="Startup updated successfully",
        id=startup.id,
        startup=StartupRead.model_validate(startup),
    )


@router.delete("/{startup_id}", response_model=MessageResponse)
def api_delete_startup(
    startup_id: str,
    db: Session = Depends(get_db),
    user: Profile = Depends(require_auth),
    store: BlobStore = Depends(get_blob_store_dep),
) -> MessageResponse:
    """Delete a startup and everything attached to it."""
    delete_startup(db, user, startup_id, store)
    return MessageResponse(message="Startup deleted successfully")


# ── Media ───────────────────────────────────────────────────────────


@router.post("/{startup_id}/media", response_model=MediaAttachResponse)
def api_attach_media(
    startup_id: str,
    payload: Optional[dict[str, Any]] = Body(None),
    db: Session = Depends(get_db),
    user: Profile = Depends(require_auth),
) -> MediaAttachResponse:
    """Attach a logo, image, document or video URL to a startup."""
    payload = payload or {}
    media_type = payload.get("mediaType")
    url = payload.get("url")
    state = attach_media(
        db,
        user,
        startup_id,
        media_type,
        url,
        title=payload.get("title"),
        description=payload.get("description"),
    )
    return MediaAttachResponse(
        message="Media added successfully",
        id=parse_startup_id(startup_id),
        url=str(url).strip(),
        media_type=str(media_type).strip(),
        media=MediaStateRead(**state.to_dict()),
    )


@router.delete("/{startup_id}/media", response_model=MediaDetachResponse)
def api_detach_media(
    startup_id: str,
    payload: Optional[dict[str, Any]] = Body(None),
    db: Session = Depends(get_db),
    user: Profile = Depends(require_auth),
    store: BlobStore = Depends(get_blob_store_dep),
) -> MediaDetachResponse:
    """Detach a media URL from a startup and delete its blob if we host it."""
    payload = payload or {}
    state = detach_media(
        db, user, startup_id, payload.get("mediaType"), payload.get("url"), store=store
    )
    return MediaDetachResponse(
        message="Media removed successfully",
        id=parse_startup_id(startup_id),
        media=MediaStateRead(**state.to_dict()),
    )


# ── Social links ────────────────────────────────────────────────────


@router.put("/{startup_id}/social-links", response_model=SocialLinksResponse)
def api_replace_social_links(
    startup_id: str,
    data: SocialLinksUpdate,
    db: Session = Depends(get_db),
    user: Profile = Depends(require_auth),
) -> SocialLinksResponse:
    """Replace every social link of a startup."""
    links = replace_social_links(db, user, startup_id, data.social_links)
    return SocialLinksResponse(
        message="Social links updated successfully",
        social_links=[SocialLinkRead.model_validate(link) for link in links],
    )


# ── Votes ───────────────────────────────────────────────────────────


@router.get("/{startup_id}/votes", response_model=VoteSummary)
def api_vote_summary(
    startup_id: str,
    db: Session = Depends(get_db),
    user: Optional[Profile] = Depends(get_current_user),
) -> VoteSummary:
    """Up/down vote counts plus the caller's own vote."""
    return VoteSummary(**_summary_fields(vote_summary(db, startup_id, user)))


@router.post("/{startup_id}/vote", response_model=VoteSummary)
def api_cast_vote(
    startup_id: str,
    data: VoteRequest,
    db: Session = Depends(get_db),
    user: Profile = Depends(require_auth),
) -> VoteSummary:
    return VoteSummary(**_summary_fields(cast_vote(db, user, startup_id, data.is_upvote)))


@router.delete("/{startup_id}/vote", response_model=VoteSummary)
def api_remove_vote(
    startup_id: str,
    db: Session = Depends(get_db),
    user: Profile = Depends(require_auth),
) -> VoteSummary:
    return VoteSummary(**_summary_fields(remove_vote(db, user, startup_id)))


def _summary_fields(summary: dict) -> dict:
    return {
        "upvotes": summary["upvotes"],
        "downvotes": summary["downvotes"],
        "user_vote": summary["userVote"],
    }
