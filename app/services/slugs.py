"""Slug generation and uniqueness checks for startup URLs."""

from __future__ import annotations

import re
import uuid

from sqlalchemy.orm import Session

from app.models.startup import Startup

MAX_SLUG_LENGTH = 50
MIN_SLUG_LENGTH = 3
MAX_SUFFIX_ATTEMPTS = 100

_VALID_SLUG = re.compile(r"^[a-z0-9-]+$")


def generate_slug(text: str | None) -> str:
    """Normalize a display name into a URL-safe slug (max 50 chars).

    "Acme & Co. Labs" -> "acme-and-co-labs"
    """
    if not text:
        return ""
    slug = str(text).lower().strip()
    slug = re.sub(r"\s+", "-", slug)
    slug = slug.replace("&", "-and-")
    slug = re.sub(r"[^a-z0-9_\-]+", "", slug)
    slug = slug.replace("_", "-")
    slug = re.sub(r"-{2,}", "-", slug)
    slug = slug.strip("-")
    return slug[:MAX_SLUG_LENGTH]


def is_valid_slug(slug: str | None) -> bool:
    """Return True if slug has the allowed shape (length and charset)."""
    return bool(slug) and len(slug) >= MIN_SLUG_LENGTH and bool(_VALID_SLUG.match(slug))


def check_slug_availability(
    db: Session, slug: str, exclude_id: uuid.UUID | None = None
) -> bool:
    """Return True if slug is well-formed and not used by another startup.

    exclude_id: the startup being edited, so its own slug counts as available.
    """
    if not is_valid_slug(slug):
        return False
    query = db.query(Startup.id).filter(Startup.slug == slug)
    if exclude_id is not None:
        query = query.filter(Startup.id != exclude_id)
    return query.first() is None


def generate_unique_slug(
    db: Session, base_name: str, exclude_id: uuid.UUID | None = None
) -> str:
    """Return an available slug for base_name, appending -1, -2, ... when taken."""
    slug = generate_slug(base_name)
    if len(slug) < MIN_SLUG_LENGTH:
        slug = (slug + "-startup").strip("-")
    if check_slug_availability(db, slug, exclude_id):
        return slug

    stem = slug[: MAX_SLUG_LENGTH - 4].rstrip("-")
    for counter in range(1, MAX_SUFFIX_ATTEMPTS + 1):
        candidate = f"{stem}-{counter}"
        if check_slug_availability(db, candidate, exclude_id):
            return candidate
    return f"{stem[: MAX_SLUG_LENGTH - 9].rstrip('-')}-{uuid.uuid4().hex[:8]}"
