"""Canonical media types and label normalization."""

from __future__ import annotations

MEDIA_LOGO = "logo"
MEDIA_IMAGE = "image"
MEDIA_DOCUMENT = "document"
MEDIA_VIDEO = "video"

CANONICAL_MEDIA_TYPES: tuple[str, ...] = (MEDIA_LOGO, MEDIA_IMAGE, MEDIA_DOCUMENT, MEDIA_VIDEO)

# Lower-cased label -> canonical type. Unlisted labels pass through lower-cased.
_MEDIA_TYPE_ALIASES: dict[str, str] = {
    "logo": MEDIA_LOGO,
    "coverimage": MEDIA_IMAGE,
    "cover_image": MEDIA_IMAGE,
    "cover": MEDIA_IMAGE,
    "pitchdeck": MEDIA_DOCUMENT,
    "pitch_deck": MEDIA_DOCUMENT,
}


def normalize_media_type(raw_type: str | None) -> str:
    """Map a free-form media label onto a canonical type, case-insensitively.

    Unknown labels are returned lower-cased rather than rejected; callers decide
    whether the result is acceptable.
    """
    label = (raw_type or "").strip().lower()
    return _MEDIA_TYPE_ALIASES.get(label, label)
