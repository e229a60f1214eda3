"""File upload helper: MIME whitelist, storage paths, upload/delete via the blob store."""

from __future__ import annotations

import logging
import secrets
import time
from collections.abc import Callable

from app.services.errors import DependencyError, ValidationError
from app.services.media_types import (
    MEDIA_DOCUMENT,
    MEDIA_IMAGE,
    MEDIA_LOGO,
    MEDIA_VIDEO,
    normalize_media_type,
)
from app.storage.base import BlobStore, StorageError

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]

_IMAGE_MIME_TYPES = frozenset(
    {"image/jpeg", "image/png", "image/gif", "image/webp", "image/svg+xml"}
)

ALLOWED_MIME_TYPES: dict[str, frozenset[str]] = {
    MEDIA_LOGO: _IMAGE_MIME_TYPES,
    MEDIA_IMAGE: _IMAGE_MIME_TYPES,
    MEDIA_DOCUMENT: frozenset(
        {
            "application/pdf",
            "application/vnd.ms-powerpoint",
            "application/vnd.openxmlformats-officedocument.presentationml.presentation",
            "application/msword",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        }
    ),
    MEDIA_VIDEO: frozenset({"video/mp4", "video/webm", "video/quicktime"}),
}

STORAGE_CATEGORIES: dict[str, str] = {
    MEDIA_LOGO: "logos",
    MEDIA_IMAGE: "images",
    MEDIA_DOCUMENT: "documents",
    MEDIA_VIDEO: "videos",
}

# Fallback extension when the filename carries none
_DEFAULT_EXTENSIONS: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/svg+xml": "svg",
    "application/pdf": "pdf",
    "application/vnd.ms-powerpoint": "ppt",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": "pptx",
    "application/msword": "doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "video/mp4": "mp4",
    "video/webm": "webm",
    "video/quicktime": "mov",
}


def validate_mime_type(media_type: str, content_type: str | None) -> str:
    """Return the canonical media type if content_type is allowed for it.

    Raises ValidationError for unknown media types or disallowed MIME types.
    """
    canonical = normalize_media_type(media_type)
    allowed = ALLOWED_MIME_TYPES.get(canonical)
    if allowed is None:
        raise ValidationError(f"Invalid media type: {media_type}")
    mime = (content_type or "").split(";")[0].strip().lower()
    if mime not in allowed:
        raise ValidationError(f"File type '{mime or 'unknown'}' is not allowed for {canonical}")
    return canonical


def _extension(filename: str | None, content_type: str) -> str:
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[1].lower()
        if ext.isalnum() and len(ext) <= 8:
            return ext
    return _DEFAULT_EXTENSIONS.get(content_type, "bin")


def build_storage_path(
    user_id: str,
    media_type: str,
    filename: str | None,
    content_type: str = "",
    *,
    now_ms: int | None = None,
) -> str:
    """Return ``{user_id}/{category}/{timestamp}-{random}.{ext}``."""
    canonical = normalize_media_type(media_type)
    category = STORAGE_CATEGORIES.get(canonical, "other")
    timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
    token = secrets.token_hex(6)
    return f"{user_id}/{category}/{timestamp}-{token}.{_extension(filename, content_type)}"


def upload_file(
    store: BlobStore,
    *,
    user_id: str,
    media_type: str,
    filename: str | None,
    content_type: str | None,
    data: bytes,
    max_bytes: int | None = None,
    on_progress: ProgressCallback | None = None,
) -> str:
    """Validate and upload one file; return its public URL.

    Progress is synthetic: 0 on start, 30 once validated, 100 when stored.
    """

    def _report(pct: int) -> None:
        if on_progress is not None:
            on_progress(pct)

    _report(0)
    canonical = validate_mime_type(media_type, content_type)
    if not data:
        raise ValidationError("Uploaded file is empty")
    if max_bytes is not None and len(data) > max_bytes:
        raise ValidationError(f"File exceeds maximum size of {max_bytes} bytes")
    mime = (content_type or "").split(";")[0].strip().lower()
    path = build_storage_path(user_id, canonical, filename, mime)
    _report(30)

    try:
        store.upload(path, data, mime)
    except StorageError as exc:
        logger.error("Upload failed for %s: %s", path, exc)
        raise DependencyError("Failed to upload file", error=str(exc)) from exc

    _report(100)
    url = store.public_url(path)
    logger.info("Uploaded %s (%d bytes) -> %s", canonical, len(data), path)
    return url


def path_from_url(store: BlobStore, url: str) -> str | None:
    """Return the bucket-relative storage path for a public URL, or None."""
    if not url:
        return None
    return store.path_from_url(url)


def delete_file(store: BlobStore, url: str) -> bool:
    """Delete the blob behind url.

    Returns False when the URL was not issued by this store (e.g. an external
    video link). Raises StorageError when the store fails.
    """
    path = path_from_url(store, url)
    if path is None:
        return False
    store.delete(path)
    logger.info("Deleted blob %s", path)
    return True
