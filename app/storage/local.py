"""Filesystem blob store for development and single-host deployments."""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath

from app.storage.base import BlobStore, StorageError

logger = logging.getLogger(__name__)


class LocalBlobStore(BlobStore):
    """Stores objects under ``root/bucket`` and serves them from ``public_base_url``."""

    def __init__(self, root: str | Path, bucket: str, public_base_url: str) -> None:
        self.bucket = bucket
        self.base_dir = Path(root).resolve() / bucket
        self.public_base_url = public_base_url.rstrip("/")

    def _resolve(self, path: str) -> Path:
        rel = PurePosixPath(path)
        if rel.is_absolute() or ".." in rel.parts:
            raise StorageError(f"Invalid storage path: {path}")
        return self.base_dir.joinpath(*rel.parts)

    def upload(self, path: str, data: bytes, content_type: str) -> None:
        target = self._resolve(path)
        if target.exists():
            raise StorageError(f"Object already exists: {path}")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            raise StorageError(f"Failed to write {path}: {exc}") from exc
        logger.debug("Stored %d bytes at %s (%s)", len(data), target, content_type)

    def delete(self, path: str) -> None:
        target = self._resolve(path)
        try:
            target.unlink()
        except FileNotFoundError:
            raise StorageError(f"Object not found: {path}") from None
        except OSError as exc:
            raise StorageError(f"Failed to delete {path}: {exc}") from exc

    def public_url(self, path: str) -> str:
        return f"{self.public_base_url}/{self.bucket}/{path}"

    def path_from_url(self, url: str) -> str | None:
        prefix = f"{self.public_base_url}/{self.bucket}/"
        if not url.startswith(prefix):
            return None
        return url[len(prefix) :] or None
