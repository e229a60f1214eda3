"""
Blob store factory.

Returns the configured BlobStore backend. The instance is cached so the
HTTP backend reuses its connection pool.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.storage.base import BlobStore, StorageError

if TYPE_CHECKING:
    from app.config import Settings

__all__ = ["BlobStore", "StorageError", "clear_blob_store_cache", "get_blob_store"]

logger = logging.getLogger(__name__)

_store_cache: dict[str, BlobStore] = {}


def get_blob_store(settings: Settings | None = None) -> BlobStore:
    """Return the BlobStore for the configured backend.

    Raises:
        ValueError: If the backend is unknown or its credentials are missing.
    """
    if settings is None:
        from app.config import get_settings

        settings = get_settings()

    backend = settings.storage_backend.lower()
    if backend in _store_cache:
        return _store_cache[backend]

    if backend == "local":
        from app.storage.local import LocalBlobStore

        store: BlobStore = LocalBlobStore(
            root=settings.storage_local_root,
            bucket=settings.storage_bucket,
            public_base_url=settings.storage_public_base_url,
        )
    elif backend == "supabase":
        from app.storage.supabase import SupabaseBlobStore

        store = SupabaseBlobStore(
            base_url=settings.supabase_url,
            service_key=settings.supabase_service_key,
            bucket=settings.storage_bucket,
            timeout=settings.storage_timeout,
        )
    else:
        raise ValueError(
            f"Unknown storage backend: '{backend}'. Supported backends: local, supabase"
        )

    _store_cache[backend] = store
    logger.info("Created blob store: %s bucket=%s", backend, settings.storage_bucket)
    return store


def clear_blob_store_cache() -> None:
    """Clear the store cache. Useful for testing."""
    _store_cache.clear()
