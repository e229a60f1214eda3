"""
Blob store abstraction.

Startup logos, images, documents and videos live in an external object store.
Paths are bucket-relative: ``{user_id}/{category}/{timestamp}-{random}.{ext}``.
"""

from abc import ABC, abstractmethod


class StorageError(Exception):
    """Raised when the blob store rejects or fails an operation."""


class BlobStore(ABC):
    """Abstract base for blob store backends."""

    @abstractmethod
    def upload(self, path: str, data: bytes, content_type: str) -> None:
        """Store bytes at path. Must not overwrite an existing object."""
        ...

    @abstractmethod
    def delete(self, path: str) -> None:
        """Remove the object at path."""
        ...

    @abstractmethod
    def public_url(self, path: str) -> str:
        """Return the public URL for path."""
        ...

    @abstractmethod
    def path_from_url(self, url: str) -> str | None:
        """Inverse of public_url. Returns None for URLs this store did not issue."""
        ...
