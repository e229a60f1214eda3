"""Supabase Storage backend over its REST API (httpx)."""

from __future__ import annotations

import logging
from urllib.parse import unquote, urlparse

import httpx

from app.storage.base import BlobStore, StorageError

logger = logging.getLogger(__name__)

CACHE_CONTROL = "3600"


class SupabaseBlobStore(BlobStore):
    """Blob store backed by a Supabase project's storage bucket."""

    def __init__(
        self,
        base_url: str,
        service_key: str,
        bucket: str,
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        if not base_url or not service_key:
            raise ValueError(
                "SUPABASE_URL and SUPABASE_SERVICE_KEY are required for the supabase storage backend."
            )
        self.base_url = base_url.rstrip("/")
        self.bucket = bucket
        self._client = client or httpx.Client(
            timeout=timeout,
            headers={
                "Authorization": f"Bearer {service_key}",
                "apikey": service_key,
            },
        )

    def _object_url(self, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/{self.bucket}/{path}"

    def upload(self, path: str, data: bytes, content_type: str) -> None:
        try:
            response = self._client.post(
                self._object_url(path),
                content=data,
                headers={
                    "Content-Type": content_type,
                    "Cache-Control": CACHE_CONTROL,
                    "x-upsert": "false",
                },
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise StorageError(
                f"Upload rejected ({exc.response.status_code}): {exc.response.text}"
            ) from exc
        except httpx.HTTPError as exc:
            raise StorageError(f"Upload failed: {exc}") from exc

    def delete(self, path: str) -> None:
        try:
            response = self._client.request(
                "DELETE",
                f"{self.base_url}/storage/v1/object/{self.bucket}",
                json={"prefixes": [path]},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise StorageError(
                f"Delete rejected ({exc.response.status_code}): {exc.response.text}"
            ) from exc
        except httpx.HTTPError as exc:
            raise StorageError(f"Delete failed: {exc}") from exc

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{path}"

    def path_from_url(self, url: str) -> str | None:
        parsed = urlparse(url)
        marker = f"/storage/v1/object/public/{self.bucket}/"
        idx = parsed.path.find(marker)
        if idx == -1:
            return None
        return unquote(parsed.path[idx + len(marker) :]) or None

    def close(self) -> None:
        self._client.close()
