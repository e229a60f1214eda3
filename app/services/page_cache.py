"""In-process cache for public page payloads, invalidated by path.

Public listing/detail endpoints cache their response under the page path they
back ("/", "/startups", "/categories/<slug>", "/startups/<slug>"). Writes that
change what those pages show call ``revalidate`` with the affected paths.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any

logger = logging.getLogger(__name__)

HOME_PATH = "/"
LISTING_PATH = "/startups"


def startup_page_path(slug: str) -> str:
    return f"/startups/{slug}"


def category_page_path(slug: str) -> str:
    return f"/categories/{slug}"


class PageCache:
    """TTL cache keyed by (path, variant). variant is e.g. the query string.

    Expired entries are swept on every ``set``; past ``max_entries`` the
    oldest entries are evicted first.
    """

    def __init__(self, ttl_seconds: int | None = None, max_entries: int | None = None) -> None:
        self._ttl_override = ttl_seconds
        self._max_override = max_entries
        self._entries: dict[tuple[str, str], tuple[float, Any]] = {}
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> int:
        if self._ttl_override is not None:
            return self._ttl_override
        from app.config import get_settings

        return get_settings().page_cache_ttl_seconds

    @property
    def max_entries(self) -> int:
        if self._max_override is not None:
            return self._max_override
        from app.config import get_settings

        return get_settings().page_cache_max_entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, path: str, variant: str = "") -> Any | None:
        with self._lock:
            entry = self._entries.get((path, variant))
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at < time.monotonic():
                del self._entries[(path, variant)]
                return None
            return value

    def set(self, path: str, value: Any, variant: str = "") -> None:
        ttl = self.ttl_seconds
        limit = self.max_entries
        if ttl <= 0 or limit <= 0:
            return
        now = time.monotonic()
        key = (path, variant)
        with self._lock:
            expired = [k for k, (expires_at, _) in self._entries.items() if expires_at < now]
            for k in expired:
                del self._entries[k]
            # Re-insert so the dict's order stays oldest-first
            self._entries.pop(key, None)
            while len(self._entries) >= limit:
                del self._entries[next(iter(self._entries))]
            self._entries[key] = (now + ttl, value)

    def revalidate(self, *paths: str) -> int:
        """Drop every cached variant of the given paths. Returns entries removed."""
        targets = set(paths)
        with self._lock:
            stale = [key for key in self._entries if key[0] in targets]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.debug("Revalidated %d cached page(s) for %s", len(stale), sorted(targets))
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


page_cache = PageCache()


def revalidate_startup_pages(slug: str | None, category_slug: str | None = None) -> None:
    """Invalidate the public pages that list or display one startup."""
    paths = [HOME_PATH, LISTING_PATH]
    if slug:
        paths.append(startup_page_path(slug))
    if category_slug:
        paths.append(category_page_path(category_slug))
    page_cache.revalidate(*paths)
