from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Any

from app.config import get_settings


class ViewCache:
    """
    Rendered admin views keyed by (path, variant).

    Entries expire after ``ttl_seconds`` so rows written by the public intake
    flow show up without an admin action; ``revalidate(path)`` drops a path
    immediately after a moderation write. Free-text search variants make the
    key space open-ended, so expired entries are pruned on every write and at
    most ``max_entries`` are kept (soonest-to-expire evicted first).
    """

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = 256,
    ):
        self._ttl_seconds = ttl_seconds
        self._max_entries = max(1, max_entries)
        self._clock = clock
        self._entries: dict[tuple[str, str], tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, path: str, variant: str = "") -> Any | None:
        key = (path, variant)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at <= self._clock():
                del self._entries[key]
                return None
            return value

    def set(self, path: str, value: Any, variant: str = "") -> None:
        key = (path, variant)
        with self._lock:
            now = self._clock()
            expired = [k for k, (expires_at, _) in self._entries.items() if expires_at <= now]
            for k in expired:
                del self._entries[k]
            self._entries.pop(key, None)
            while len(self._entries) >= self._max_entries:
                oldest = min(self._entries, key=lambda k: self._entries[k][0])
                del self._entries[oldest]
            self._entries[key] = (now + self._ttl_seconds, value)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get_or_build(self, path: str, build: Callable[[], Any], variant: str = "") -> Any:
        cached = self.get(path, variant)
        if cached is not None:
            return cached
        value = build()
        self.set(path, value, variant)
        return value

    def revalidate(self, path: str) -> int:
        with self._lock:
            stale = [key for key in self._entries if key[0] == path]
            for key in stale:
                del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


_view_cache: ViewCache | None = None


def get_view_cache() -> ViewCache:
    global _view_cache
    if _view_cache is None:
        _view_cache = ViewCache(ttl_seconds=get_settings().view_cache_ttl_seconds)
    return _view_cache
