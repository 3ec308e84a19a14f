"""In-memory TTL cache for mfapi.in responses."""

import time
import threading
from typing import Any, Callable

from fund_tracker.config import NAV_CACHE_TTL, SEARCH_CACHE_TTL


class CacheService:
    """Thread-safe in-memory cache with TTL support.

    The scheduler and request handlers share the module-level instances below,
    hence the lock.
    """

    def __init__(self, default_ttl: int = 60):
        self._store: dict[str, tuple[Any, float]] = {}
        self._default_ttl = default_ttl
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if time.time() > expires_at:
                del self._store[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        ttl = ttl if ttl is not None else self._default_ttl
        with self._lock:
            self._store[key] = (value, time.time() + ttl)

    def get_or_load(
        self, key: str, loader: Callable[[], Any], ttl: int | None = None
    ) -> Any | None:
        """Return the cached value, or call `loader` and cache a non-None result.

        None results (failed lookups) are not cached so the next call retries.
        """
        value = self.get(key)
        if value is not None:
            return value
        value = loader()
        if value is not None:
            self.set(key, value, ttl)
        return value

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()


# Global cache instances
nav_cache = CacheService(default_ttl=NAV_CACHE_TTL)
search_cache = CacheService(default_ttl=SEARCH_CACHE_TTL)
