"""Bounded least-recently-used cache with per-entry expiry.

Entries are evicted when the cache grows past ``max_size`` (oldest use
first) or when they are older than ``max_age`` at lookup time. All
operations are guarded by a lock so the cache can be shared between
crawler threads.
"""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from datetime import timedelta
from typing import Any, Callable, Generic, Hashable, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

_MISSING = object()


class LRUCache(Generic[K, V]):
    """Thread-safe LRU cache with a fixed entry cap and time-based expiry.

    Usage:
        cache = LRUCache(max_size=1000, max_age=timedelta(hours=1))
        cache.set("https://example.com", True)
        cache.get("https://example.com")  # -> True
    """

    def __init__(
        self,
        max_size: int,
        max_age: timedelta | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the cache.

        Args:
            max_size: Maximum number of entries kept.
            max_age: Entries older than this are treated as absent. ``None``
                disables expiry.
            clock: Monotonic time source in seconds (injectable for tests).
        """
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self._max_age_seconds = max_age.total_seconds() if max_age is not None else None
        self._clock = clock
        self._entries: OrderedDict[K, tuple[float, V]] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: K) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def get(self, key: K, default: Any = None) -> V | Any:
        """Return the cached value for ``key`` and mark it recently used."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return default
            stored_at, value = entry
            if self._is_expired(stored_at):
                del self._entries[key]
                return default
            self._entries.move_to_end(key)
            return value

    def set(self, key: K, value: V) -> None:
        """Store ``value`` under ``key``, evicting the least recently used entry if full."""
        with self._lock:
            self._entries[key] = (self._clock(), value)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_size:
                self._entries.popitem(last=False)

    def delete(self, key: K) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _is_expired(self, stored_at: float) -> bool:
        if self._max_age_seconds is None:
            return False
        return self._clock() - stored_at > self._max_age_seconds
