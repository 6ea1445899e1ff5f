"""Tests for the LRU cache used by the robots.txt policy cache."""

from __future__ import annotations

from datetime import timedelta

import pytest

from keyword_batch.caching import LRUCache


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TestLRUCache:
    """Tests for LRUCache."""

    def test_get_missing_returns_default(self):
        """Absent keys return the supplied default."""
        cache = LRUCache(max_size=2)
        assert cache.get("missing") is None
        assert cache.get("missing", False) is False

    def test_set_and_get(self):
        """Stored values are returned."""
        cache = LRUCache(max_size=2)
        cache.set("https://example.com", True)
        assert cache.get("https://example.com") is True
        assert "https://example.com" in cache
        assert len(cache) == 1

    def test_stores_false_values(self):
        """False is a real cached value, distinct from a miss."""
        cache = LRUCache(max_size=2)
        cache.set("https://example.com", False)
        assert cache.get("https://example.com", "miss") is False

    def test_evicts_least_recently_used(self):
        """The entry used longest ago is evicted first."""
        cache = LRUCache(max_size=2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.get("a")
        cache.set("c", 3)

        assert "a" in cache
        assert "b" not in cache
        assert "c" in cache
        assert len(cache) == 2

    def test_entries_expire(self):
        """Entries older than max_age are treated as absent and dropped."""
        clock = FakeClock()
        cache = LRUCache(max_size=10, max_age=timedelta(hours=1), clock=clock)
        cache.set("a", 1)

        clock.advance(3599)
        assert cache.get("a") == 1

        clock.advance(2)
        assert cache.get("a") is None
        assert len(cache) == 0

    def test_set_refreshes_timestamp(self):
        """Overwriting an entry restarts its age."""
        clock = FakeClock()
        cache = LRUCache(max_size=10, max_age=timedelta(seconds=10), clock=clock)
        cache.set("a", 1)
        clock.advance(8)
        cache.set("a", 2)
        clock.advance(8)

        assert cache.get("a") == 2

    def test_delete_and_clear(self):
        """delete removes one entry; clear removes all."""
        cache = LRUCache(max_size=10)
        cache.set("a", 1)
        cache.set("b", 2)

        cache.delete("a")
        cache.delete("not-there")
        assert "a" not in cache

        cache.clear()
        assert len(cache) == 0

    def test_rejects_zero_size(self):
        """A cache must hold at least one entry."""
        with pytest.raises(ValueError):
            LRUCache(max_size=0)
