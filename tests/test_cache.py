"""Tests for the in-process LRU cache used for sender summaries."""

from __future__ import annotations

import pytest

from dapdip.infrastructure.cache import TTLCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_least_recently_used_entry_is_evicted() -> None:
    cache = TTLCache(capacity=2, ttl_seconds=60, clock=FakeClock())
    cache.set(1, "one")
    cache.set(2, "two")
    assert cache.get(1) == "one"

    cache.set(3, "three")

    assert 2 not in cache
    assert cache.get(1) == "one"
    assert cache.get(3) == "three"
    assert cache.stats.evictions == 1
    assert len(cache) == 2


def test_entries_expire_after_ttl() -> None:
    clock = FakeClock()
    cache = TTLCache(capacity=4, ttl_seconds=30, clock=clock)
    cache.set("alice", {"name": "Alice"})

    clock.now += 29
    assert cache.get("alice") == {"name": "Alice"}

    clock.now += 1
    assert cache.get("alice") is None
    assert cache.stats.expirations == 1
    assert cache.stats.hits == 1
    assert cache.stats.misses == 1


def test_get_many_splits_hits_and_misses() -> None:
    cache = TTLCache(capacity=10, ttl_seconds=60, clock=FakeClock())
    cache.set(1, "one")
    cache.set(3, "three")

    found, missing = cache.get_many([1, 2, 3, 4])

    assert found == {1: "one", 3: "three"}
    assert missing == [2, 4]


def test_invalidate_and_clear() -> None:
    cache = TTLCache(capacity=10, ttl_seconds=60, clock=FakeClock())
    cache.set(1, "one")
    cache.set(2, "two")

    cache.invalidate(1)
    assert cache.get(1, "gone") == "gone"

    cache.clear()
    assert len(cache) == 0


@pytest.mark.parametrize(("capacity", "ttl"), [(0, 60), (-1, 60), (10, 0)])
def test_invalid_configuration_is_rejected(capacity, ttl) -> None:
    with pytest.raises(ValueError):
        TTLCache(capacity=capacity, ttl_seconds=ttl)
