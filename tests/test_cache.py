"""Tests for cache module."""

import pytest
from hypothesis import given, strategies as st

from core import cache as cache_module
from core.cache import LRUCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock(monkeypatch):
    fake = FakeClock()
    monkeypatch.setattr(cache_module.time, "time", fake)
    return fake


def test_lru_basic():
    """Test basic cache operations."""
    cache = LRUCache[str](max_size=3)

    cache.set("a", "value_a")
    cache.set("b", "value_b")
    cache.set("c", "value_c")

    assert cache.get("a") == "value_a"
    assert cache.get("b") == "value_b"
    assert cache.get("c") == "value_c"
    assert len(cache) == 3


def test_lru_order():
    """Most recently used entries survive eviction."""
    evicted = []
    cache = LRUCache[str](max_size=2, on_evict=lambda key, value: evicted.append(key))

    cache.set("a", "value_a")
    cache.set("b", "value_b")
    _ = cache.get("a")
    cache.set("c", "value_c")  # Evicts "b"

    assert evicted == ["b"]
    assert cache.get("a") == "value_a"
    assert cache.get("b") is None
    assert cache.stats.evictions == 1


def test_ttl_expiration(clock):
    """Idle entries expire and are reported through on_evict."""
    evicted = []
    cache = LRUCache[str](max_size=10, ttl_seconds=60, on_evict=lambda key, value: evicted.append(key))
    cache.set("key", "value")

    clock.now += 61

    assert cache.get("key") is None
    assert evicted == ["key"]
    assert cache.stats.expirations == 1


def test_read_refreshes_ttl(clock):
    """Reads restart the idle clock."""
    cache = LRUCache[str](max_size=10, ttl_seconds=60)
    cache.set("key", "value")

    clock.now += 45
    assert cache.get("key") == "value"
    clock.now += 45

    assert cache.get("key") == "value"


def test_purge_expired(clock):
    cache = LRUCache[str](max_size=10, ttl_seconds=60)
    cache.set("old", "1")
    clock.now += 30
    cache.set("new", "2")
    clock.now += 40

    assert cache.purge_expired() == 1
    assert "old" not in cache
    assert "new" in cache
    assert cache.stats.size == 1


def test_lru_update():
    """Test updating existing entry."""
    cache = LRUCache[str](max_size=10)

    cache.set("key", "value1")
    cache.set("key", "value2")

    assert cache.get("key") == "value2"
    assert len(cache) == 1


def test_lru_delete():
    """Deleting is not an eviction."""
    evicted = []
    cache = LRUCache[str](max_size=10, on_evict=lambda key, value: evicted.append(key))

    cache.set("key", "value")
    assert cache.delete("key") is True
    assert cache.get("key") is None
    assert cache.delete("key") is False  # Already deleted
    assert evicted == []


def test_lru_clear():
    cache = LRUCache[str](max_size=10)
    cache.set("a", "value_a")
    cache.set("b", "value_b")

    cache.clear()

    assert len(cache) == 0
    assert cache.stats.size == 0


def test_stats():
    """Test statistics tracking."""
    cache = LRUCache[str](max_size=10)
    cache.set("key", "value")

    _ = cache.get("key")  # Hit
    _ = cache.get("missing")  # Miss

    stats = cache.stats.to_dict()
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["hit_rate"] == 0.5
    assert stats["max_size"] == 10
    assert stats["expirations"] == 0


def test_invalid_max_size():
    with pytest.raises(ValueError):
        LRUCache[str](max_size=0)


@given(st.lists(st.text(min_size=1, max_size=10), min_size=1, max_size=50))
def test_cache_keeps_most_recent(keys):
    """Property test: the most recent ``max_size`` distinct keys are kept."""
    cache = LRUCache[str](max_size=5)

    for key in keys:
        cache.set(key, f"value_{key}")

    recent = list(dict.fromkeys(reversed(keys)))[:5]
    for key in recent:
        assert cache.get(key) == f"value_{key}"
    assert len(cache) == min(5, len(set(keys)))
