"""Generic LRU cache with TTL and statistics.

Holds live prompt-shell sessions: least recently used sessions are evicted
once the size limit is reached, idle ones expire after the TTL.
"""

import time
from typing import Callable, Generic, TypeVar, Any
from collections import OrderedDict
from dataclasses import dataclass

T = TypeVar("T")


@dataclass
class Stats:
    """Cache statistics."""

    size: int = 0
    max_size: int = 0
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    expirations: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate hit rate (0.0 to 1.0)."""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def to_dict(self) -> dict[str, Any]:
        """Export as dictionary."""
        return {
            "size": self.size,
            "max_size": self.max_size,
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "expirations": self.expirations,
            "hit_rate": self.hit_rate,
        }


class LRUCache(Generic[T]):
    """
    LRU cache with TTL support and statistics tracking.

    Reads refresh both recency and the TTL clock, so an entry only expires
    after ``ttl_seconds`` without access.

    Examples:
        >>> cache = LRUCache[str](max_size=2)
        >>> cache.set("a", "1")
        >>> cache.get("a")
        '1'
    """

    def __init__(
        self,
        max_size: int = 100,
        ttl_seconds: int | None = None,
        on_evict: Callable[[str, T], None] | None = None,
    ):
        """
        Initialize LRU cache.

        Args:
            max_size: Maximum number of entries
            ttl_seconds: Idle time-to-live in seconds (None = no expiration)
            on_evict: Called with (key, value) when an entry is evicted or expires
        """
        if max_size <= 0:
            raise ValueError("max_size must be positive")

        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self.on_evict = on_evict

        self._entries: OrderedDict[str, tuple[T, float]] = OrderedDict()
        self._stats = Stats(max_size=max_size)

    def _is_expired(self, timestamp: float) -> bool:
        if self.ttl_seconds is None:
            return False
        return time.time() - timestamp >= self.ttl_seconds

    def _drop(self, key: str) -> None:
        value, _ = self._entries.pop(key)
        self._stats.size = len(self._entries)
        if self.on_evict is not None:
            self.on_evict(key, value)

    def get(self, key: str) -> T | None:
        """
        Get cached value if available and not expired.

        Returns:
            Cached value or None if not found/expired
        """
        entry = self._entries.get(key)
        if entry is None:
            self._stats.misses += 1
            return None

        value, timestamp = entry
        if self._is_expired(timestamp):
            self._stats.expirations += 1
            self._stats.misses += 1
            self._drop(key)
            return None

        self._entries[key] = (value, time.time())
        self._entries.move_to_end(key)
        self._stats.hits += 1
        return value

    def set(self, key: str, value: T) -> None:
        """Cache value with current timestamp."""
        if key in self._entries:
            del self._entries[key]

        self._entries[key] = (value, time.time())

        if len(self._entries) > self.max_size:
            oldest = next(iter(self._entries))
            self._stats.evictions += 1
            self._drop(oldest)

        self._stats.size = len(self._entries)

    def delete(self, key: str) -> bool:
        """
        Delete entry from cache.

        Returns:
            True if deleted, False if not found
        """
        if key in self._entries:
            del self._entries[key]
            self._stats.size = len(self._entries)
            return True
        return False

    def purge_expired(self) -> int:
        """Remove every expired entry, returning how many were dropped."""
        expired = [key for key, (_, ts) in self._entries.items() if self._is_expired(ts)]
        for key in expired:
            self._stats.expirations += 1
            self._drop(key)
        return len(expired)

    def clear(self) -> None:
        """Clear entire cache."""
        self._entries.clear()
        self._stats.size = 0

    @property
    def stats(self) -> Stats:
        """Get cache statistics."""
        return self._stats

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        """Check if key exists (doesn't update LRU order)."""
        return key in self._entries


__all__ = ["LRUCache", "Stats"]
