"""In-memory TTL cache with a stale retention tier.

Freshness is decided lazily at read time: an entry past its TTL is a miss for
`get` but stays readable through `get_stale` until a newer `set` overwrites it.
Nothing is swept in the background. The backing LRUCache only bounds memory
for long-lived processes; it never expires entries on its own.
"""
import threading
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Generic, Optional, TypeVar

from cachetools import LRUCache

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """Cached value with its freshness window (monotonic seconds)."""
    value: T
    stored_at: float
    fresh_until: float

    def is_fresh(self, now: float) -> bool:
        return now < self.fresh_until


class TTLCacheStore(Generic[T]):
    """Process-local key -> CacheEntry store for one payload kind."""

    def __init__(
        self,
        name: str = "default",
        maxsize: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: LRUCache = LRUCache(maxsize=maxsize)

    def get(self, key: str) -> Optional[T]:
        """Return the value only while the entry is fresh."""
        with self._lock:
            entry = self._entries.get(key)
        if entry is None or not entry.is_fresh(self._clock()):
            return None
        return entry.value

    def get_stale(self, key: str) -> Optional[T]:
        """Return the value regardless of freshness."""
        with self._lock:
            entry = self._entries.get(key)
        return entry.value if entry is not None else None

    def set(self, key: str, value: T, ttl: timedelta | float) -> None:
        """Insert or overwrite the entry for key."""
        seconds = ttl.total_seconds() if isinstance(ttl, timedelta) else float(ttl)
        now = self._clock()
        with self._lock:
            self._entries[key] = CacheEntry(
                value=value, stored_at=now, fresh_until=now + seconds,
            )

    def entry(self, key: str) -> Optional[CacheEntry[T]]:
        with self._lock:
            return self._entries.get(key)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
