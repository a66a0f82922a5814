"""In-memory cache for processed documents and registry lookups."""

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()


@dataclass(frozen=True)
class CacheLookup(Generic[T]):
    """A cached or freshly computed value, tagged with where it came from."""

    value: T
    cache_hit: bool


class ResultCache:
    """Thread-safe key/value cache with optional TTL and LRU bound.

    Keys are opaque to the cache; callers derive them (see compute_cache_key).
    Concurrent misses on the same key may both compute; the last store wins.
    """

    def __init__(
        self,
        ttl_seconds: float | None = None,
        max_entries: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize an empty cache."""
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float, Any]] = OrderedDict()
        self._lock = threading.Lock()
        # Bumped by invalidate/clear; a compute that started earlier is not stored.
        self._generations: dict[str, int] = {}
        self._epoch = 0
        self.hits = 0
        self.misses = 0

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "ResultCache":
        """Build a cache from the 'cache' section of a loaded config."""
        section = config.get("cache") or {}
        return cls(
            ttl_seconds=section.get("ttl_seconds"),
            max_entries=section.get("max_entries"),
        )

    def get_or_compute(
        self,
        key: str,
        compute: Callable[[], T],
        should_store: Callable[[T], bool] | None = None,
    ) -> CacheLookup[T]:
        """Return the cached value for key, computing and storing it on a miss."""
        with self._lock:
            entry = self._live_entry(key)
            if entry is not _MISSING:
                self.hits += 1
                self._entries.move_to_end(key)
                return CacheLookup(value=entry, cache_hit=True)
            self.misses += 1
            generation = self._generation(key)

        value = compute()
        if should_store is None or should_store(value):
            self._store(key, value, generation)
        return CacheLookup(value=value, cache_hit=False)

    def invalidate(self, key: str) -> bool:
        """Drop one key. Returns True if it was present."""
        with self._lock:
            removed = self._entries.pop(key, None) is not None
            self._generations[key] = self._generations.get(key, 0) + 1
        if removed:
            logger.info("Invalidated cache entry %s", key)
        return removed

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._entries.clear()
            self._epoch += 1

    def __len__(self) -> int:
        """Return the number of stored entries, expired ones included."""
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        """Check if a live entry exists for key."""
        if not isinstance(key, str):
            return False
        with self._lock:
            return self._live_entry(key) is not _MISSING

    def _live_entry(self, key: str) -> Any:
        # Caller holds the lock.
        entry = self._entries.get(key)
        if entry is None:
            return _MISSING
        stored_at, value = entry
        age = self._clock() - stored_at
        if self.ttl_seconds is not None and age > self.ttl_seconds:
            del self._entries[key]
            logger.debug("Cache entry %s expired", key)
            return _MISSING
        return value

    def _generation(self, key: str) -> tuple[int, int]:
        # Caller holds the lock.
        return self._epoch, self._generations.get(key, 0)

    def _store(self, key: str, value: Any, generation: tuple[int, int]) -> None:
        with self._lock:
            if self._generation(key) != generation:
                logger.debug("Discarding stale result for %s", key)
                return
            self._entries[key] = (self._clock(), value)
            self._entries.move_to_end(key)
            if self.max_entries is not None:
                while len(self._entries) > self.max_entries:
                    evicted, _ = self._entries.popitem(last=False)
                    logger.debug("Evicted cache entry %s", evicted)
