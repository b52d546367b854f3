"""
Explicit result cache for request-scoped matching.

A ResultCache is created by the caller and passed into the functions
that use it; there is no module-level cache. Entries expire after a
TTL and the oldest entries are evicted when the store grows too large.
"""

import threading
import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

from .config import DEFAULT_CONFIG, MatchConfig
from .models import InstitutionRecord


def pair_key(
    record_a: InstitutionRecord,
    record_b: InstitutionRecord,
    config: MatchConfig = DEFAULT_CONFIG,
) -> Tuple[InstitutionRecord, InstitutionRecord, MatchConfig]:
    # The config is part of the key: thresholds and weights change the result.
    return (record_a, record_b, config)


class ResultCache:
    """Key -> (value, timestamp) store with TTL expiry and size-bounded eviction."""

    def __init__(
        self,
        ttl_seconds: float = 3600,
        max_entries: int = 1000,
        evict_count: int = 100,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            ttl_seconds: Age after which an entry is treated as missing
            max_entries: Size above which the oldest entries are evicted
            evict_count: Number of oldest entries dropped per eviction
            clock: Time source in seconds
        """
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self.evict_count = evict_count
        self._clock = clock
        self._entries: Dict[Hashable, Tuple[Any, float]] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key) is not None

    def get(self, key: Hashable) -> Optional[Any]:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or now - entry[1] >= self.ttl_seconds:
                self.misses += 1
                return None
            self.hits += 1
            return entry[0]

    def set(self, key: Hashable, value: Any) -> None:
        now = self._clock()
        with self._lock:
            if len(self._entries) >= self.max_entries and key not in self._entries:
                self._evict_oldest()
            self._entries[key] = (value, now)

    def _evict_oldest(self) -> None:
        oldest = sorted(self._entries.items(), key=lambda item: item[1][1])
        for key, _ in oldest[: self.evict_count]:
            del self._entries[key]

    def purge_expired(self) -> int:
        """Drop expired entries. Returns the number removed."""
        now = self._clock()
        with self._lock:
            expired = [k for k, (_, ts) in self._entries.items() if now - ts >= self.ttl_seconds]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0
