# src/cache/ttl_cache.py — v1
"""In-memory verdict cache bounded by size and entry age.

Entries expire ``ttl_seconds`` after insertion and are purged lazily when
read. When full, ``put`` evicts the oldest-inserted entry (FIFO, not LRU):
hits do not refresh an entry's position.

All operations are short and synchronous and run under a single lock, so
the cache may be shared by concurrent asyncio tasks and threads.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from typing import Callable

from spamsentinel.cache.models import CacheEntry, CacheStats
from spamsentinel.core.models import Verdict

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600.0
DEFAULT_MAX_ENTRIES = 100


class BoundedTTLCache:
    """Fingerprint-keyed verdict cache with TTL expiry and FIFO eviction.

    Args:
        ttl_seconds: Entry lifetime; a read at or after this age misses.
        max_entries: Capacity; inserting beyond it evicts the oldest entry.
        clock: Time source returning seconds (injectable for tests).
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self._ttl = float(ttl_seconds)
        self._max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._max_entries

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, fingerprint: str) -> Verdict | None:
        """Return a copy of the cached verdict, or None on miss or expiry."""
        with self._lock:
            entry = self._entries.get(fingerprint)
            if entry is None:
                return None
            if self._clock() - entry.created_at >= self._ttl:
                del self._entries[fingerprint]
                logger.debug("Cache entry %s expired", fingerprint[:12])
                return None
            entry.hit_count += 1
            return entry.verdict.model_copy(deep=True)

    def put(self, fingerprint: str, verdict: Verdict) -> None:
        """Store a verdict, evicting the oldest-inserted entry when full."""
        with self._lock:
            if fingerprint in self._entries:
                del self._entries[fingerprint]
            elif len(self._entries) >= self._max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Cache full, evicted %s", evicted[:12])
            self._entries[fingerprint] = CacheEntry(
                fingerprint=fingerprint,
                verdict=verdict.model_copy(deep=True),
                created_at=self._clock(),
            )

    def stats(self) -> CacheStats:
        """Occupancy and hit accounting over the stored entries."""
        with self._lock:
            entries = list(self._entries.values())
        if not entries:
            return CacheStats(capacity=self._max_entries)
        total_hits = sum(e.hit_count for e in entries)
        timestamps = [e.created_at for e in entries]
        return CacheStats(
            count=len(entries),
            total_hits=total_hits,
            hit_rate=total_hits / len(entries),
            oldest=min(timestamps),
            newest=max(timestamps),
            capacity=self._max_entries,
        )

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, fingerprint: object) -> bool:
        """Presence check that neither counts a hit nor purges."""
        with self._lock:
            return fingerprint in self._entries
