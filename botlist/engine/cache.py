"""
botlist.engine.cache — Time-Bounded In-Memory Cache
=====================================================

Process-wide memoization for third-party lookups (the enrichment API).
Entries are never evicted proactively: a read compares the elapsed time
against the TTL and drops the entry when it is stale.

The cache is advisory.  It is read and written without a lock; entries
are replaced wholesale, never merged, so a racing writer can only swap
one complete value for another.  Two concurrent misses for the same key
both go upstream.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

DEFAULT_TTL_SECONDS = 60 * 60


@dataclass(frozen=True, slots=True)
class CacheEntry:
    value: Any
    stored_at: float


class TTLCache:
    """Key → (value, timestamp) map with a lazy TTL check on read.

    Usage::

        cache = TTLCache(ttl_seconds=3600)
        cache.set("123", payload)
        cache.get("123")      # payload, until an hour has elapsed

    *clock* defaults to :func:`time.monotonic`; tests inject a fake.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> Any | None:
        """Return the cached value, or ``None`` if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at >= self.ttl_seconds:
            self._entries.pop(key, None)
            return None
        return entry.value

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = CacheEntry(value=value, stored_at=self._clock())

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def __len__(self) -> int:
        # Includes stale entries that have not been read since expiring.
        return len(self._entries)
