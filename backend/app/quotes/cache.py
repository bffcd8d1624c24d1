"""Time-boxed in-memory cache of resolution outcomes."""

from __future__ import annotations

import time
from collections.abc import Callable
from threading import Lock

from .exchanges import QUOTE_CACHE_TTL
from .models import CacheEntry, Outcome

Clock = Callable[[], float]


class QuoteCache:
    """Thread-safe map of canonical ticker -> last outcome, valid for a TTL.

    Expiry is lazy: a stale entry is treated as absent on read and dropped.
    Entries use the cache-wide TTL unless ``set`` overrides it per entry.
    ``sweep()`` removes stale entries in bulk for long-running processes.
    Concurrent writers for the same key race; the last ``set`` wins.
    """

    def __init__(self, ttl_seconds: float = QUOTE_CACHE_TTL, clock: Clock = time.time) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._lock = Lock()
        self._ttl = ttl_seconds
        self._clock = clock

    @property
    def ttl(self) -> float:
        return self._ttl

    def get(self, key: str) -> CacheEntry | None:
        """Return the live entry for key, or None if missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._is_expired(entry, self._clock()):
                del self._entries[key]
                return None
            return entry

    def set(self, key: str, outcome: Outcome, ttl_seconds: float | None = None) -> CacheEntry:
        """Store outcome under key, stamped with the current time. Overwrites.

        ``ttl_seconds`` overrides the cache-wide TTL for this entry only.
        """
        ttl = self._ttl if ttl_seconds is None else ttl_seconds
        with self._lock:
            entry = CacheEntry(key=key, outcome=outcome, stored_at=self._clock(), ttl=ttl)
            self._entries[key] = entry
            return entry

    def remove(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def sweep(self) -> int:
        """Drop every expired entry. Returns how many were removed."""
        with self._lock:
            now = self._clock()
            stale = [key for key, entry in self._entries.items() if self._is_expired(entry, now)]
            for key in stale:
                del self._entries[key]
            return len(stale)

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.stored_at >= entry.ttl

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
