# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""In-memory TTL store with insert-once semantics and a background sweep.

Entries carry absolute wall-clock expiry times so they can be written to
and compared against a snapshot taken by another process.
"""

from __future__ import annotations

import logging
import threading
import weakref
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

from snapcache.core.constants import DEFAULT_CLEANUP_INTERVAL, DEFAULT_EXPIRATION
from snapcache.core.exceptions import KeyConflictError
from snapcache.models.cache import CacheEntry, utcnow
from snapcache.store.base import TTLStore

logger = logging.getLogger("snapcache.store.memory")


class MemoryTTLStore(TTLStore):
    """Thread-safe dict-backed TTL store.

    Args:
        default_expiration: TTL applied when ``add`` gets no explicit TTL.
        cleanup_interval: Period of the background expired-entry sweep.
            A non-positive interval disables the sweep.
        clock: Returns the current time as an aware ``datetime``.
    """

    def __init__(
        self,
        default_expiration: timedelta = DEFAULT_EXPIRATION,
        cleanup_interval: timedelta = DEFAULT_CLEANUP_INTERVAL,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store: dict[str, CacheEntry] = {}
        self._lock = threading.RLock()
        self._clock = clock
        self._default_expiration = default_expiration
        self._stop = threading.Event()
        self._janitor: threading.Thread | None = None
        if cleanup_interval > timedelta(0):
            self._janitor = threading.Thread(
                target=_run_janitor,
                args=(weakref.ref(self), self._stop, cleanup_interval.total_seconds()),
                name="snapcache-janitor",
                daemon=True,
            )
            self._janitor.start()
            # Stop the sweep once the store is collected.
            weakref.finalize(self, self._stop.set)

    # ------------------------------------------------------------------
    # TTLStore interface
    # ------------------------------------------------------------------

    def add(self, key: str, value: Any, ttl: timedelta | None = None) -> None:
        with self._lock:
            now = self._clock()
            existing = self._store.get(key)
            if existing is not None and not existing.is_expired(now):
                raise KeyConflictError(key)
            self._store[key] = CacheEntry(value=value, expires_at=self._expiry(now, ttl))

    def get_with_expiration(self, key: str) -> CacheEntry | None:
        with self._lock:
            entry = self._store.get(key)
            if entry is None or entry.is_expired(self._clock()):
                return None
            return entry

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._store.pop(key, None) is not None

    def delete_expired(self) -> int:
        with self._lock:
            now = self._clock()
            expired_keys = [k for k, v in self._store.items() if v.is_expired(now)]
            for k in expired_keys:
                del self._store[k]
            return len(expired_keys)

    def count(self) -> int:
        with self._lock:
            now = self._clock()
            return sum(1 for v in self._store.values() if not v.is_expired(now))

    def items(self) -> dict[str, CacheEntry]:
        with self._lock:
            now = self._clock()
            return {k: v for k, v in self._store.items() if not v.is_expired(now)}

    def flush(self) -> int:
        with self._lock:
            count = len(self._store)
            self._store.clear()
            return count

    def close(self) -> None:
        self._stop.set()
        janitor = self._janitor
        if janitor is not None and janitor is not threading.current_thread():
            janitor.join()
        self._janitor = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _expiry(self, now: datetime, ttl: timedelta | None) -> datetime | None:
        if ttl is None or ttl == timedelta(0):
            ttl = self._default_expiration
        if ttl < timedelta(0):
            return None
        return now + ttl


def _run_janitor(
    store_ref: weakref.ref[MemoryTTLStore], stop: threading.Event, interval: float
) -> None:
    while not stop.wait(interval):
        store = store_ref()
        if store is None:
            return
        removed = store.delete_expired()
        del store
        if removed:
            logger.debug("Janitor removed %d expired entries", removed)
