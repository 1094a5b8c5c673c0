# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Abstract TTL store interface."""

from __future__ import annotations

import abc
from datetime import timedelta
from typing import Any

from snapcache.models.cache import CacheEntry


class TTLStore(abc.ABC):
    """Abstract base class for expiring key/value stores.

    Implementations must be safe to call from several threads at once,
    including while a background sweep is running.
    """

    @abc.abstractmethod
    def add(self, key: str, value: Any, ttl: timedelta | None = None) -> None:
        """Insert *value* under *key* unless a live entry already exists.

        Args:
            key: Cache key.
            value: Value to store.
            ttl: Time-to-live.  ``None`` or zero uses the store default;
                a negative duration stores the entry without expiry.

        Raises:
            KeyConflictError: An unexpired entry exists for *key*.
        """

    @abc.abstractmethod
    def get_with_expiration(self, key: str) -> CacheEntry | None:
        """Return the live entry for *key*, or ``None`` on a miss or expiry."""

    @abc.abstractmethod
    def delete(self, key: str) -> bool:
        """Delete *key*.

        Returns:
            ``True`` if the key existed and was deleted, ``False`` otherwise.
        """

    @abc.abstractmethod
    def delete_expired(self) -> int:
        """Remove every expired entry and return how many were removed."""

    @abc.abstractmethod
    def count(self) -> int:
        """Return the number of live (non-expired) entries."""

    @abc.abstractmethod
    def items(self) -> dict[str, CacheEntry]:
        """Return a copy of all live entries."""

    @abc.abstractmethod
    def flush(self) -> int:
        """Remove all entries.

        Returns:
            The number of entries removed.
        """

    def close(self) -> None:
        """Stop background work.  Stored entries are left untouched."""
