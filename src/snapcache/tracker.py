# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Tracks whether in-memory state is newer than the last durable snapshot."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable


class DirtyTracker:
    """Two-timestamp dirty flag.

    ``loaded_at`` is when memory last matched durable storage and
    ``updated_at`` is when memory last changed.  Ticks come from a
    nanosecond clock and never repeat, so an update recorded right
    after a load always compares greater.
    """

    def __init__(self, clock: Callable[[], int] = time.monotonic_ns) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._last_tick = 0
        now = self._tick()
        self._loaded_at = now
        self._updated_at = now

    @property
    def loaded_at(self) -> int:
        return self._loaded_at

    @property
    def updated_at(self) -> int:
        return self._updated_at

    def mark_updated(self) -> None:
        with self._lock:
            self._updated_at = self._tick()

    def mark_loaded(self) -> None:
        with self._lock:
            now = self._tick()
            self._loaded_at = now
            self._updated_at = now

    def is_dirty(self) -> bool:
        return self._updated_at > self._loaded_at

    def _tick(self) -> int:
        self._last_tick = max(self._clock(), self._last_tick + 1)
        return self._last_tick
