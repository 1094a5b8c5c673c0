# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Tests for the dirty tracker."""

from __future__ import annotations

from snapcache.tracker import DirtyTracker


class TestDirtyTracker:
    def test_fresh_tracker_is_clean(self) -> None:
        tracker = DirtyTracker()
        assert tracker.loaded_at == tracker.updated_at
        assert tracker.is_dirty() is False

    def test_mark_updated_makes_dirty(self) -> None:
        tracker = DirtyTracker()
        tracker.mark_updated()
        assert tracker.is_dirty() is True

    def test_mark_loaded_resets(self) -> None:
        tracker = DirtyTracker()
        tracker.mark_updated()
        tracker.mark_loaded()
        assert tracker.is_dirty() is False
        assert tracker.loaded_at == tracker.updated_at

    def test_update_with_frozen_clock_is_still_dirty(self) -> None:
        """A clock that does not advance must not hide an update."""
        tracker = DirtyTracker(clock=lambda: 1_000)
        tracker.mark_loaded()
        tracker.mark_updated()
        assert tracker.is_dirty() is True
        assert tracker.updated_at > tracker.loaded_at
