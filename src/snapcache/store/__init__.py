# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Expiring in-memory key/value stores."""

from snapcache.store.base import TTLStore
from snapcache.store.memory import MemoryTTLStore

__all__ = ["MemoryTTLStore", "TTLStore"]
