# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Data models for cache entries, snapshots and configuration."""

from snapcache.models.cache import CacheConfig, CacheEntry, SnapshotEntry, utcnow
from snapcache.models.cloud import CloudBackupConfig

__all__ = [
    "CacheConfig",
    "CacheEntry",
    "CloudBackupConfig",
    "SnapshotEntry",
    "utcnow",
]
