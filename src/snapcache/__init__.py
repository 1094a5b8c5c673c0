# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""snapcache - process-local TTL cache with snapshot persistence and remote backup."""

__version__ = "0.1.0"

from snapcache.cloud.base import CloudFileRequest, ObjectStorageClient
from snapcache.cloud.local import LocalDirectoryStorageClient
from snapcache.core.constants import NO_EXPIRATION, REHYDRATION_TTL
from snapcache.core.exceptions import (
    ConfigurationError,
    DecodeError,
    EncodeError,
    FileAccessError,
    KeyConflictError,
    PersistenceError,
    RemoteTransferError,
    SnapcacheError,
    SnapshotNotFoundError,
    ValueConversionError,
)
from snapcache.models import CacheConfig, CacheEntry, CloudBackupConfig, SnapshotEntry
from snapcache.service import CacheService, create_cache_service_from_settings

__all__ = [
    "NO_EXPIRATION",
    "REHYDRATION_TTL",
    "CacheConfig",
    "CacheEntry",
    "CacheService",
    "CloudBackupConfig",
    "CloudFileRequest",
    "ConfigurationError",
    "DecodeError",
    "EncodeError",
    "FileAccessError",
    "KeyConflictError",
    "LocalDirectoryStorageClient",
    "ObjectStorageClient",
    "PersistenceError",
    "RemoteTransferError",
    "SnapcacheError",
    "SnapshotEntry",
    "SnapshotNotFoundError",
    "ValueConversionError",
    "__version__",
    "create_cache_service_from_settings",
]
