# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Remote object-store clients for snapshot backup."""

from snapcache.cloud.base import CloudFileRequest, ObjectStorageClient
from snapcache.cloud.local import LocalDirectoryStorageClient

__all__ = ["CloudFileRequest", "LocalDirectoryStorageClient", "ObjectStorageClient"]
