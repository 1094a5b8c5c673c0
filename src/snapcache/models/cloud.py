# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Remote backup configuration."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict

from snapcache.cloud.base import ObjectStorageClient


class CloudBackupConfig(BaseModel):
    """Where the snapshot file is mirrored.

    Either ``client`` is supplied, or ``credentials_path`` is used to build
    a :class:`~snapcache.cloud.gcs.GCSStorageClient`.  ``bucket_name`` is
    always required.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    credentials_path: Path | None = None
    bucket_name: str = ""
    client: ObjectStorageClient | None = None
