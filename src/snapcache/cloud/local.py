# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Object-store client backed by a directory tree.

Objects live at ``<root>/<bucket>/<object_name>``.  Useful when several
instances share a mounted volume, and as a stand-in store in tests.
Timeouts are accepted for interface parity and ignored.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import BinaryIO

from snapcache.cloud.base import CloudFileRequest, ObjectStorageClient
from snapcache.core.exceptions import RemoteTransferError

logger = logging.getLogger("snapcache.cloud.local")


class LocalDirectoryStorageClient(ObjectStorageClient):
    """Mirror objects into a local directory.

    Args:
        root: Directory holding one subdirectory per bucket.
    """

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root)
        self._closed = False

    @property
    def root(self) -> Path:
        return self._root

    @property
    def closed(self) -> bool:
        return self._closed

    def object_path(self, request: CloudFileRequest) -> Path:
        return self._root / request.bucket / request.object_name

    # ------------------------------------------------------------------
    # ObjectStorageClient interface
    # ------------------------------------------------------------------

    def upload_file(
        self, file_obj: BinaryIO, request: CloudFileRequest, timeout: float | None = None
    ) -> int:
        self._ensure_open("upload")
        target = self.object_path(request)
        tmp = target.with_name(target.name + ".tmp")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "wb") as out:
                shutil.copyfileobj(file_obj, out)
            os.replace(tmp, target)
        except OSError as exc:
            tmp.unlink(missing_ok=True)
            raise RemoteTransferError("upload", f"cannot write {target}: {exc}") from exc
        size = target.stat().st_size
        logger.debug("Stored object %s (%d bytes)", target, size)
        return size

    def download_file(
        self, file_obj: BinaryIO, request: CloudFileRequest, timeout: float | None = None
    ) -> int:
        self._ensure_open("download")
        source = self.object_path(request)
        start = file_obj.tell()
        try:
            with open(source, "rb") as src:
                shutil.copyfileobj(src, file_obj)
        except FileNotFoundError as exc:
            raise RemoteTransferError("download", f"object {source} not found") from exc
        except OSError as exc:
            raise RemoteTransferError("download", f"cannot read {source}: {exc}") from exc
        return file_obj.tell() - start

    def delete_object(self, request: CloudFileRequest, timeout: float | None = None) -> None:
        self._ensure_open("delete")
        target = self.object_path(request)
        try:
            target.unlink()
        except FileNotFoundError as exc:
            raise RemoteTransferError("delete", f"object {target} not found") from exc
        except OSError as exc:
            raise RemoteTransferError("delete", f"cannot remove {target}: {exc}") from exc

    def close(self) -> None:
        self._closed = True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _ensure_open(self, operation: str) -> None:
        if self._closed:
            raise RemoteTransferError(operation, "storage client is closed")
