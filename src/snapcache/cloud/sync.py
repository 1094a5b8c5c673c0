# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Mirrors the snapshot file to a remote object store.

The remote object is named after the snapshot file's base name and lives
in the configured bucket.  Each call makes a single attempt; failures are
raised as :class:`~snapcache.core.exceptions.RemoteTransferError`.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterator
from pathlib import Path

from snapcache.cloud.base import CloudFileRequest, ObjectStorageClient
from snapcache.core.exceptions import FileAccessError, RemoteTransferError

logger = logging.getLogger("snapcache.cloud.sync")


@contextlib.contextmanager
def _remote_call(operation: str, target: str) -> Iterator[None]:
    """Re-raise client failures as :class:`RemoteTransferError`."""
    try:
        yield
    except RemoteTransferError:
        raise
    except Exception as exc:
        raise RemoteTransferError(operation, f"{target}: {exc}") from exc


class CloudSync:
    """Upload, download and delete the remote copy of one snapshot file.

    Args:
        client: Remote object-store client.
        bucket: Target bucket name.
        file_path: Local snapshot file.
    """

    def __init__(self, client: ObjectStorageClient, bucket: str, file_path: Path) -> None:
        self._client = client
        self._bucket = bucket
        self._file_path = file_path

    @property
    def client(self) -> ObjectStorageClient:
        return self._client

    @property
    def bucket(self) -> str:
        return self._bucket

    def request(self, mod_time: int = 0) -> CloudFileRequest:
        return CloudFileRequest(
            bucket=self._bucket,
            object_name=self._file_path.name,
            local_dir=self._file_path.parent,
            mod_time=mod_time,
        )

    def download(self, timeout: float | None = None) -> int:
        """Fetch the remote snapshot into the local snapshot file.

        The local file is created (or truncated) first; if the transfer
        fails it is removed again so no empty snapshot is left behind.

        Returns:
            Number of bytes downloaded.
        """
        mod_time = self._local_mod_time()
        directory = self._file_path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FileAccessError(f"error creating file directory {directory}: {exc}") from exc

        request = self.request(mod_time)
        try:
            with open(self._file_path, "wb") as fh, _remote_call("download", self._target()):
                written = self._client.download_file(fh, request, timeout=timeout)
        except OSError as exc:
            self._file_path.unlink(missing_ok=True)
            raise FileAccessError(f"error creating file {self._file_path}: {exc}") from exc
        except RemoteTransferError:
            self._file_path.unlink(missing_ok=True)
            logger.error("Error downloading %s into %s", self._target(), self._file_path)
            raise

        logger.info(
            "Downloaded file %s to %s (%d bytes)", request.object_name, directory, written
        )
        return written

    def upload(self, timeout: float | None = None) -> int:
        """Send the local snapshot file to the remote store.

        Returns:
            Number of bytes uploaded.
        """
        try:
            mod_time = int(self._file_path.stat().st_mtime)
        except OSError as exc:
            raise FileAccessError(f"error accessing file {self._file_path}: {exc}") from exc
        logger.debug("File mod time %d for %s", mod_time, self._file_path)

        request = self.request(mod_time)
        try:
            with open(self._file_path, "rb") as fh, _remote_call("upload", self._target()):
                written = self._client.upload_file(fh, request, timeout=timeout)
        except OSError as exc:
            raise FileAccessError(f"error opening file {self._file_path}: {exc}") from exc

        logger.info(
            "Uploaded file %s from %s (%d bytes)",
            request.object_name,
            request.local_dir,
            written,
        )
        return written

    def delete(self, timeout: float | None = None) -> None:
        """Delete the remote copy of the snapshot."""
        request = self.request(self._local_mod_time())
        with _remote_call("delete", self._target()):
            self._client.delete_object(request, timeout=timeout)
        logger.info("Deleted remote file %s", self._target())

    def close(self) -> None:
        with _remote_call("close", self._bucket):
            self._client.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _local_mod_time(self) -> int:
        try:
            return int(self._file_path.stat().st_mtime)
        except FileNotFoundError:
            return 0

    def _target(self) -> str:
        return f"{self._bucket}/{self._file_path.name}"
