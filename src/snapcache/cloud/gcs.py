# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Google Cloud Storage client using ``google-cloud-storage``.

This client is **optional** -- if the ``google-cloud-storage`` package is
not installed the module can still be imported but
:class:`GCSStorageClient` will raise a clear error at instantiation time.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, BinaryIO

from snapcache.cloud.base import CloudFileRequest, ObjectStorageClient
from snapcache.core.exceptions import ConfigurationError, RemoteTransferError

if TYPE_CHECKING:
    from google.cloud.storage import Blob

logger = logging.getLogger("snapcache.cloud.gcs")

_DEFAULT_TIMEOUT = 60.0

try:
    from google.api_core import exceptions as gcs_exceptions
    from google.cloud import storage

    _GCS_AVAILABLE = True
except ImportError:  # pragma: no cover
    gcs_exceptions = None  # type: ignore[assignment]
    storage = None  # type: ignore[assignment]
    _GCS_AVAILABLE = False


def gcs_available() -> bool:
    """Return ``True`` if the ``google-cloud-storage`` package is installed."""
    return _GCS_AVAILABLE


class GCSStorageClient(ObjectStorageClient):
    """Google Cloud Storage backed object-store client.

    Args:
        credentials_path: Service-account JSON key file.
        client: A pre-built ``google.cloud.storage.Client``; takes
            precedence over *credentials_path*.
    """

    def __init__(
        self,
        credentials_path: Path | str | None = None,
        *,
        client: Any = None,
    ) -> None:
        if not _GCS_AVAILABLE:
            raise ConfigurationError(
                "The 'google-cloud-storage' package is required for the GCS backend. "
                "Install it with: pip install 'snapcache[gcs]'"
            )
        if client is None:
            if not credentials_path:
                raise ConfigurationError("missing cloud credentials")
            try:
                client = storage.Client.from_service_account_json(str(credentials_path))
            except (OSError, ValueError) as exc:
                raise ConfigurationError(
                    f"error creating cloud storage client: {exc}"
                ) from exc
        self._client = client

    # ------------------------------------------------------------------
    # ObjectStorageClient interface
    # ------------------------------------------------------------------

    def upload_file(
        self, file_obj: BinaryIO, request: CloudFileRequest, timeout: float | None = None
    ) -> int:
        blob = self._blob(request)
        start = file_obj.tell()
        try:
            blob.upload_from_file(file_obj, rewind=False, timeout=self._timeout(timeout))
        except gcs_exceptions.GoogleAPIError as exc:
            raise RemoteTransferError(
                "upload", f"gs://{request.bucket}/{request.object_name}: {exc}"
            ) from exc
        return file_obj.tell() - start

    def download_file(
        self, file_obj: BinaryIO, request: CloudFileRequest, timeout: float | None = None
    ) -> int:
        blob = self._blob(request)
        start = file_obj.tell()
        try:
            blob.download_to_file(file_obj, timeout=self._timeout(timeout))
        except gcs_exceptions.GoogleAPIError as exc:
            raise RemoteTransferError(
                "download", f"gs://{request.bucket}/{request.object_name}: {exc}"
            ) from exc
        return file_obj.tell() - start

    def delete_object(self, request: CloudFileRequest, timeout: float | None = None) -> None:
        blob = self._blob(request)
        try:
            blob.delete(timeout=self._timeout(timeout))
        except gcs_exceptions.GoogleAPIError as exc:
            raise RemoteTransferError(
                "delete", f"gs://{request.bucket}/{request.object_name}: {exc}"
            ) from exc

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _blob(self, request: CloudFileRequest) -> Blob:
        return self._client.bucket(request.bucket).blob(request.object_name)

    @staticmethod
    def _timeout(timeout: float | None) -> float:
        return _DEFAULT_TIMEOUT if timeout is None else timeout
