# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Tests for remote snapshot sync and the object-store clients."""

from __future__ import annotations

import io
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from snapcache.cloud.base import CloudFileRequest, ObjectStorageClient
from snapcache.cloud.local import LocalDirectoryStorageClient
from snapcache.cloud.sync import CloudSync
from snapcache.core.exceptions import ConfigurationError, RemoteTransferError
from tests.conftest import BUCKET

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def file_path(data_dir: Path) -> Path:
    return data_dir / "cache.json"


@pytest.fixture
def sync(local_client: LocalDirectoryStorageClient, file_path: Path) -> CloudSync:
    return CloudSync(local_client, BUCKET, file_path)


@pytest.fixture
def failing_client() -> MagicMock:
    client = MagicMock(spec=ObjectStorageClient)
    client.upload_file.side_effect = RuntimeError("boom")
    client.download_file.side_effect = RuntimeError("boom")
    client.delete_object.side_effect = RuntimeError("boom")
    return client


# ---------------------------------------------------------------------------
# CloudFileRequest
# ---------------------------------------------------------------------------


class TestCloudFileRequest:
    def test_requires_bucket_and_object(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            CloudFileRequest(bucket="", object_name="cache.json", local_dir=tmp_path)
        with pytest.raises(ValueError):
            CloudFileRequest(bucket="b", object_name="", local_dir=tmp_path)

    def test_addresses_file_base_name(self, sync: CloudSync, file_path: Path) -> None:
        request = sync.request()
        assert request.bucket == BUCKET
        assert request.object_name == "cache.json"
        assert request.local_dir == file_path.parent
        assert request.mod_time == 0


# ---------------------------------------------------------------------------
# CloudSync
# ---------------------------------------------------------------------------


class TestCloudSync:
    def test_upload_then_download(
        self, sync: CloudSync, file_path: Path, remote_root: Path
    ) -> None:
        file_path.parent.mkdir(parents=True)
        file_path.write_text('{"k": {"object": 1, "expiration": null}}', encoding="utf-8")

        assert sync.upload() == file_path.stat().st_size
        assert (remote_root / BUCKET / "cache.json").is_file()

        file_path.unlink()
        sync.download()
        assert file_path.read_text(encoding="utf-8") == '{"k": {"object": 1, "expiration": null}}'

    def test_download_creates_directory(
        self, sync: CloudSync, file_path: Path, remote_root: Path
    ) -> None:
        (remote_root / BUCKET).mkdir(parents=True)
        (remote_root / BUCKET / "cache.json").write_text("{}", encoding="utf-8")

        assert sync.download() == 2
        assert file_path.read_text(encoding="utf-8") == "{}"

    def test_download_passes_zero_mod_time_for_new_file(self, file_path: Path) -> None:
        client = MagicMock(spec=ObjectStorageClient)
        client.download_file.return_value = 0
        CloudSync(client, BUCKET, file_path).download(timeout=5.0)

        _, request = client.download_file.call_args.args
        assert request.mod_time == 0
        assert client.download_file.call_args.kwargs["timeout"] == 5.0

    def test_upload_passes_mod_time(self, file_path: Path) -> None:
        file_path.parent.mkdir(parents=True)
        file_path.write_text("{}", encoding="utf-8")
        client = MagicMock(spec=ObjectStorageClient)
        client.upload_file.return_value = 2

        CloudSync(client, BUCKET, file_path).upload()

        _, request = client.upload_file.call_args.args
        assert request.mod_time == int(file_path.stat().st_mtime)

    def test_failed_download_leaves_no_file(
        self, failing_client: MagicMock, file_path: Path
    ) -> None:
        with pytest.raises(RemoteTransferError) as exc_info:
            CloudSync(failing_client, BUCKET, file_path).download()
        assert exc_info.value.operation == "download"
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert not file_path.exists()

    def test_download_missing_object(self, sync: CloudSync, file_path: Path) -> None:
        with pytest.raises(RemoteTransferError):
            sync.download()
        assert not file_path.exists()

    def test_failed_upload(self, failing_client: MagicMock, file_path: Path) -> None:
        file_path.parent.mkdir(parents=True)
        file_path.write_text("{}", encoding="utf-8")
        with pytest.raises(RemoteTransferError) as exc_info:
            CloudSync(failing_client, BUCKET, file_path).upload()
        assert exc_info.value.operation == "upload"

    def test_failed_delete(self, failing_client: MagicMock, file_path: Path) -> None:
        with pytest.raises(RemoteTransferError) as exc_info:
            CloudSync(failing_client, BUCKET, file_path).delete()
        assert exc_info.value.operation == "delete"

    def test_delete(self, sync: CloudSync, file_path: Path, remote_root: Path) -> None:
        file_path.parent.mkdir(parents=True)
        file_path.write_text("{}", encoding="utf-8")
        sync.upload()
        sync.delete()
        assert not (remote_root / BUCKET / "cache.json").exists()

    def test_close(self, sync: CloudSync, local_client: LocalDirectoryStorageClient) -> None:
        sync.close()
        assert local_client.closed is True


# ---------------------------------------------------------------------------
# LocalDirectoryStorageClient
# ---------------------------------------------------------------------------


class TestLocalDirectoryStorageClient:
    def test_is_subclass(self) -> None:
        assert issubclass(LocalDirectoryStorageClient, ObjectStorageClient)

    def test_closed_client_rejects_calls(
        self, local_client: LocalDirectoryStorageClient, tmp_path: Path
    ) -> None:
        request = CloudFileRequest(bucket=BUCKET, object_name="x.json", local_dir=tmp_path)
        local_client.close()
        with pytest.raises(RemoteTransferError):
            local_client.upload_file(io.BytesIO(b"{}"), request)

    def test_delete_missing_object(
        self, local_client: LocalDirectoryStorageClient, tmp_path: Path
    ) -> None:
        request = CloudFileRequest(bucket=BUCKET, object_name="x.json", local_dir=tmp_path)
        with pytest.raises(RemoteTransferError):
            local_client.delete_object(request)


# ---------------------------------------------------------------------------
# GCSStorageClient
# ---------------------------------------------------------------------------


class TestGCSStorageClient:
    def test_gcs_available_returns_bool(self) -> None:
        from snapcache.cloud.gcs import gcs_available

        assert isinstance(gcs_available(), bool)

    def test_missing_package_is_a_configuration_error(self) -> None:
        from snapcache.cloud.gcs import GCSStorageClient

        with patch("snapcache.cloud.gcs._GCS_AVAILABLE", False):
            with pytest.raises(ConfigurationError):
                GCSStorageClient("creds.json")

    def test_requires_credentials_without_client(self) -> None:
        from snapcache.cloud.gcs import GCSStorageClient

        with patch("snapcache.cloud.gcs._GCS_AVAILABLE", True):
            with pytest.raises(ConfigurationError):
                GCSStorageClient()

    def test_delegates_to_blob(self, tmp_path: Path) -> None:
        from snapcache.cloud.gcs import GCSStorageClient

        raw_client = MagicMock()
        blob = raw_client.bucket.return_value.blob.return_value
        blob.download_to_file.side_effect = lambda fh, timeout: fh.write(b"{}")
        request = CloudFileRequest(bucket=BUCKET, object_name="cache.json", local_dir=tmp_path)

        with patch("snapcache.cloud.gcs._GCS_AVAILABLE", True):
            client = GCSStorageClient(client=raw_client)

        buf = io.BytesIO()
        assert client.download_file(buf, request, timeout=3.0) == 2
        raw_client.bucket.assert_called_with(BUCKET)
        raw_client.bucket.return_value.blob.assert_called_with("cache.json")
        blob.download_to_file.assert_called_once_with(buf, timeout=3.0)

        client.delete_object(request)
        blob.delete.assert_called_once_with(timeout=60.0)

        client.close()
        raw_client.close.assert_called_once()
