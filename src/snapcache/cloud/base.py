# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Abstract object-store client interface used for snapshot backup."""

from __future__ import annotations

import abc
from pathlib import Path
from typing import BinaryIO

from pydantic import BaseModel, ConfigDict, Field


class CloudFileRequest(BaseModel):
    """Addresses one object in the remote store.

    ``mod_time`` is the local file's modification time in Unix seconds,
    or ``0`` when no local copy existed.
    """

    model_config = ConfigDict(frozen=True)

    bucket: str = Field(min_length=1)
    object_name: str = Field(min_length=1)
    local_dir: Path
    mod_time: int = 0


class ObjectStorageClient(abc.ABC):
    """Abstract base class for remote object-store clients.

    All operations block the caller.  ``timeout`` is a per-call deadline
    in seconds; ``None`` leaves the client's own default in place.
    """

    @abc.abstractmethod
    def upload_file(
        self, file_obj: BinaryIO, request: CloudFileRequest, timeout: float | None = None
    ) -> int:
        """Stream *file_obj* to the object named by *request*.

        Returns:
            Number of bytes written to the remote store.
        """

    @abc.abstractmethod
    def download_file(
        self, file_obj: BinaryIO, request: CloudFileRequest, timeout: float | None = None
    ) -> int:
        """Stream the object named by *request* into *file_obj*.

        Returns:
            Number of bytes written to *file_obj*.
        """

    @abc.abstractmethod
    def delete_object(self, request: CloudFileRequest, timeout: float | None = None) -> None:
        """Delete the object named by *request*."""

    @abc.abstractmethod
    def close(self) -> None:
        """Release any resources held by the client."""
