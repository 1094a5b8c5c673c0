# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Custom exception hierarchy for snapcache."""


class SnapcacheError(Exception):
    """Base exception for all snapcache errors."""


class ConfigurationError(SnapcacheError):
    """Invalid or missing configuration."""


class KeyConflictError(SnapcacheError):
    """An unexpired entry already exists for the key."""

    def __init__(self, key: str) -> None:
        super().__init__(f"key {key!r} already exists in cache")
        self.key = key


class PersistenceError(SnapcacheError):
    """Reading or writing the snapshot file failed."""


class FileAccessError(PersistenceError):
    """A filesystem operation on the snapshot file or its directory failed."""


class SnapshotNotFoundError(FileAccessError):
    """The snapshot file does not exist."""


class DecodeError(PersistenceError):
    """The snapshot file is not a valid JSON snapshot."""


class EncodeError(PersistenceError):
    """Cache entries could not be encoded to JSON."""


class ValueConversionError(SnapcacheError):
    """The value conversion function rejected a loaded entry."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(f"{message} for key {key!r}")
        self.key = key


class RemoteTransferError(SnapcacheError):
    """An upload, download, delete or close against the object store failed."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation}: {message}")
        self.operation = operation
