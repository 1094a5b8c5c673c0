# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""JSON snapshot persistence for the in-memory store.

The snapshot is one JSON object mapping each key to
``{"object": <raw value>, "expiration": <ISO-8601 timestamp or null>}``.
Every save replaces the whole file.  On load, entries that have already
expired are dropped and the rest are re-inserted with a flat
:data:`~snapcache.core.constants.REHYDRATION_TTL`; the stored expiration
is not carried over.  Snapshots written by go-cache, with integer
nanosecond expirations, load as well.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from snapcache.core.constants import (
    ERROR_CONVERTING_CACHE_OBJECT,
    ERROR_CREATING_CACHE_DIR,
    ERROR_ENCODING_CACHE_FILE,
    ERROR_LOADING_CACHE_FILE,
    ERROR_OPENING_CACHE_FILE,
    ERROR_REMOVING_CACHE_FILE,
    ERROR_SAVING_CACHE_FILE,
    ERROR_SET_CACHE,
    REHYDRATION_TTL,
)
from snapcache.core.exceptions import (
    DecodeError,
    EncodeError,
    FileAccessError,
    KeyConflictError,
    SnapshotNotFoundError,
    ValueConversionError,
)
from snapcache.models.cache import CacheEntry, SnapshotEntry, utcnow
from snapcache.store.base import TTLStore

logger = logging.getLogger("snapcache.persistence")

_SNAPSHOT_ADAPTER: TypeAdapter[dict[str, SnapshotEntry]] = TypeAdapter(dict[str, SnapshotEntry])


class SnapshotPersistence:
    """Reads and writes the snapshot file for one cache instance.

    Args:
        file_path: Location of the snapshot file.
        value_conversion_fn: Turns a raw decoded value into the typed value
            stored in memory.  Raising rejects the entry.
        rehydration_ttl: TTL given to every entry restored by :meth:`load`.
        clock: Returns the current time as an aware ``datetime``.
    """

    def __init__(
        self,
        file_path: Path,
        value_conversion_fn: Callable[[Any], Any],
        *,
        rehydration_ttl: timedelta = REHYDRATION_TTL,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._file_path = file_path
        self._convert = value_conversion_fn
        self._rehydration_ttl = rehydration_ttl
        self._clock = clock

    @property
    def file_path(self) -> Path:
        return self._file_path

    def exists(self) -> bool:
        return self._file_path.is_file()

    def stat(self) -> os.stat_result:
        """Stat the snapshot file.

        Raises:
            SnapshotNotFoundError: The file does not exist.
            FileAccessError: The file cannot be stat'ed.
        """
        try:
            return self._file_path.stat()
        except FileNotFoundError as exc:
            raise SnapshotNotFoundError(f"no cache file at {self._file_path}") from exc
        except OSError as exc:
            raise FileAccessError(f"error accessing file {self._file_path}: {exc}") from exc

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    def save(self, entries: Mapping[str, CacheEntry]) -> int:
        """Write *entries* to the snapshot file, replacing its content.

        Returns:
            Number of bytes written.

        Raises:
            FileAccessError: The directory or file could not be created.
            EncodeError: An entry value is not JSON-serialisable.
        """
        logger.info("Saving cache file %s", self._file_path)
        snapshot = {
            key: SnapshotEntry(object=entry.value, expiration=entry.expires_at)
            for key, entry in entries.items()
        }
        try:
            payload = _SNAPSHOT_ADAPTER.dump_json(snapshot)
        except PydanticSerializationError as exc:
            raise EncodeError(f"{ERROR_ENCODING_CACHE_FILE}: {exc}") from exc

        directory = self._file_path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FileAccessError(f"{ERROR_CREATING_CACHE_DIR} {directory}: {exc}") from exc

        tmp_path = self._file_path.with_name(self._file_path.name + ".tmp")
        try:
            with open(tmp_path, "wb") as fh:
                fh.write(payload)
            os.replace(tmp_path, self._file_path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise FileAccessError(
                f"{ERROR_SAVING_CACHE_FILE} {self._file_path}: {exc}"
            ) from exc

        logger.info("Cache file saved: %s (%d entries)", self._file_path, len(snapshot))
        return len(payload)

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------

    def read_snapshot(self) -> dict[str, SnapshotEntry]:
        """Decode the snapshot file without touching any store.

        Raises:
            SnapshotNotFoundError: The file does not exist.
            FileAccessError: The file cannot be read.
            DecodeError: The content is not a valid snapshot.
        """
        try:
            raw = self._file_path.read_bytes()
        except FileNotFoundError as exc:
            raise SnapshotNotFoundError(f"no cache file at {self._file_path}") from exc
        except OSError as exc:
            raise FileAccessError(
                f"{ERROR_OPENING_CACHE_FILE} {self._file_path}: {exc}"
            ) from exc

        try:
            return _SNAPSHOT_ADAPTER.validate_json(raw)
        except ValidationError as exc:
            raise DecodeError(
                f"{ERROR_LOADING_CACHE_FILE} {self._file_path}: "
                f"{exc.error_count()} validation error(s)"
            ) from exc

    def load(self, store: TTLStore) -> int:
        """Re-insert the snapshot's unexpired entries into *store*.

        Entries rejected by the conversion function, or whose key is
        already live in *store*, are logged and skipped.

        Returns:
            Number of entries inserted.
        """
        logger.info("Loading cache file %s", self._file_path)
        snapshot = self.read_snapshot()
        now = self._clock()
        loaded = 0
        for key, item in snapshot.items():
            if item.is_expired(now):
                logger.debug("Skipping expired cache item %s", key)
                continue
            try:
                value = self._convert_value(key, item.object)
            except ValueConversionError as exc:
                logger.error("%s (cache file %s)", exc, self._file_path)
                continue
            try:
                store.add(key, value, self._rehydration_ttl)
            except KeyConflictError as exc:
                logger.error("%s: %s", ERROR_SET_CACHE, exc)
                continue
            loaded += 1
            logger.debug("Cache item loaded: key=%s exp=%s", key, item.expiration)
        logger.info(
            "Cache file loaded: %d of %d entries from %s",
            loaded,
            len(snapshot),
            self._file_path,
        )
        return loaded

    def remove(self) -> None:
        """Delete the snapshot file."""
        try:
            self._file_path.unlink()
        except FileNotFoundError as exc:
            raise SnapshotNotFoundError(f"no cache file at {self._file_path}") from exc
        except OSError as exc:
            raise FileAccessError(
                f"{ERROR_REMOVING_CACHE_FILE} {self._file_path}: {exc}"
            ) from exc

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _convert_value(self, key: str, raw: Any) -> Any:
        try:
            return self._convert(raw)
        except Exception as exc:
            raise ValueConversionError(key, f"{ERROR_CONVERTING_CACHE_OBJECT}: {exc}") from exc
