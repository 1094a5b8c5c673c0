# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Cache service that keeps memory, the snapshot file and the remote copy in step.

:class:`CacheService` is the primary public interface.  On construction it
restores entries from the local snapshot (downloading it first when a
remote backup is configured and no local copy exists), or starts empty.
Mutations mark the cache dirty; :meth:`CacheService.clear` writes a new
snapshot only when something changed, uploads it, and then releases
memory and the remote client.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime, timedelta
from pathlib import Path
from types import TracebackType
from typing import Any

from snapcache.cloud.base import ObjectStorageClient
from snapcache.cloud.sync import CloudSync
from snapcache.core.config import Settings, get_settings
from snapcache.core.constants import (
    CACHE_FLUSHED,
    DELETED_EXPIRED,
    KEY_DELETED,
    RETURNING_ALL_ITEMS,
    RETURNING_COUNT,
    VALUE_ADDED,
    RemoteBackend,
)
from snapcache.core.exceptions import (
    ConfigurationError,
    KeyConflictError,
    RemoteTransferError,
    SnapcacheError,
    SnapshotNotFoundError,
)
from snapcache.models.cache import CacheConfig, CacheEntry, utcnow
from snapcache.models.cloud import CloudBackupConfig
from snapcache.persistence import SnapshotPersistence
from snapcache.store.base import TTLStore
from snapcache.store.memory import MemoryTTLStore
from snapcache.tracker import DirtyTracker

logger = logging.getLogger("snapcache.service")


class CacheService:
    """Process-local TTL cache persisted to ``<data_dir>/<cache_file_name>.json``.

    Args:
        config: Cache configuration.  ``data_dir`` and
            ``value_conversion_fn`` are required.
        cloud_config: Optional remote backup of the snapshot file.
        timeout: Default deadline in seconds for remote calls; each
            remote-touching method also accepts its own ``timeout``.
        store: Alternative TTL store; defaults to :class:`MemoryTTLStore`.
        clock: Time source for expiry checks.

    Raises:
        ConfigurationError: The configuration is incomplete.  No instance
            is created.
    """

    def __init__(
        self,
        config: CacheConfig,
        cloud_config: CloudBackupConfig | None = None,
        *,
        timeout: float | None = None,
        store: TTLStore | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        if config.data_dir is None:
            raise ConfigurationError("missing required data directory")
        if config.value_conversion_fn is None:
            raise ConfigurationError("missing cache data conversion function")

        self._config = config
        self._file_path = config.file_path
        self._timeout = timeout
        self._cloud = (
            _build_cloud_sync(cloud_config, self._file_path) if cloud_config is not None else None
        )
        self._store = store or MemoryTTLStore(
            default_expiration=config.default_expiration,
            cleanup_interval=config.cleanup_interval,
            clock=clock,
        )
        self._persistence = SnapshotPersistence(
            self._file_path, config.value_conversion_fn, clock=clock
        )
        self._tracker = DirtyTracker()
        self._lock = threading.RLock()
        try:
            self._load(timeout)
        except Exception:
            self._store.close()
            raise

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> CacheConfig:
        return self._config

    @property
    def file_path(self) -> Path:
        return self._file_path

    @property
    def remote_enabled(self) -> bool:
        return self._cloud is not None

    # ------------------------------------------------------------------
    # Cache operations
    # ------------------------------------------------------------------

    def set(self, key: str, value: Any, ttl: timedelta | None = None) -> None:
        """Insert *value* under *key*; never overwrites a live entry.

        Args:
            key: Cache key.
            value: Value to cache.
            ttl: Time-to-live; ``None`` uses ``config.default_expiration``.

        Raises:
            KeyConflictError: *key* already holds an unexpired value.
                Delete it first to replace it.
        """
        with self._lock:
            try:
                self._store.add(key, value, ttl)
            except KeyConflictError:
                logger.error("Error setting cache key %s in %s", key, self._config.data_dir)
                raise
            self._tracker.mark_updated()
        logger.debug("%s: key=%s", VALUE_ADDED, key)

    def get(self, key: str) -> tuple[Any, datetime | None]:
        """Return ``(value, expires_at)``, or ``(None, None)`` on a miss."""
        entry = self._store.get_with_expiration(key)
        if entry is None:
            return None, None
        return entry.value, entry.expires_at

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.delete(key)
            self._tracker.mark_updated()
        logger.debug("%s: key=%s cache_dir=%s", KEY_DELETED, key, self._config.data_dir)

    def delete_expired(self) -> None:
        # Expiry is not a durable change, so the cache stays clean.
        removed = self._store.delete_expired()
        logger.debug("%s: %d removed from %s", DELETED_EXPIRED, removed, self._config.data_dir)

    def item_count(self) -> int:
        count = self._store.count()
        logger.debug("%s: %d in %s", RETURNING_COUNT, count, self._config.data_dir)
        return count

    def items(self) -> dict[str, CacheEntry]:
        items = self._store.items()
        logger.debug("%s from %s", RETURNING_ALL_ITEMS, self._config.data_dir)
        return items

    def updated(self) -> bool:
        """Return ``True`` if memory has changes not yet written to the snapshot."""
        logger.debug(
            "Cache file status: loaded_at=%d updated_at=%d",
            self._tracker.loaded_at,
            self._tracker.updated_at,
        )
        return self._tracker.is_dirty()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def clear(self, timeout: float | None = None) -> None:
        """Snapshot pending changes, then release memory and the remote client.

        When the cache is dirty the snapshot is saved and, with a remote
        backup configured, uploaded.  If either step fails the error is
        raised and nothing is flushed: entries stay in memory and the
        cache stays dirty, so calling ``clear`` again retries.

        Raises:
            PersistenceError: The snapshot could not be written.
            RemoteTransferError: Upload or client close failed.
        """
        timeout = self._timeout if timeout is None else timeout
        with self._lock:
            if self.updated():
                self._persistence.save(self._store.items())
                if self._cloud is not None:
                    self._cloud.upload(timeout=timeout)
                self._tracker.mark_loaded()

            removed = self._store.flush()
            self._store.close()
            logger.info("%s: %d entries from %s", CACHE_FLUSHED, removed, self._config.data_dir)

            if self._cloud is not None:
                try:
                    self._cloud.close()
                except RemoteTransferError:
                    logger.error("Error closing cloud storage client")
                    raise

    def clear_file(self, timeout: float | None = None) -> None:
        """Remove the snapshot file and its remote copy.

        The local file is removed even when the remote delete fails; the
        remote error is raised afterwards.

        Raises:
            SnapshotNotFoundError: There is no local snapshot file.
            FileAccessError: The local file could not be removed.
            RemoteTransferError: The remote delete failed.
        """
        timeout = self._timeout if timeout is None else timeout
        with self._lock:
            logger.info("Removing cache file %s", self._file_path)
            self._persistence.stat()

            remote_error: RemoteTransferError | None = None
            if self._cloud is not None:
                try:
                    self._cloud.delete(timeout=timeout)
                except RemoteTransferError as exc:
                    logger.error("Error deleting cloud cache file: %s", exc)
                    remote_error = exc

            self._persistence.remove()

        if remote_error is not None:
            raise remote_error

    def __enter__(self) -> CacheService:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.clear()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _load(self, timeout: float | None) -> None:
        try:
            self._load_file(timeout)
        except SnapcacheError as exc:
            logger.info("Starting with fresh cache: %s", exc)
        finally:
            self._tracker.mark_loaded()

    def _load_file(self, timeout: float | None) -> int:
        try:
            return self._persistence.load(self._store)
        except SnapshotNotFoundError:
            if self._cloud is None:
                raise
            logger.info(
                "No local cache file at %s, fetching from bucket %s",
                self._file_path,
                self._cloud.bucket,
            )
            self._cloud.download(timeout=timeout)
            return self._persistence.load(self._store)


def _build_cloud_sync(cloud_config: CloudBackupConfig, file_path: Path) -> CloudSync:
    client: ObjectStorageClient | None = cloud_config.client
    if client is None:
        if not cloud_config.bucket_name or cloud_config.credentials_path is None:
            logger.error("Missing bucket and cloud credentials")
            raise ConfigurationError("missing bucket and cloud credentials")
        from snapcache.cloud.gcs import GCSStorageClient

        client = GCSStorageClient(cloud_config.credentials_path)
    if not cloud_config.bucket_name:
        logger.error("Missing bucket information")
        raise ConfigurationError("missing bucket information")
    return CloudSync(client, cloud_config.bucket_name, file_path)


def cloud_config_from_settings(settings: Settings) -> CloudBackupConfig | None:
    backend = settings.remote_backend
    if backend == RemoteBackend.NONE:
        return None
    if backend == RemoteBackend.LOCAL:
        if settings.remote_dir is None:
            raise ConfigurationError("remote_dir is required for the local remote backend")
        from snapcache.cloud.local import LocalDirectoryStorageClient

        return CloudBackupConfig(
            bucket_name=settings.bucket_name,
            client=LocalDirectoryStorageClient(settings.remote_dir),
        )
    return CloudBackupConfig(
        credentials_path=settings.credentials_path,
        bucket_name=settings.bucket_name,
    )


def create_cache_service_from_settings(
    value_conversion_fn: Callable[[Any], Any],
    settings: Settings | None = None,
) -> CacheService:
    """Build a :class:`CacheService` from ``SNAPCACHE_*`` settings."""
    settings = settings or get_settings()
    config = CacheConfig(
        data_dir=settings.data_dir,
        cache_file_name=settings.cache_file_name,
        value_conversion_fn=value_conversion_fn,
        default_expiration=timedelta(seconds=settings.default_expiration),
        cleanup_interval=timedelta(seconds=settings.cleanup_interval),
    )
    return CacheService(
        config,
        cloud_config_from_settings(settings),
        timeout=settings.remote_timeout,
    )
