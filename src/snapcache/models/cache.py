# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Cache entry, snapshot and configuration models."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from snapcache.core.constants import (
    DEFAULT_CACHE_FILE_NAME,
    DEFAULT_CLEANUP_INTERVAL,
    DEFAULT_EXPIRATION,
    SNAPSHOT_SUFFIX,
)
from snapcache.core.exceptions import ConfigurationError


def utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """A stored value and its absolute expiry (``None`` never expires)."""

    value: Any
    expires_at: datetime | None = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and now > self.expires_at


class SnapshotEntry(BaseModel):
    """One entry of the on-disk snapshot.

    ``object`` holds the raw JSON value as decoded, before the caller's
    conversion function has been applied.  Entries written by go-cache
    (``Object`` and an ``Expiration`` in Unix nanoseconds, ``0`` for
    never) are read as well; saving always uses the ISO-8601 form.
    """

    object: Any = Field(default=None, validation_alias=AliasChoices("object", "Object"))
    expiration: datetime | None = Field(
        default=None, validation_alias=AliasChoices("expiration", "Expiration")
    )

    @field_validator("expiration", mode="before")
    @classmethod
    def _from_unix_nanos(cls, v: object) -> object:
        if isinstance(v, int) and not isinstance(v, bool):
            if v <= 0:
                return None
            seconds, nanos = divmod(v, 1_000_000_000)
            return datetime.fromtimestamp(seconds, UTC) + timedelta(microseconds=nanos // 1000)
        return v

    @field_validator("expiration", mode="after")
    @classmethod
    def _assume_utc(cls, v: datetime | None) -> datetime | None:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v

    def is_expired(self, now: datetime) -> bool:
        return self.expiration is not None and now > self.expiration


class CacheConfig(BaseModel):
    """Immutable configuration of a single cache instance.

    ``data_dir`` and ``value_conversion_fn`` are required; they are
    optional here so that :class:`~snapcache.service.CacheService` can
    reject a missing value with a :class:`ConfigurationError`.
    Non-positive durations fall back to the defaults.
    """

    model_config = ConfigDict(frozen=True)

    data_dir: Path | None = None
    cache_file_name: str = DEFAULT_CACHE_FILE_NAME
    value_conversion_fn: Callable[[Any], Any] | None = None
    default_expiration: timedelta = DEFAULT_EXPIRATION
    cleanup_interval: timedelta = DEFAULT_CLEANUP_INTERVAL

    @field_validator("data_dir", mode="before")
    @classmethod
    def _blank_dir_is_missing(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("cache_file_name", mode="before")
    @classmethod
    def _default_file_name(cls, v: object) -> object:
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_CACHE_FILE_NAME
        return v

    @field_validator("default_expiration", mode="after")
    @classmethod
    def _default_expiration(cls, v: timedelta) -> timedelta:
        return v if v > timedelta(0) else DEFAULT_EXPIRATION

    @field_validator("cleanup_interval", mode="after")
    @classmethod
    def _default_cleanup_interval(cls, v: timedelta) -> timedelta:
        return v if v > timedelta(0) else DEFAULT_CLEANUP_INTERVAL

    @property
    def file_path(self) -> Path:
        """``<data_dir>/<cache_file_name>.json``."""
        if self.data_dir is None:
            raise ConfigurationError("missing required data directory")
        return self.data_dir / f"{self.cache_file_name}{SNAPSHOT_SUFFIX}"
