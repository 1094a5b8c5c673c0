# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Library configuration via environment variables and .env files."""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from snapcache.core.constants import (
    DEFAULT_CACHE_FILE_NAME,
    DEFAULT_CLEANUP_INTERVAL,
    DEFAULT_EXPIRATION,
    DEFAULT_REMOTE_TIMEOUT,
    RemoteBackend,
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SNAPCACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
    )

    # Snapshot file
    data_dir: Path | None = None
    cache_file_name: str = DEFAULT_CACHE_FILE_NAME

    # Expiry (seconds)
    default_expiration: float = DEFAULT_EXPIRATION.total_seconds()
    cleanup_interval: float = DEFAULT_CLEANUP_INTERVAL.total_seconds()

    @field_validator("default_expiration", "cleanup_interval", mode="before")
    @classmethod
    def _parse_duration(cls, v: object) -> object:
        if isinstance(v, str) and v.strip().endswith("s"):
            return v.strip()[:-1]
        return v

    # Remote backup
    remote_backend: RemoteBackend = RemoteBackend.NONE
    credentials_path: Path | None = None
    bucket_name: str = ""
    remote_dir: Path | None = None  # root directory for the "local" backend
    remote_timeout: float = DEFAULT_REMOTE_TIMEOUT

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"


def get_settings() -> Settings:
    return Settings()
