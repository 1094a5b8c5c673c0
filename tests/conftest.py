# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Shared test fixtures and configuration."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from pydantic import BaseModel

from snapcache.cloud.local import LocalDirectoryStorageClient
from snapcache.models.cache import CacheConfig

BUCKET = "test-bucket"


class Person(BaseModel):
    name: str
    age: int


def convert_person(raw: object) -> Person:
    return Person.model_validate(raw)


class FakeClock:
    """Manually advanced wall clock."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def cache_config(data_dir: Path) -> CacheConfig:
    return CacheConfig(data_dir=data_dir, value_conversion_fn=convert_person)


@pytest.fixture
def remote_root(tmp_path: Path) -> Path:
    return tmp_path / "remote"


@pytest.fixture
def local_client(remote_root: Path) -> Iterator[LocalDirectoryStorageClient]:
    client = LocalDirectoryStorageClient(remote_root)
    yield client
    client.close()
