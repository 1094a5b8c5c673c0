# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Enumerations, default durations, and message constants."""

from datetime import timedelta
from enum import StrEnum


class RemoteBackend(StrEnum):
    NONE = "none"
    GCS = "gcs"
    LOCAL = "local"


DEFAULT_CACHE_FILE_NAME = "cache"
SNAPSHOT_SUFFIX = ".json"

DEFAULT_EXPIRATION = timedelta(minutes=5)
DEFAULT_CLEANUP_INTERVAL = timedelta(minutes=10)

# Entries restored from a snapshot get this flat window; the stored
# expiration only decides whether an entry is dropped at load time.
REHYDRATION_TTL = timedelta(hours=5)

# Pass as ``ttl`` to keep an entry until it is deleted or flushed.
NO_EXPIRATION = timedelta(seconds=-1)

DEFAULT_REMOTE_TIMEOUT = 30.0  # seconds

# Error messages
ERROR_SET_CACHE = "error adding key/value to cache"
ERROR_CREATING_CACHE_DIR = "error creating cache directory"
ERROR_SAVING_CACHE_FILE = "error saving cache file"
ERROR_OPENING_CACHE_FILE = "error opening cache file"
ERROR_LOADING_CACHE_FILE = "error loading cache file"
ERROR_REMOVING_CACHE_FILE = "error removing cache file"
ERROR_ENCODING_CACHE_FILE = "error encoding cache entries to json"
ERROR_CONVERTING_CACHE_OBJECT = "error converting cached object"

# Log messages
VALUE_ADDED = "added value to cache"
KEY_DELETED = "deleted value with given key"
DELETED_EXPIRED = "deleted expired cache values"
RETURNING_COUNT = "returning item count"
RETURNING_ALL_ITEMS = "returning all items"
CACHE_FLUSHED = "cache flushed"
