# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Structured logging with redaction of cloud credentials."""

import json
import logging
import re
import sys
import threading
from pathlib import Path
from typing import Any

REDACT_PATTERNS = [
    re.compile(r"(-----BEGIN [A-Z ]*PRIVATE KEY-----)[\s\S]*?(?=-----END|$)"),
    re.compile(r"(\"private_key_id\"\s*:\s*\"[a-f0-9]{4})[a-f0-9]*"),
    re.compile(r"(AKIA[A-Z0-9]{4})[A-Z0-9]{12}"),
    re.compile(r"(ya29\.[a-zA-Z0-9\-_]{6})[a-zA-Z0-9\-_.]*"),
    re.compile(r"(Bearer\s+[a-zA-Z0-9\-._~+/]{10})[a-zA-Z0-9\-._~+/]*"),
]

# Service-account key fields whose values never belong in a log line.
CREDENTIAL_SECRET_FIELDS = ("private_key", "private_key_id", "client_id")

_secret_values: frozenset[str] = frozenset()
_secret_lock = threading.Lock()


def register_credentials(credentials_path: Path | str) -> int:
    """Redact the secret values of a service-account key file from all log output.

    Returns the number of values added.  An unreadable or non-JSON file
    is logged as a warning and registers nothing.
    """
    global _secret_values
    path = Path(credentials_path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logging.getLogger("snapcache.core.logging").warning(
            "Cannot read credentials file %s for redaction: %s", path, exc
        )
        return 0
    if not isinstance(data, dict):
        return 0

    found = {
        value
        for field in CREDENTIAL_SECRET_FIELDS
        if isinstance(value := data.get(field), str) and value
    }
    with _secret_lock:
        added = found - _secret_values
        _secret_values = _secret_values | found
    return len(added)


def redact_sensitive(text: str) -> str:
    # Longest first so a key id inside a longer secret cannot split it.
    for secret in sorted(_secret_values, key=len, reverse=True):
        text = text.replace(secret, "[REDACTED]")
    for pattern in REDACT_PATTERNS:
        text = pattern.sub(r"\1[REDACTED]", text)
    return text


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": redact_sensitive(record.getMessage()),
        }
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = redact_sensitive(str(record.exc_info[1]))
        return json.dumps(log_entry)


class TextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        msg = super().format(record)
        return redact_sensitive(msg)


def setup_logging(
    level: str = "INFO",
    fmt: str = "json",
    credentials_path: Path | str | None = None,
) -> None:
    """Configure the ``snapcache`` logger.

    When *credentials_path* is given, the secret values of that key file
    are redacted from every record.
    """
    root = logging.getLogger("snapcache")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            TextFormatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
    root.addHandler(handler)

    if credentials_path is not None:
        register_credentials(credentials_path)
