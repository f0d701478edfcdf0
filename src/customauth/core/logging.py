# SPDX-License-Identifier: MIT
# Copyright (c) 2026 CustomAuth Contributors

"""Logging setup for CustomAuth.

Every orchestration call runs inside a :func:`call_context`, which tags all
log lines emitted during the call (including those from the HTTP client)
with a call ID and the operation name. Two output formats are available:

- ``json``: one object per line, for log shippers
- ``text``: ``2026-01-01 12:00:00 INFO  customauth.auth.client [getTorusKey a1b2c3d4] ...``

ID tokens and key material never reach a log line: arguments go through
:func:`redact` before they are attached to a record.
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

_call_id: ContextVar[str | None] = ContextVar("customauth_call_id", default=None)
_operation: ContextVar[str | None] = ContextVar("customauth_operation", default=None)

# Key fragments matched case-insensitively after dropping "_" and "-"
REDACTED_KEYS = ("token", "privatekey", "secret", "password", "credential")
REDACTED = "[REDACTED]"
MAX_VALUE_LENGTH = 500


def current_call_id() -> str | None:
    return _call_id.get()


def current_operation() -> str | None:
    return _operation.get()


def new_call_id() -> str:
    return uuid.uuid4().hex


@contextmanager
def call_context(operation: str | None = None, call_id: str | None = None) -> Iterator[str]:
    """Scope a call ID (and optionally an operation name) to a block.

    Nested contexts shadow the outer values and restore them on exit.
    """
    cid = call_id or new_call_id()
    id_token = _call_id.set(cid)
    op_token = _operation.set(operation) if operation is not None else None
    try:
        yield cid
    finally:
        if op_token is not None:
            _operation.reset(op_token)
        _call_id.reset(id_token)


def redact(data: Any) -> Any:
    """Return a copy of ``data`` safe to log.

    Values under sensitive keys are replaced at any nesting depth, and long
    strings are cut to ``MAX_VALUE_LENGTH`` characters.
    """
    if isinstance(data, Mapping):
        return {
            key: REDACTED if _is_sensitive(key) else redact(value) for key, value in data.items()
        }
    if isinstance(data, (list, tuple)):
        return [redact(item) for item in data]
    if isinstance(data, str) and len(data) > MAX_VALUE_LENGTH:
        return data[:MAX_VALUE_LENGTH] + "..."
    return data


def _is_sensitive(key: Any) -> bool:
    normalized = str(key).lower().replace("_", "").replace("-", "")
    return any(fragment in normalized for fragment in REDACTED_KEYS)


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with the active call context attached."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if (cid := current_call_id()) is not None:
            entry["call_id"] = cid
        if (operation := current_operation()) is not None:
            entry["operation"] = operation
        if record.levelno >= logging.WARNING:
            entry["at"] = f"{record.module}:{record.lineno}"
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        fields = getattr(record, "fields", None)
        if fields:
            entry["fields"] = fields
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Single-line human-readable output."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)-8s %(name)s %(context)s%(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        cid, operation = current_call_id(), current_operation()
        parts = [p for p in (operation, cid[:8] if cid else None) if p]
        record.context = f"[{' '.join(parts)}] " if parts else ""
        return super().format(record)


def configure_logging(
    level: str | int | None = None,
    json_format: bool | None = None,
    log_file: str | None = None,
) -> None:
    """Install CustomAuth's handlers on the root logger.

    Arguments left as None are read from ``CUSTOMAUTH_LOG_LEVEL``,
    ``CUSTOMAUTH_LOG_FORMAT`` and ``CUSTOMAUTH_LOG_FILE``. With no format
    configured, JSON is used when stderr is not a terminal. A log file, when
    set, always receives JSON.
    """
    from .config import get_config

    config = get_config()

    if level is None:
        level = config.log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    if json_format is None:
        configured = config.log_format
        json_format = configured == "json" or (configured != "text" and not sys.stderr.isatty())

    if log_file is None:
        log_file = config.log_file

    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(JSONFormatter() if json_format else TextFormatter())
    root.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(JSONFormatter())
        root.addHandler(file_handler)

    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


class CallLogger:
    """Records the start and outcome of orchestration operations."""

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger("customauth.calls")

    def started(self, operation: str, arguments: Mapping[str, Any] | None = None) -> None:
        self.logger.debug(
            f"{operation} started",
            extra={"fields": {"operation": operation, "arguments": redact(arguments or {})}},
        )

    def finished(
        self,
        operation: str,
        duration_ms: float,
        error_code: str | None = None,
    ) -> None:
        outcome = f"failed [{error_code}]" if error_code else "succeeded"
        self.logger.log(
            logging.INFO if error_code else logging.DEBUG,
            f"{operation} {outcome} in {duration_ms:.1f}ms",
            extra={
                "fields": {
                    "operation": operation,
                    "ok": error_code is None,
                    "error_code": error_code,
                    "duration_ms": round(duration_ms, 1),
                }
            },
        )


call_logger = CallLogger()
