"""Structured logging for generator runs.

protoc reads the plugin's stdout as the serialized response, so every
handler installed here writes to stderr. Records emitted inside a
:class:`LogContext` carry the proto file and service being generated.
"""

from __future__ import annotations

import contextvars
import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

__all__ = [
    "LEVEL_NAME_TO_INT",
    "LOG_FORMAT_CONSOLE",
    "LOG_FORMAT_ENV",
    "LOG_FORMAT_JSON",
    "LogContext",
    "StructuredConsoleFormatter",
    "StructuredJSONFormatter",
    "get_logger",
]


LOG_FORMAT_ENV = "GOGAPIC_LOG_FORMAT"
LOG_FORMAT_JSON = "json"
LOG_FORMAT_CONSOLE = "console"

LEVEL_NAME_TO_INT: dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

_CONTEXT_KEYS = ("proto_file", "service")
_GENERATION_CONTEXT: contextvars.ContextVar[dict[str, str]] = contextvars.ContextVar(
    "gogapic_generation_context", default={}
)

_CONSOLE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s [%(proto_file)s %(service)s]"

# Attributes every LogRecord has; anything else was passed through ``extra``.
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime", *_CONTEXT_KEYS}


class LogContext:
    """Bind the proto file and service being generated to log records.

    Contexts nest: an inner context overrides only the keys it sets.
    """

    def __init__(self, proto_file: str | None = None, service: str | None = None) -> None:
        self._values = {
            key: value
            for key, value in (("proto_file", proto_file), ("service", service))
            if value is not None
        }
        self._token: contextvars.Token[dict[str, str]] | None = None

    def __enter__(self) -> LogContext:
        merged = {**_GENERATION_CONTEXT.get(), **self._values}
        self._token = _GENERATION_CONTEXT.set(merged)
        return self

    def __exit__(self, exc_type: Any, exc: Any, traceback: Any) -> None:
        if self._token is not None:
            _GENERATION_CONTEXT.reset(self._token)
            self._token = None


class _GenerationContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        current = _GENERATION_CONTEXT.get()
        for key in _CONTEXT_KEYS:
            if not hasattr(record, key):
                setattr(record, key, current.get(key, "-"))
        return True


class StructuredJSONFormatter(logging.Formatter):
    """One JSON object per record: level, logger, message, context and extras."""

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _CONTEXT_KEYS:
            value = getattr(record, key, "-")
            if value != "-":
                payload[key] = value
        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS and not key.startswith("_"):
                payload.setdefault(key, value)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class StructuredConsoleFormatter(logging.Formatter):
    def __init__(self) -> None:
        super().__init__(fmt=_CONSOLE_FORMAT)


def _resolve_level(level: int | str | None) -> int | None:
    if isinstance(level, str):
        return LEVEL_NAME_TO_INT.get(level.strip().upper(), logging.WARNING)
    return level


def _resolve_format(log_format: str | None) -> str:
    value = (log_format or os.getenv(LOG_FORMAT_ENV) or "").strip().lower()
    return LOG_FORMAT_JSON if value == LOG_FORMAT_JSON else LOG_FORMAT_CONSOLE


def get_logger(
    name: str,
    *,
    log_format: str | None = None,
    level: int | str | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Return ``name``'s logger with a single structured stderr handler.

    Args:
        name: Logger name.
        log_format: ``console`` or ``json``; defaults to ``$GOGAPIC_LOG_FORMAT``,
            then ``console``.
        level: Level (int or name) applied to the logger on every call. When
            omitted, a logger without a level gets WARNING.
        stream: Handler stream; defaults to stderr. Only used when the
            handler is first installed.
    """
    logger = logging.getLogger(name)
    resolved_level = _resolve_level(level)
    if resolved_level is not None:
        logger.setLevel(resolved_level)
    elif logger.level == logging.NOTSET:
        logger.setLevel(logging.WARNING)

    format_kind = _resolve_format(log_format)
    for handler in logger.handlers:
        if getattr(handler, "_gogapic_format", None) == format_kind:
            return logger

    handler = logging.StreamHandler(stream or sys.stderr)
    if format_kind == LOG_FORMAT_JSON:
        handler.setFormatter(StructuredJSONFormatter())
    else:
        handler.setFormatter(StructuredConsoleFormatter())
    handler.addFilter(_GenerationContextFilter())
    handler._gogapic_format = format_kind  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.propagate = False
    return logger
