"""Structured logging utilities with trace propagation."""

from __future__ import annotations

import json
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime
from typing import IO, Any, Iterator
from uuid import uuid4

from loguru import logger

from chartfeed.core.logging.config import LogConfig

_TRACE_ID_VAR: ContextVar[str | None] = ContextVar("chartfeed_trace_id", default=None)
_CONTEXT_VAR: ContextVar[dict[str, Any]] = ContextVar("chartfeed_log_context", default={})

_PROMOTED_KEYS = ("chart_id", "stage")


def _ensure_trace_id() -> str:
    trace_id = _TRACE_ID_VAR.get()
    if trace_id is None:
        trace_id = uuid4().hex
        _TRACE_ID_VAR.set(trace_id)
    return trace_id


def _patch_record(record: dict[str, Any]) -> None:
    extra = record.setdefault("extra", {})
    trace_id = extra.get("trace_id")
    if trace_id:
        _TRACE_ID_VAR.set(trace_id)
    else:
        extra["trace_id"] = _ensure_trace_id()

    for key, value in _CONTEXT_VAR.get({}).items():
        if key in _PROMOTED_KEYS:
            if extra.get(key) is None:
                extra[key] = value
        elif key != "trace_id":
            extra.setdefault(key, value)

    for key in _PROMOTED_KEYS:
        extra.setdefault(key, None)


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def _format_payload(record: dict[str, Any]) -> dict[str, Any]:
    extra = record.get("extra", {})
    context = {k: v for k, v in extra.items() if k not in {"trace_id", *_PROMOTED_KEYS}}
    level_value = record.get("level")
    level_name = getattr(level_value, "name", None) or str(level_value or "INFO")
    payload: dict[str, Any] = {
        "timestamp": record["time"].isoformat() if "time" in record else datetime.utcnow().isoformat(),
        "level": level_name,
        "message": record.get("message"),
        "trace_id": extra.get("trace_id"),
        "chart_id": extra.get("chart_id"),
        "stage": extra.get("stage"),
    }
    if context:
        payload["context"] = context
    exception = record.get("exception")
    if exception:
        payload["exception"] = str(exception)
    return payload


def _format_line(record: dict[str, Any]) -> str:
    payload = _format_payload(record)
    prefix = f"[{payload['chart_id']}] " if payload["chart_id"] else ""
    return f"{payload['timestamp']} | {payload['level']:<8} | {prefix}{payload['message']}"


class _StreamSink:
    """Sink writing either JSON payloads or plain lines to a text stream."""

    def __init__(self, stream: IO[str] | None = None, serialize: bool = True) -> None:
        self._stream = stream
        self._serialize = serialize

    def __call__(self, message: Any) -> None:
        stream = self._stream if self._stream is not None else sys.stderr
        if self._serialize:
            stream.write(json.dumps(_format_payload(message.record), default=_json_default))
        else:
            stream.write(_format_line(message.record))
        stream.write("\n")
        stream.flush()


class _FileJsonSink:
    """Sink persisting JSON lines to a file path."""

    def __init__(self, path: str) -> None:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        self._path = path

    def __call__(self, message: Any) -> None:
        payload = _format_payload(message.record)
        with open(self._path, "a", encoding="utf-8") as file:
            file.write(json.dumps(payload, default=_json_default))
            file.write("\n")


def _configure_from_config(config: LogConfig) -> None:
    handlers: list[dict[str, Any]] = [
        {"sink": _StreamSink(config.console_stream, serialize=config.serialize), "level": config.level}
    ]
    if config.file_path:
        handlers.append({"sink": _FileJsonSink(config.file_path), "level": config.level})
    logger.configure(handlers=handlers, patcher=_patch_record)


def configure_logging(level: str = "INFO", **kwargs: Any) -> None:
    """Configure structured logging with the provided level and options."""

    _configure_from_config(LogConfig(level=level.upper(), **kwargs))


class StructuredLogger:
    """Wrapper exposing the configured loguru logger with trace-aware context helpers."""

    def __init__(self, config: LogConfig | None = None) -> None:
        self.config = config or LogConfig()
        _configure_from_config(self.config)
        self.logger = logger

    def configure(self, **kwargs: Any) -> None:
        """Update logger configuration at runtime."""

        self.config = self.config.model_copy(update=kwargs)
        _configure_from_config(self.config)

    @contextmanager
    def context(self, *, trace_id: str | None = None, **extra: Any) -> Iterator[str]:
        with log_context(trace_id=trace_id, **extra) as active_trace:
            yield active_trace


def bind(**kwargs: Any):
    """Bind structured context to the global logger instance."""

    return logger.bind(**kwargs)


@contextmanager
def log_context(*, trace_id: str | None = None, **extra: Any) -> Iterator[str]:
    """Propagate a trace id and metadata such as ``chart_id`` to nested log events."""

    previous_context = _CONTEXT_VAR.get({})
    context_token = _CONTEXT_VAR.set({**previous_context, **extra})

    active_trace = trace_id or uuid4().hex
    trace_token = _TRACE_ID_VAR.set(active_trace)

    try:
        yield active_trace
    finally:
        _TRACE_ID_VAR.reset(trace_token)
        _CONTEXT_VAR.reset(context_token)


def current_trace_id() -> str:
    """Return the currently active trace id, generating one if required."""

    return _ensure_trace_id()


__all__ = [
    "StructuredLogger",
    "bind",
    "configure_logging",
    "current_trace_id",
    "log_context",
    "logger",
]
