"""Logging configuration primitives for structured logging."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class LogConfig(BaseModel):
    """Sinks for chartfeed logs.

    Records always go to ``console_stream`` (stderr when unset), as JSON when
    ``serialize`` is on. Setting ``file_path`` also appends JSON lines there.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    level: str = "INFO"
    console_stream: Any = None
    serialize: bool = True
    file_path: str | None = None


__all__ = ["LogConfig"]
