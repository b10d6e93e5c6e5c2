"""Logging utilities."""

from chartfeed.core.logging.config import LogConfig
from chartfeed.core.logging.logger import (
    StructuredLogger,
    bind,
    configure_logging,
    current_trace_id,
    log_context,
    logger,
)

__all__ = [
    "LogConfig",
    "StructuredLogger",
    "bind",
    "configure_logging",
    "current_trace_id",
    "log_context",
    "logger",
]
