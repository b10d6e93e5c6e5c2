"""Utility helpers shared across CLI commands."""

from __future__ import annotations

import asyncio
import json
import sys
from collections.abc import Awaitable
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Sequence, TextIO, TypeVar

import typer
from loguru import logger

from chartfeed.core.config import ChartfeedConfig, ConfigManager
from chartfeed.core.exceptions import (
    ChartfeedError,
    ConfigurationError,
    NoDataAvailableError,
    ProviderError,
    StageFailureError,
    format_error_response,
)
from chartfeed.core.logging import configure_logging

from .constants import PROVIDER_EXIT_CODE, SYSTEM_EXIT_CODE, VALIDATION_EXIT_CODE
from .formatters import OutputFormatter, create_formatter

T = TypeVar("T")


@dataclass(slots=True)
class CLIOptions:
    """Resolved options derived from the Typer context."""

    format: str = "table"
    output_path: Path | None = None
    config_path: Path | None = None
    no_color: bool = False


def get_cli_options(ctx: typer.Context) -> CLIOptions:
    ctx.ensure_object(dict)
    data = ctx.obj or {}
    return CLIOptions(
        format=str(data.get("format", "table")),
        output_path=data.get("output_path"),
        config_path=data.get("config_path"),
        no_color=bool(data.get("no_color", False)),
    )


def load_config(ctx: typer.Context, **overrides: object) -> ChartfeedConfig:
    """Load file and environment configuration, then apply CLI overrides."""

    options = get_cli_options(ctx)
    manager = ConfigManager(options.config_path)
    if overrides:
        manager.update_config(**overrides)
    config = manager.get_config()
    if config.logging.file:
        data = ctx.obj or {}
        configure_logging(
            data.get("log_level", config.logging.level),
            serialize=bool(data.get("json_logs", config.logging.serialize)),
            file_path=config.logging.file,
        )
    return config


def prepare_output(ctx: typer.Context) -> tuple[OutputFormatter, TextIO, ExitStack, CLIOptions]:
    """Resolve formatter and writable stream for the current command."""

    options = get_cli_options(ctx)
    formatter = create_formatter(options.format, no_color=options.no_color)

    stack = ExitStack()
    stream: TextIO
    if options.output_path is not None:
        try:
            stream = stack.enter_context(open(options.output_path, "w", encoding="utf-8"))
        except OSError as exc:
            stack.close()
            emit_error(f"Unable to open '{options.output_path}': {exc}", "OUTPUT_WRITE_ERROR")
            raise typer.Exit(code=VALIDATION_EXIT_CODE) from exc
    else:
        stream = sys.stdout

    return formatter, stream, stack, options


def emit_error(message: str, code: str, *, details: Mapping[str, object] | None = None) -> None:
    """Print a structured error payload to stderr."""

    payload: dict[str, object] = {"code": code, "message": message}
    if details:
        payload["details"] = _sanitize_details(details)
    typer.echo(json.dumps(payload, ensure_ascii=False, default=str), err=True)


def _sanitize_details(details: Mapping[str, object]) -> Mapping[str, object]:
    sanitized: dict[str, object] = {}
    for key, value in details.items():
        if isinstance(value, (str, int, float, bool)) or value is None:
            sanitized[key] = value
        elif isinstance(value, Mapping):
            sanitized[key] = _sanitize_details(value)
        elif isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
            sanitized[key] = [str(item) for item in value]
        else:
            sanitized[key] = str(value)
    return sanitized


def run_command(coro: Awaitable[T], *, chart_id: str | None = None) -> T:
    """Run ``coro`` and turn chartfeed errors into a JSON message and exit code."""

    context = {"chart_id": chart_id} if chart_id else {}
    try:
        return asyncio.run(coro)
    except ConfigurationError as error:
        _exit_with(error, VALIDATION_EXIT_CODE, context)
    except (NoDataAvailableError, StageFailureError, ProviderError) as error:
        _exit_with(error, PROVIDER_EXIT_CODE, context)
    except ChartfeedError as error:
        _exit_with(error, SYSTEM_EXIT_CODE, context)
    raise AssertionError("unreachable")  # pragma: no cover


def _exit_with(error: ChartfeedError, code: int, context: Mapping[str, object]) -> None:
    payload = format_error_response(error, **context)
    logger.debug(f"Command failed with {payload['code']}")
    emit_error(payload["message"], payload["code"], details=payload["details"])
    raise typer.Exit(code=code) from error


__all__ = [
    "CLIOptions",
    "get_cli_options",
    "load_config",
    "prepare_output",
    "emit_error",
    "run_command",
]
