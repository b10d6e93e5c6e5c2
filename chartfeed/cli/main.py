"""Main entry point for the chartfeed command line interface."""

from __future__ import annotations

import os
from pathlib import Path

import typer
from dotenv import find_dotenv, load_dotenv

from chartfeed.core.logging import configure_logging

from .chart import register as register_chart_commands
from .formatters import create_formatter
from .stocks import register as register_stock_commands


def create_app() -> typer.Typer:
    """Create a Typer application instance for chartfeed."""

    app = typer.Typer(add_completion=False, help="Fetch stock prices and publish them to charts")

    @app.callback()
    def main(
        ctx: typer.Context,
        format: str = typer.Option(
            "table",
            "--format",
            "-f",
            help="Output format (table, jsonl or pipe).",
            show_default=True,
        ),
        output: Path | None = typer.Option(
            None,
            "--output",
            "-o",
            help="Write output to a file instead of stdout.",
        ),
        config: Path | None = typer.Option(
            None,
            "--config",
            "-c",
            help="TOML configuration file (default ~/.chartfeed/config.toml).",
        ),
        env_file: Path | None = typer.Option(
            None,
            "--env-file",
            help="Load environment variables from this file instead of ./.env.",
        ),
        log_level: str | None = typer.Option(
            None,
            "--log-level",
            help="Logging level (default INFO or CHARTFEED_LOG_LEVEL).",
        ),
        json_logs: bool = typer.Option(
            False,
            "--json-logs",
            help="Emit structured JSON log lines on stderr.",
        ),
        no_color: bool = typer.Option(
            False,
            "--no-color",
            help="Disable colorized output for table format.",
        ),
    ) -> None:
        ctx.ensure_object(dict)
        normalized_format = format.strip().lower()
        try:
            create_formatter(normalized_format, no_color=no_color)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--format") from exc

        if env_file is not None:
            load_dotenv(env_file)
        else:
            load_dotenv(find_dotenv(usecwd=True))
        resolved_level = (log_level or os.getenv("CHARTFEED_LOG_LEVEL") or "INFO").upper()
        configure_logging(resolved_level, serialize=json_logs)

        ctx.obj.update(
            {
                "format": normalized_format,
                "output_path": output,
                "config_path": config,
                "log_level": resolved_level,
                "json_logs": json_logs,
                "no_color": no_color,
            }
        )

    register_stock_commands(app)
    register_chart_commands(app)
    return app


app = create_app()
