"""Stock table commands for the chartfeed CLI."""

from __future__ import annotations

import typer

from chartfeed.core.config import ChartfeedConfig, parse_symbols
from chartfeed.core.exceptions import ConfigurationError
from chartfeed.core.services import StockChartUpdater

from .constants import VALIDATION_EXIT_CODE
from .utils import emit_error, load_config, prepare_output, run_command

stocks_app = typer.Typer(help="Stock price tables.")


def register(app: typer.Typer) -> None:
    """Register the stocks command group on the provided application."""

    app.add_typer(stocks_app, name="stocks", help="Fetch stock prices and publish them")


def get_updater(config: ChartfeedConfig) -> StockChartUpdater:
    """Factory hook for obtaining a :class:`StockChartUpdater`."""

    return StockChartUpdater(config)


def _validated(config: ChartfeedConfig, *, need_backend: bool) -> ChartfeedConfig:
    try:
        config.validate(need_quotes=True, need_backend=need_backend)
    except ConfigurationError as error:
        emit_error(error.message, error.error_code, details=error.details)
        raise typer.Exit(code=VALIDATION_EXIT_CODE) from error
    return config


@stocks_app.command("fetch")
def fetch_command(
    ctx: typer.Context,
    symbols: str | None = typer.Option(None, "--symbols", help="Comma separated list of symbols."),
    fetch_timeout: float | None = typer.Option(None, "--fetch-timeout", help="Per-symbol deadline in seconds."),
) -> None:
    """Fetch and merge closing prices without publishing them."""

    config = load_config(
        ctx,
        pipeline={
            "symbols": parse_symbols(symbols) if symbols else None,
            "fetch_timeout": fetch_timeout,
        },
    )
    _validated(config, need_backend=False)

    formatter, stream, stack, _ = prepare_output(ctx)
    with stack:
        table = run_command(get_updater(config).fetch_table())
        formatter.render(table.records(), stream=stream, columns=table.header)


@stocks_app.command("publish")
def publish_command(
    ctx: typer.Context,
    chart_id: str | None = typer.Option(None, "--chart-id", help="Chart to update."),
    symbols: str | None = typer.Option(None, "--symbols", help="Comma separated list of symbols."),
    fetch_timeout: float | None = typer.Option(None, "--fetch-timeout", help="Per-symbol deadline in seconds."),
    stage_timeout: float | None = typer.Option(None, "--stage-timeout", help="Per-stage deadline in seconds."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Fetch data but do not touch the chart."),
) -> None:
    """Fetch closing prices, upload them to the chart and republish it."""

    config = load_config(
        ctx,
        pipeline={
            "chart_id": chart_id,
            "symbols": parse_symbols(symbols) if symbols else None,
            "fetch_timeout": fetch_timeout,
            "stage_timeout": stage_timeout,
            "dry_run": True if dry_run else None,
        },
    )
    _validated(config, need_backend=not config.pipeline.dry_run)
    if not config.pipeline.chart_id:
        emit_error("Missing required settings: pipeline.chart_id", "CONFIGURATION_ERROR")
        raise typer.Exit(code=VALIDATION_EXIT_CODE)

    result = run_command(get_updater(config).run(), chart_id=config.pipeline.chart_id)
    if result.public_url:
        typer.echo(result.public_url)
    else:
        typer.echo(f"[{result.chart_id}] dry run complete, nothing published.")
