"""Chart maintenance commands for the chartfeed CLI."""

from __future__ import annotations

import json
from pathlib import Path

import typer

from chartfeed.core.charts import DatawrapperClient, Payload
from chartfeed.core.config import ChartfeedConfig
from chartfeed.core.exceptions import ConfigurationError
from chartfeed.core.logging import log_context
from chartfeed.core.services import StockChartUpdater, note_factory_for

from .constants import VALIDATION_EXIT_CODE
from .utils import emit_error, load_config, run_command

chart_app = typer.Typer(help="Chart operations.")


def register(app: typer.Typer) -> None:
    """Register the chart command group on the provided application."""

    app.add_typer(chart_app, name="chart", help="Publish payloads and maintain charts")


def get_chart_client(config: ChartfeedConfig) -> DatawrapperClient:
    """Factory hook for obtaining the chart backend client."""

    return DatawrapperClient(config.backend)


def get_updater(config: ChartfeedConfig) -> StockChartUpdater:
    return StockChartUpdater(config)


def _chart_config(ctx: typer.Context, chart_id: str, **pipeline: object) -> ChartfeedConfig:
    config = load_config(ctx, pipeline={"chart_id": chart_id, **pipeline})
    try:
        config.validate(need_quotes=False, need_backend=not config.pipeline.dry_run)
    except ConfigurationError as error:
        emit_error(error.message, error.error_code, details=error.details)
        raise typer.Exit(code=VALIDATION_EXIT_CODE) from error
    return config


def _read_payload(data_file: Path, as_json: bool) -> Payload:
    try:
        text = data_file.read_text(encoding="utf-8")
    except OSError as exc:
        emit_error(f"Unable to read '{data_file}': {exc}", "DATA_FILE_ERROR")
        raise typer.Exit(code=VALIDATION_EXIT_CODE) from exc
    if not as_json:
        return text
    try:
        return json.loads(text)
    except ValueError as exc:
        emit_error(f"'{data_file}' is not valid JSON: {exc}", "DATA_FILE_ERROR")
        raise typer.Exit(code=VALIDATION_EXIT_CODE) from exc


@chart_app.command("publish")
def publish_command(
    ctx: typer.Context,
    chart_id: str = typer.Option(..., "--chart-id", help="Chart to update."),
    data_file: Path = typer.Option(..., "--data-file", help="Payload to upload."),
    as_json: bool = typer.Option(False, "--json", help="Upload the file as JSON (e.g. a markers document)."),
    stage_timeout: float | None = typer.Option(None, "--stage-timeout", help="Per-stage deadline in seconds."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Log the stages without calling the backend."),
) -> None:
    """Upload a pre-built payload, stamp the notes and republish."""

    config = _chart_config(ctx, chart_id, stage_timeout=stage_timeout, dry_run=True if dry_run else None)
    payload = _read_payload(data_file, as_json)
    result = run_command(get_updater(config).publish(payload), chart_id=chart_id)
    if result.public_url:
        typer.echo(result.public_url)
    else:
        typer.echo(f"[{chart_id}] dry run complete, nothing published.")


@chart_app.command("data")
def data_command(
    ctx: typer.Context,
    chart_id: str = typer.Option(..., "--chart-id", help="Chart to read."),
) -> None:
    """Print the data currently stored in the chart."""

    config = _chart_config(ctx, chart_id)

    async def _fetch() -> str:
        async with get_chart_client(config) as client:
            return await client.get_data(chart_id)

    typer.echo(run_command(_fetch(), chart_id=chart_id))


@chart_app.command("notes")
def notes_command(
    ctx: typer.Context,
    chart_id: str = typer.Option(..., "--chart-id", help="Chart to annotate."),
    text: str | None = typer.Option(None, "--text", help="Notes text; defaults to a freshness note."),
) -> None:
    """Overwrite the chart notes without touching its data."""

    config = _chart_config(ctx, chart_id)
    notes = text if text is not None else note_factory_for(
        config.pipeline.notes_prefix, config.pipeline.notes_timezone
    )()

    async def _annotate() -> None:
        with log_context(chart_id=chart_id):
            async with get_chart_client(config) as client:
                await client.update_notes(chart_id, notes)

    run_command(_annotate(), chart_id=chart_id)
    typer.echo(notes)


@chart_app.command("republish")
def republish_command(
    ctx: typer.Context,
    chart_id: str = typer.Option(..., "--chart-id", help="Chart to republish."),
) -> None:
    """Republish the chart and print its public URL."""

    config = _chart_config(ctx, chart_id)

    async def _republish() -> str:
        async with get_chart_client(config) as client:
            return await client.publish_chart(chart_id)

    typer.echo(run_command(_republish(), chart_id=chart_id))


@chart_app.command("delete")
def delete_command(
    ctx: typer.Context,
    chart_id: str = typer.Option(..., "--chart-id", help="Chart to delete."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
) -> None:
    """Delete the chart on the backend."""

    config = _chart_config(ctx, chart_id)
    if not yes:
        typer.confirm(f"Delete chart {chart_id}?", abort=True)

    async def _delete() -> None:
        async with get_chart_client(config) as client:
            await client.delete_chart(chart_id)

    run_command(_delete(), chart_id=chart_id)
