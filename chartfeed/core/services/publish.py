"""
Chart publish pipeline.

Runs upload, annotate, republish and report strictly in that order. A
failing stage stops the run; stages that already completed stay applied on
the backend.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import TypeVar

from loguru import logger

from chartfeed.core.charts import ChartBackend, Payload
from chartfeed.core.exceptions import StageFailureError
from chartfeed.core.logging import current_trace_id, log_context
from chartfeed.core.models import PipelineState, PublishResult, PublishStage
from chartfeed.core.models.publish import STAGE_STATES
from chartfeed.core.services.freshness import format_freshness_note

T = TypeVar("T")


class PublishPipeline:
    """Upload a payload to a chart, stamp its notes and republish it.

    Args:
        backend: chart service receiving the calls
        note_factory: builds the freshness note; called once per run
        stage_timeout: optional deadline in seconds for each backend call
        dry_run: log the stages without calling the backend
    """

    def __init__(
        self,
        backend: ChartBackend | None,
        *,
        note_factory: Callable[[], str] | None = None,
        stage_timeout: float | None = None,
        dry_run: bool = False,
    ):
        if backend is None and not dry_run:
            raise ValueError("a chart backend is required unless dry_run is set")
        self.backend = backend
        self.note_factory = note_factory or format_freshness_note
        self.stage_timeout = stage_timeout
        self.dry_run = dry_run
        self.state = PipelineState.IDLE
        self.failed_stage: PublishStage | None = None
        self.history: list[PipelineState] = [PipelineState.IDLE]

    def _transition(self, state: PipelineState) -> None:
        self.state = state
        self.history.append(state)

    async def _run_stage(
        self,
        stage: PublishStage,
        chart_id: str,
        completed: list[PublishStage],
        call: Callable[[], Awaitable[T]],
        dry_run_call: Callable[[], Awaitable[T]] | None = None,
    ) -> T | None:
        self._transition(STAGE_STATES[stage])
        stage_logger = logger.bind(stage=stage.value)
        if self.dry_run:
            stage_logger.info(f"[dry-run] skipping {stage.value} for chart {chart_id}")
            if dry_run_call is None:
                completed.append(stage)
                return None
            call = dry_run_call
        try:
            if self.stage_timeout is None:
                result = await call()
            else:
                result = await asyncio.wait_for(call(), self.stage_timeout)
        except Exception as e:
            self.failed_stage = stage
            self._transition(PipelineState.FAILED)
            stage_logger.error(f"[{chart_id}] {stage.value} failed: {e}")
            raise StageFailureError(stage.value, chart_id, e, completed=[s.value for s in completed]) from e
        completed.append(stage)
        return result

    async def _build_note(self) -> str:
        return self.note_factory()

    async def _annotate(self, chart_id: str) -> str:
        notes = self.note_factory()
        await self.backend.update_notes(chart_id, notes)
        return notes

    async def publish(self, chart_id: str, payload: Payload) -> PublishResult:
        """Run all stages for ``chart_id`` and return the public URL.

        Raises:
            StageFailureError: naming the stage that failed
        """
        completed: list[PublishStage] = []
        self.failed_stage = None
        with log_context(trace_id=current_trace_id(), chart_id=chart_id):
            await self._run_stage(
                PublishStage.UPLOAD, chart_id, completed, lambda: self.backend.upload_data(chart_id, payload)
            )
            logger.info(f"[{chart_id}] Data updated.")

            notes = await self._run_stage(
                PublishStage.ANNOTATE,
                chart_id,
                completed,
                lambda: self._annotate(chart_id),
                dry_run_call=self._build_note,
            )
            logger.info(f"[{chart_id}] Last update time updated.")

            public_url = await self._run_stage(
                PublishStage.REPUBLISH, chart_id, completed, lambda: self.backend.publish_chart(chart_id)
            )
            logger.info(f"[{chart_id}] Chart published.")

            self._transition(PipelineState.DONE)
            completed.append(PublishStage.REPORT)
            if public_url:
                logger.info(f"[{chart_id}] {public_url}")

        return PublishResult(
            chart_id=chart_id,
            public_url=public_url,
            notes=notes,
            stages_completed=completed,
            dry_run=self.dry_run,
        )


def note_factory_for(prefix: str, timezone: str, clock: Callable[[], datetime] | None = None) -> Callable[[], str]:
    """Bind freshness note settings, optionally to a fixed clock."""

    def factory() -> str:
        return format_freshness_note(clock() if clock else None, prefix=prefix, timezone=timezone)

    return factory


__all__ = ["PublishPipeline", "note_factory_for"]
