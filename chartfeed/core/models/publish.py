"""Publish pipeline states and results."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class PublishStage(str, Enum):
    """Stages of the publish pipeline, in execution order."""

    UPLOAD = "upload"
    ANNOTATE = "annotate"
    REPUBLISH = "republish"
    REPORT = "report"


class PipelineState(str, Enum):
    """Observable pipeline state."""

    IDLE = "idle"
    UPLOADING = "uploading"
    ANNOTATING = "annotating"
    REPUBLISHING = "republishing"
    DONE = "done"
    FAILED = "failed"


STAGE_STATES: dict[PublishStage, PipelineState] = {
    PublishStage.UPLOAD: PipelineState.UPLOADING,
    PublishStage.ANNOTATE: PipelineState.ANNOTATING,
    PublishStage.REPUBLISH: PipelineState.REPUBLISHING,
    PublishStage.REPORT: PipelineState.DONE,
}


class PublishResult(BaseModel):
    """Outcome of a completed publish run."""

    chart_id: str
    public_url: str | None = None
    notes: str | None = None
    stages_completed: list[PublishStage] = Field(default_factory=list)
    dry_run: bool = False


__all__ = ["PublishStage", "PipelineState", "STAGE_STATES", "PublishResult"]
