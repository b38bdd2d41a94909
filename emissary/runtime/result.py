"""Pipeline run bookkeeping and the result returned to channels."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from emissary.observability.metrics import PIPELINE_STEP_LATENCY
from emissary.utils.clock import utc_now

StepStatus = Literal["pending", "in_progress", "completed", "failed", "skipped"]


class PipelineStep(BaseModel):
    """One named step of a pipeline run."""

    label: str
    status: StepStatus
    started_at: datetime
    completed_at: datetime | None = None
    duration_ms: int | None = None
    detail: str | None = None


class PipelineRun:
    """Steps accumulated in memory during one run and persisted once at the end."""

    def __init__(self) -> None:
        self.steps: list[PipelineStep] = []

    @staticmethod
    def start() -> datetime:
        return utc_now()

    def record(
        self,
        label: str,
        started_at: datetime,
        status: StepStatus,
        detail: str | None = None,
    ) -> PipelineStep:
        completed_at = utc_now()
        elapsed = (completed_at - started_at).total_seconds()
        step = PipelineStep(
            label=label,
            status=status,
            started_at=started_at,
            completed_at=completed_at,
            duration_ms=int(elapsed * 1000),
            detail=detail,
        )
        self.steps.append(step)
        PIPELINE_STEP_LATENCY.labels(step=label).observe(elapsed)
        return step

    def snapshot(self) -> list[PipelineStep]:
        return [step.model_copy() for step in self.steps]


class ProcessResult(BaseModel):
    """What every inbound channel gets back from ``process_message``."""

    response: str = Field(..., description="Visible reply, never empty")
    tokens_used: int = Field(default=0, ge=0)
    blocked: bool = Field(default=False, description="Input rejected by the screener")
    security_flags: list[str] = Field(
        default_factory=list, description="Warn-level flag types surfaced to the client"
    )
