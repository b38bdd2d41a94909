"""WebhookRetryRecord model."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from emissary.utils.clock import utc_now
from emissary.utils.ids import new_id

RetryStatus = Literal["pending", "completed", "failed"]


class WebhookRetryRecord(BaseModel):
    """A webhook delivery whose processing failed and awaits redelivery.

    ``pending`` records are retried with doubling backoff until
    ``attempts == max_attempts``; ``failed`` is terminal and needs manual
    triage.
    """

    id: str = Field(default_factory=new_id, description="Unique identifier")
    provider: str = Field(..., description="Webhook source, e.g. agentmail")
    payload: str = Field(..., description="Raw request body, replayed verbatim")
    attempts: int = Field(default=0, ge=0, description="Retries performed so far")
    max_attempts: int = Field(default=5, ge=1, description="Retries before giving up")
    next_attempt_at: datetime | None = Field(
        default=None, description="Earliest time of the next retry; None once terminal"
    )
    status: RetryStatus = Field(default="pending")
    last_error: str | None = Field(default=None, description="Most recent failure")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
