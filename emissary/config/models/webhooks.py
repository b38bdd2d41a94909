"""Webhook retry queue configuration."""

from pydantic import BaseModel, Field


class WebhookRetryConfig(BaseModel):
    """Backoff policy for failed inbound webhook processing."""

    max_attempts: int = Field(default=5, ge=1, le=20, description="Attempts before failed")
    initial_delay_seconds: int = Field(
        default=30, ge=1, description="Delay before the first retry; doubles per attempt"
    )
    batch_size: int = Field(default=100, ge=1, description="Records taken per poll")
