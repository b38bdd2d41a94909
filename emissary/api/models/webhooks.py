"""Webhook acknowledgement model."""

from typing import Literal

from pydantic import BaseModel


class WebhookAck(BaseModel):
    """Response body for POST /v1/webhooks/{provider}."""

    status: Literal["processed", "queued"]
    """processed when handled inline, queued when parked for retry."""

    retry_id: str | None = None
    """Retry record id when queued."""
