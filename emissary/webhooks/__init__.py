"""Inbound webhook processing and durable retry."""

from emissary.webhooks.models import WebhookRetryRecord
from emissary.webhooks.processors import AgentMailProcessor, WebhookPayloadError, WebhookProcessor
from emissary.webhooks.queue import RetryBatchReport, WebhookRetryQueue
from emissary.webhooks.store import WebhookRetryStore

__all__ = [
    "AgentMailProcessor",
    "RetryBatchReport",
    "WebhookPayloadError",
    "WebhookProcessor",
    "WebhookRetryQueue",
    "WebhookRetryRecord",
    "WebhookRetryStore",
]
