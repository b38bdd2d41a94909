"""Webhook retry models."""

from emissary.webhooks.models.retry import RetryStatus, WebhookRetryRecord

__all__ = ["RetryStatus", "WebhookRetryRecord"]
