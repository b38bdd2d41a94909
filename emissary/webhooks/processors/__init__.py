"""Webhook processors keyed by provider."""

from emissary.webhooks.processors.agentmail import AgentMailProcessor
from emissary.webhooks.processors.base import WebhookPayloadError, WebhookProcessor

__all__ = ["AgentMailProcessor", "WebhookPayloadError", "WebhookProcessor"]
