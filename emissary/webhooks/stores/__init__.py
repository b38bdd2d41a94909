"""WebhookRetryStore implementations."""

from emissary.webhooks.stores.inmemory import InMemoryWebhookRetryStore

__all__ = ["InMemoryWebhookRetryStore"]
