"""Webhook processor interface."""

from abc import ABC, abstractmethod


class WebhookPayloadError(ValueError):
    """Payload is malformed or names an unknown recipient."""

    pass


class WebhookProcessor(ABC):
    """Turns one raw webhook body into pipeline work.

    Implementations must be safe to run twice on the same payload.
    """

    provider: str

    @abstractmethod
    async def process(self, payload: str) -> None:
        """Process a raw payload. Raises on any failure so it can be retried."""
        pass
