"""WebhookRetryStore abstract interface."""

from abc import ABC, abstractmethod
from datetime import datetime

from emissary.webhooks.models import WebhookRetryRecord


class WebhookRetryStore(ABC):
    """Durable storage for webhook retry records."""

    @abstractmethod
    async def save(self, record: WebhookRetryRecord) -> str:
        """Create or replace a record."""
        pass

    @abstractmethod
    async def get(self, record_id: str) -> WebhookRetryRecord | None:
        """Get a record by ID."""
        pass

    @abstractmethod
    async def list_due(
        self, provider: str, now: datetime, *, limit: int = 100
    ) -> list[WebhookRetryRecord]:
        """Pending records for ``provider`` whose next attempt is at or before ``now``."""
        pass

    @abstractmethod
    async def list_by_status(
        self, provider: str, status: str, *, limit: int = 100
    ) -> list[WebhookRetryRecord]:
        """Records for ``provider`` in ``status``, oldest first."""
        pass
