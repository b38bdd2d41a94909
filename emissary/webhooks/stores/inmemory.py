"""In-memory implementation of WebhookRetryStore."""

from datetime import datetime

from emissary.webhooks.models import WebhookRetryRecord
from emissary.webhooks.store import WebhookRetryStore


class InMemoryWebhookRetryStore(WebhookRetryStore):
    """In-memory implementation of WebhookRetryStore for testing and development."""

    def __init__(self) -> None:
        self._records: dict[str, WebhookRetryRecord] = {}

    async def save(self, record: WebhookRetryRecord) -> str:
        self._records[record.id] = record
        return record.id

    async def get(self, record_id: str) -> WebhookRetryRecord | None:
        return self._records.get(record_id)

    async def list_due(
        self, provider: str, now: datetime, *, limit: int = 100
    ) -> list[WebhookRetryRecord]:
        due = [
            r
            for r in self._records.values()
            if r.provider == provider
            and r.status == "pending"
            and r.next_attempt_at is not None
            and r.next_attempt_at <= now
        ]
        due.sort(key=lambda r: r.next_attempt_at)
        return due[:limit]

    async def list_by_status(
        self, provider: str, status: str, *, limit: int = 100
    ) -> list[WebhookRetryRecord]:
        matches = [
            r for r in self._records.values() if r.provider == provider and r.status == status
        ]
        matches.sort(key=lambda r: r.created_at)
        return matches[:limit]
