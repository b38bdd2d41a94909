"""Webhook retry queue: at-least-once redelivery with doubling backoff.

A failed ingestion is enqueued with its raw payload. Each poll replays due
records through the provider's processor: success marks the record
``completed``; failure bumps ``attempts`` and schedules the next try at
``now + initial_delay * 2 ** attempts`` until ``max_attempts`` is reached,
after which the record is ``failed`` for good. Processors must tolerate
replays of the same payload.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from emissary.config.models.webhooks import WebhookRetryConfig
from emissary.observability.logging import get_logger
from emissary.observability.metrics import WEBHOOK_RETRIES
from emissary.utils.clock import utc_now
from emissary.webhooks.models import WebhookRetryRecord
from emissary.webhooks.processors.base import WebhookProcessor
from emissary.webhooks.store import WebhookRetryStore

logger = get_logger(__name__)

MAX_ERROR_LENGTH = 1000


@dataclass
class RetryBatchReport:
    processed: int = 0
    completed: int = 0
    rescheduled: int = 0
    failed: int = 0


class WebhookRetryQueue:
    """Enqueue, poll and settle webhook retry records."""

    def __init__(self, store: WebhookRetryStore, config: WebhookRetryConfig | None = None) -> None:
        self._store = store
        self._config = config or WebhookRetryConfig()

    def backoff_delay(self, attempts: int) -> timedelta:
        """Delay before the retry that follows ``attempts`` failures."""
        return timedelta(seconds=self._config.initial_delay_seconds * (2**attempts))

    async def enqueue(
        self,
        provider: str,
        raw_payload: str,
        last_error: str,
        *,
        now: datetime | None = None,
    ) -> WebhookRetryRecord:
        """Store a failed delivery; the first retry is due after the initial delay."""
        now = now or utc_now()
        record = WebhookRetryRecord(
            provider=provider,
            payload=raw_payload,
            max_attempts=self._config.max_attempts,
            next_attempt_at=now + timedelta(seconds=self._config.initial_delay_seconds),
            last_error=last_error[:MAX_ERROR_LENGTH],
            created_at=now,
            updated_at=now,
        )
        await self._store.save(record)
        WEBHOOK_RETRIES.labels(provider=provider, outcome="enqueued").inc()
        logger.warning(
            "webhook_enqueued_for_retry",
            provider=provider,
            retry_id=record.id,
            error=record.last_error,
        )
        return record

    async def list_due(self, provider: str, now: datetime | None = None) -> list[WebhookRetryRecord]:
        return await self._store.list_due(
            provider, now or utc_now(), limit=self._config.batch_size
        )

    async def mark_completed(
        self, record: WebhookRetryRecord, *, now: datetime | None = None
    ) -> WebhookRetryRecord:
        updated = record.model_copy(update={"status": "completed", "updated_at": now or utc_now()})
        await self._store.save(updated)
        WEBHOOK_RETRIES.labels(provider=record.provider, outcome="completed").inc()
        return updated

    async def mark_failed(
        self,
        record: WebhookRetryRecord,
        error: str,
        *,
        now: datetime | None = None,
    ) -> WebhookRetryRecord:
        """Count a failed attempt and reschedule, or give up at ``max_attempts``."""
        now = now or utc_now()
        attempts = record.attempts + 1
        retry = attempts < record.max_attempts
        updated = record.model_copy(
            update={
                "attempts": attempts,
                "status": "pending" if retry else "failed",
                "next_attempt_at": now + self.backoff_delay(attempts) if retry else None,
                "last_error": error[:MAX_ERROR_LENGTH],
                "updated_at": now,
            }
        )
        await self._store.save(updated)

        outcome = "rescheduled" if retry else "failed"
        WEBHOOK_RETRIES.labels(provider=record.provider, outcome=outcome).inc()
        if retry:
            logger.info(
                "webhook_retry_rescheduled",
                provider=record.provider,
                retry_id=record.id,
                attempts=attempts,
                next_attempt_at=updated.next_attempt_at.isoformat(),
            )
        else:
            logger.error(
                "webhook_retry_exhausted",
                provider=record.provider,
                retry_id=record.id,
                attempts=attempts,
                error=updated.last_error,
            )
        return updated

    async def process_due(
        self,
        processor: WebhookProcessor,
        *,
        now: datetime | None = None,
    ) -> RetryBatchReport:
        """Replay every due record for the processor's provider once."""
        report = RetryBatchReport()
        for record in await self.list_due(processor.provider, now):
            report.processed += 1
            try:
                await processor.process(record.payload)
            except Exception as e:
                updated = await self.mark_failed(record, str(e) or type(e).__name__, now=now)
                if updated.status == "failed":
                    report.failed += 1
                else:
                    report.rescheduled += 1
                continue
            await self.mark_completed(record, now=now)
            report.completed += 1
        return report
