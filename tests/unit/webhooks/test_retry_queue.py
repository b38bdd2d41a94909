"""Tests for the webhook retry queue."""

from datetime import datetime, timedelta, timezone

import pytest

from emissary.config.models.webhooks import WebhookRetryConfig
from emissary.webhooks.processors.base import WebhookProcessor
from emissary.webhooks.queue import WebhookRetryQueue
from emissary.webhooks.stores.inmemory import InMemoryWebhookRetryStore

T0 = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


class ScriptedProcessor(WebhookProcessor):
    """Fails a fixed number of times, then succeeds."""

    provider = "agentmail"

    def __init__(self, failures: int = 0) -> None:
        self.failures = failures
        self.payloads: list[str] = []

    async def process(self, payload: str) -> None:
        self.payloads.append(payload)
        if self.failures > 0:
            self.failures -= 1
            raise RuntimeError("pipeline unavailable")


@pytest.fixture
def store() -> InMemoryWebhookRetryStore:
    return InMemoryWebhookRetryStore()


@pytest.fixture
def queue(store: InMemoryWebhookRetryStore) -> WebhookRetryQueue:
    return WebhookRetryQueue(store, WebhookRetryConfig(max_attempts=3, initial_delay_seconds=30))


class TestBackoff:
    """Tests for backoff_delay."""

    def test_doubles(self, queue: WebhookRetryQueue) -> None:
        delays = [queue.backoff_delay(n).total_seconds() for n in range(4)]
        assert delays == [30, 60, 120, 240]


class TestEnqueue:
    """Tests for enqueue and list_due."""

    @pytest.mark.asyncio
    async def test_first_retry_after_initial_delay(self, queue: WebhookRetryQueue) -> None:
        record = await queue.enqueue("agentmail", '{"x":1}', "boom", now=T0)

        assert record.status == "pending"
        assert record.attempts == 0
        assert record.next_attempt_at == T0 + timedelta(seconds=30)
        assert await queue.list_due("agentmail", T0) == []
        assert [r.id for r in await queue.list_due("agentmail", T0 + timedelta(seconds=30))] == [
            record.id
        ]

    @pytest.mark.asyncio
    async def test_error_clipped(self, queue: WebhookRetryQueue) -> None:
        record = await queue.enqueue("agentmail", "{}", "e" * 5000, now=T0)
        assert len(record.last_error) == 1000

    @pytest.mark.asyncio
    async def test_due_filtered_by_provider(self, queue: WebhookRetryQueue) -> None:
        await queue.enqueue("other", "{}", "boom", now=T0)
        assert await queue.list_due("agentmail", T0 + timedelta(hours=1)) == []


class TestSettle:
    """Tests for mark_failed and mark_completed."""

    @pytest.mark.asyncio
    async def test_reschedule_then_fail(
        self, queue: WebhookRetryQueue, store: InMemoryWebhookRetryStore
    ) -> None:
        """Delays grow with each attempt until max_attempts is reached."""
        record = await queue.enqueue("agentmail", "{}", "boom", now=T0)

        first = await queue.mark_failed(record, "again", now=T0)
        second = await queue.mark_failed(first, "again", now=T0)
        third = await queue.mark_failed(second, "gave up", now=T0)

        assert (first.attempts, first.status) == (1, "pending")
        assert first.next_attempt_at == T0 + timedelta(seconds=60)
        assert second.next_attempt_at == T0 + timedelta(seconds=120)
        assert (third.attempts, third.status, third.next_attempt_at) == (3, "failed", None)
        assert (await store.get(record.id)).last_error == "gave up"
        assert [r.id for r in await store.list_by_status("agentmail", "failed")] == [record.id]

    @pytest.mark.asyncio
    async def test_completed(self, queue: WebhookRetryQueue, store: InMemoryWebhookRetryStore) -> None:
        record = await queue.enqueue("agentmail", "{}", "boom", now=T0)

        await queue.mark_completed(record, now=T0)

        assert (await store.get(record.id)).status == "completed"
        assert await queue.list_due("agentmail", T0 + timedelta(days=1)) == []


class TestProcessDue:
    """Tests for process_due."""

    @pytest.mark.asyncio
    async def test_success_completes(
        self, queue: WebhookRetryQueue, store: InMemoryWebhookRetryStore
    ) -> None:
        record = await queue.enqueue("agentmail", '{"id":1}', "boom", now=T0)
        processor = ScriptedProcessor()

        report = await queue.process_due(processor, now=T0 + timedelta(minutes=1))

        assert (report.processed, report.completed) == (1, 1)
        assert processor.payloads == ['{"id":1}']
        assert (await store.get(record.id)).status == "completed"

    @pytest.mark.asyncio
    async def test_not_due_untouched(self, queue: WebhookRetryQueue) -> None:
        await queue.enqueue("agentmail", "{}", "boom", now=T0)
        processor = ScriptedProcessor()

        report = await queue.process_due(processor, now=T0 + timedelta(seconds=10))

        assert report.processed == 0
        assert processor.payloads == []

    @pytest.mark.asyncio
    async def test_attempts_bounded(
        self, queue: WebhookRetryQueue, store: InMemoryWebhookRetryStore
    ) -> None:
        """A record that keeps failing ends as failed after max_attempts polls."""
        record = await queue.enqueue("agentmail", "{}", "boom", now=T0)
        processor = ScriptedProcessor(failures=10)

        reports = []
        now = T0
        for _ in range(5):
            now += timedelta(hours=1)
            reports.append(await queue.process_due(processor, now=now))

        final = await store.get(record.id)
        assert final.status == "failed"
        assert final.attempts == 3
        assert len(processor.payloads) == 3
        assert [r.rescheduled for r in reports] == [1, 1, 0, 0, 0]
        assert [r.failed for r in reports] == [0, 0, 1, 0, 0]

    @pytest.mark.asyncio
    async def test_recovers_after_failure(
        self, queue: WebhookRetryQueue, store: InMemoryWebhookRetryStore
    ) -> None:
        record = await queue.enqueue("agentmail", "{}", "boom", now=T0)
        processor = ScriptedProcessor(failures=1)

        await queue.process_due(processor, now=T0 + timedelta(minutes=1))
        early = await queue.process_due(processor, now=T0 + timedelta(minutes=1, seconds=30))
        later = await queue.process_due(processor, now=T0 + timedelta(minutes=3))

        assert early.processed == 0
        assert later.completed == 1
        assert (await store.get(record.id)).attempts == 1
