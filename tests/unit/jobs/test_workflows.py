"""Unit tests for Hatchet workflows.

Tests the webhook retry sweep and its error handling.
"""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from emissary.config.models.jobs import HatchetConfig
from emissary.jobs import HatchetClient
from emissary.jobs.workflows import (
    RetryWebhooksInput,
    RetryWebhooksWorkflow,
    register_workflow,
)
from emissary.utils.clock import utc_now
from emissary.webhooks.processors.base import WebhookProcessor
from emissary.webhooks.queue import WebhookRetryQueue
from emissary.webhooks.stores.inmemory import InMemoryWebhookRetryStore


class RecordingProcessor(WebhookProcessor):
    provider = "agentmail"

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.payloads: list[str] = []

    async def process(self, payload: str) -> None:
        self.payloads.append(payload)
        if self.error is not None:
            raise self.error


@pytest.fixture
def queue() -> WebhookRetryQueue:
    return WebhookRetryQueue(InMemoryWebhookRetryStore())


async def enqueue_due(queue: WebhookRetryQueue, payload: str) -> None:
    """Enqueue a record whose first retry is already due."""
    await queue.enqueue("agentmail", payload, "boom", now=utc_now() - timedelta(minutes=5))


class TestRetryWebhooksWorkflow:
    """Tests for RetryWebhooksWorkflow."""

    def test_workflow_name(self):
        assert RetryWebhooksWorkflow.WORKFLOW_NAME == "retry-failed-webhooks"

    def test_workflow_cron_schedule(self):
        """Test workflow runs every minute."""
        assert RetryWebhooksWorkflow.CRON_SCHEDULE == "* * * * *"

    @pytest.mark.asyncio
    async def test_run_replays_due_records(self, queue):
        processor = RecordingProcessor()
        await enqueue_due(queue, '{"a":1}')
        await enqueue_due(queue, '{"b":2}')
        workflow = RetryWebhooksWorkflow(queue, {"agentmail": processor})

        result = await workflow.run(RetryWebhooksInput())

        assert result.success is True
        assert (result.processed, result.completed) == (2, 2)
        assert sorted(processor.payloads) == ['{"a":1}', '{"b":2}']

    @pytest.mark.asyncio
    async def test_run_reschedules_failures(self, queue):
        processor = RecordingProcessor(error=RuntimeError("still down"))
        await enqueue_due(queue, "{}")
        workflow = RetryWebhooksWorkflow(queue, {"agentmail": processor})

        result = await workflow.run(RetryWebhooksInput(provider="agentmail"))

        assert result.success is True
        assert result.rescheduled == 1
        assert await queue.list_due("agentmail") == []

    @pytest.mark.asyncio
    async def test_run_is_idempotent(self, queue):
        """A second sweep finds nothing left to replay."""
        processor = RecordingProcessor()
        await enqueue_due(queue, "{}")
        workflow = RetryWebhooksWorkflow(queue, {"agentmail": processor})

        await workflow.run(RetryWebhooksInput())
        second = await workflow.run(RetryWebhooksInput())

        assert second.processed == 0
        assert len(processor.payloads) == 1

    @pytest.mark.asyncio
    async def test_run_with_unknown_provider(self, queue):
        workflow = RetryWebhooksWorkflow(queue, {"agentmail": RecordingProcessor()})

        result = await workflow.run(RetryWebhooksInput(provider="postmark"))

        assert result.success is False
        assert "Unknown provider" in result.error

    @pytest.mark.asyncio
    async def test_run_handles_queue_error(self):
        """Test workflow reports store failures instead of raising."""
        mock_queue = AsyncMock()
        mock_queue.process_due = AsyncMock(side_effect=Exception("Database error"))
        workflow = RetryWebhooksWorkflow(mock_queue, {"agentmail": RecordingProcessor()})

        result = await workflow.run(RetryWebhooksInput())

        assert result.success is False
        assert "Database error" in result.error


class TestRegisterWorkflow:
    """Tests for register_workflow."""

    def test_registers_with_cron_override(self, queue):
        hatchet = MagicMock()

        register_workflow(hatchet, queue, {}, cron="*/5 * * * *")

        hatchet.workflow.assert_called_once_with(
            name="retry-failed-webhooks", on_crons=["*/5 * * * *"]
        )

    def test_default_cron(self, queue):
        hatchet = MagicMock()

        register_workflow(hatchet, queue, {})

        assert hatchet.workflow.call_args.kwargs["on_crons"] == ["* * * * *"]


class TestHatchetClient:
    """Tests for HatchetClient."""

    def test_disabled_returns_none(self):
        client = HatchetClient(HatchetConfig(enabled=False))

        assert client.get_client() is None
        assert client.is_available is False

    @pytest.mark.asyncio
    async def test_health_check_when_disabled(self):
        client = HatchetClient(HatchetConfig(enabled=False))

        assert await client.health_check() is False
        assert client.is_available is False

    def test_config_exposed(self):
        config = HatchetConfig(server_url="http://hatchet:7077")
        assert HatchetClient(config).config.server_url == "http://hatchet:7077"

    def test_register_skipped_when_disabled(self, queue):
        client = HatchetClient(HatchetConfig(enabled=False))
        assert client.register_webhook_retries(queue, {}) is None

    def test_register_uses_configured_cron(self, queue, monkeypatch):
        """The retry poller is registered on the cron from config."""
        hatchet = MagicMock()
        client = HatchetClient(HatchetConfig(enabled=True, cron_retry_webhooks="*/2 * * * *"))
        monkeypatch.setattr(client, "get_client", lambda: hatchet)

        client.register_webhook_retries(queue, {"agentmail": RecordingProcessor()})

        assert hatchet.workflow.call_args.kwargs["on_crons"] == ["*/2 * * * *"]
