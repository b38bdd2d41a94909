"""Webhook retry workflow.

Scheduled job that replays failed inbound webhooks through their
provider's processor once the backoff delay has elapsed. Runs every minute
by default.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from emissary.observability.logging import get_logger
from emissary.webhooks.processors.base import WebhookProcessor
from emissary.webhooks.queue import WebhookRetryQueue

logger = get_logger(__name__)


@dataclass
class RetryWebhooksInput:
    """Input for the webhook retry workflow."""

    provider: str | None = None  # None = every registered provider


@dataclass
class RetryWebhooksOutput:
    """Output from the webhook retry workflow."""

    processed: int
    completed: int
    rescheduled: int
    failed: int
    success: bool
    error: str | None = None


class RetryWebhooksWorkflow:
    """Workflow to drain due webhook retries.

    This workflow:
    1. Lists pending records whose next attempt time has passed
    2. Replays each raw payload through the provider's processor
    3. Completes, reschedules with exponential backoff, or fails records
    4. Logs the batch outcome

    Idempotent: processors skip payloads they have already applied, and a
    record leaves the due set as soon as it is completed or rescheduled.
    """

    WORKFLOW_NAME = "retry-failed-webhooks"
    CRON_SCHEDULE = "* * * * *"  # Every minute

    def __init__(
        self, queue: WebhookRetryQueue, processors: Mapping[str, WebhookProcessor]
    ) -> None:
        self._queue = queue
        self._processors = processors

    async def run(self, input_data: RetryWebhooksInput) -> RetryWebhooksOutput:
        """Execute one retry sweep."""
        if input_data.provider is not None and input_data.provider not in self._processors:
            return RetryWebhooksOutput(
                processed=0,
                completed=0,
                rescheduled=0,
                failed=0,
                success=False,
                error=f"Unknown provider: {input_data.provider}",
            )

        providers = (
            [input_data.provider] if input_data.provider is not None else list(self._processors)
        )
        totals = RetryWebhooksOutput(
            processed=0, completed=0, rescheduled=0, failed=0, success=True
        )
        try:
            for provider in providers:
                report = await self._queue.process_due(self._processors[provider])
                totals.processed += report.processed
                totals.completed += report.completed
                totals.rescheduled += report.rescheduled
                totals.failed += report.failed
        except Exception as e:
            logger.error("retry_webhooks_failed", providers=providers, error=str(e))
            totals.success = False
            totals.error = str(e)
            return totals

        logger.info(
            "webhook_retries_processed",
            providers=providers,
            processed=totals.processed,
            completed=totals.completed,
            rescheduled=totals.rescheduled,
            failed=totals.failed,
        )
        return totals


def register_workflow(
    hatchet: Any,
    queue: WebhookRetryQueue,
    processors: Mapping[str, WebhookProcessor],
    cron: str | None = None,
) -> Any:
    """Register the webhook retry workflow with Hatchet.

    Args:
        hatchet: Hatchet SDK instance
        queue: Retry queue to drain
        processors: Webhook processors keyed by provider
        cron: Schedule override, e.g. from ``HatchetConfig.cron_retry_webhooks``

    Returns:
        Registered workflow
    """
    workflow_instance = RetryWebhooksWorkflow(queue, processors)

    @hatchet.workflow(
        name=RetryWebhooksWorkflow.WORKFLOW_NAME,
        on_crons=[cron or RetryWebhooksWorkflow.CRON_SCHEDULE],
    )
    class HatchetRetryWebhooksWorkflow:
        """Hatchet workflow wrapper for the webhook retry sweep."""

        @hatchet.step(retries=1, retry_delay="30s")
        async def retry_webhooks(self, context: Any) -> dict:
            """Execute the retry sweep step."""
            input_data = context.workflow_input() or {}
            result = await workflow_instance.run(
                RetryWebhooksInput(provider=input_data.get("provider"))
            )
            return {
                "processed": result.processed,
                "completed": result.completed,
                "rescheduled": result.rescheduled,
                "failed": result.failed,
                "success": result.success,
                "error": result.error,
            }

    return HatchetRetryWebhooksWorkflow
