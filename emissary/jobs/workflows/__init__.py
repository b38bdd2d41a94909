"""Hatchet workflow definitions.

- RetryWebhooksWorkflow: Replays failed inbound webhooks whose backoff elapsed
"""

from emissary.jobs.workflows.retry_webhooks import (
    RetryWebhooksInput,
    RetryWebhooksOutput,
    RetryWebhooksWorkflow,
    register_workflow,
)

__all__ = [
    "RetryWebhooksInput",
    "RetryWebhooksOutput",
    "RetryWebhooksWorkflow",
    "register_workflow",
]
