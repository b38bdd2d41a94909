"""Background job infrastructure.

Hatchet drives the periodic webhook retry poller.

Usage:
    from emissary.jobs import HatchetClient

    client = HatchetClient(settings.jobs.hatchet)
    client.register_webhook_retries(runtime.retry_queue, runtime.processors)
"""

from emissary.jobs.client import HatchetClient

__all__ = ["HatchetClient"]
