"""Hatchet client wrapper.

The SDK is imported on first use and only when jobs are enabled, so the
API process runs without a Hatchet engine. Any failure to create the client
leaves the runtime without the periodic retry poller; webhooks are still
enqueued and can be drained by calling the workflow directly.
"""

from collections.abc import Mapping
from typing import Any

from emissary.config.models.jobs import HatchetConfig
from emissary.jobs.workflows.retry_webhooks import register_workflow
from emissary.observability.logging import get_logger
from emissary.webhooks.processors.base import WebhookProcessor
from emissary.webhooks.queue import WebhookRetryQueue

logger = get_logger(__name__)


class HatchetClient:
    """Lazily created Hatchet SDK client."""

    def __init__(self, config: HatchetConfig) -> None:
        self._config = config
        self._client: Any | None = None
        self._available: bool | None = None

    @property
    def config(self) -> HatchetConfig:
        return self._config

    @property
    def is_available(self) -> bool:
        """Result of the last ``health_check()``; False before any check."""
        return bool(self._available)

    def get_client(self) -> Any | None:
        """Hatchet SDK instance, or None when disabled or unreachable."""
        if self._client is None and self._config.enabled:
            self._client = self._connect()
        elif not self._config.enabled:
            logger.info("hatchet_disabled", reason="config")
        return self._client

    def _connect(self) -> Any | None:
        try:
            from hatchet_sdk import Hatchet
        except ImportError:
            logger.warning("hatchet_sdk_not_installed")
            return None

        api_key = self._config.api_key.get_secret_value() if self._config.api_key else None
        try:
            client = Hatchet(server_url=self._config.server_url, api_key=api_key)
        except Exception as e:
            logger.error("hatchet_client_init_failed", error=str(e))
            return None
        logger.info("hatchet_client_initialized", server_url=self._config.server_url)
        return client

    async def health_check(self) -> bool:
        self._available = self.get_client() is not None
        return self._available

    def register_webhook_retries(
        self,
        queue: WebhookRetryQueue,
        processors: Mapping[str, WebhookProcessor],
    ) -> Any | None:
        """Register the retry poller on the configured cron, if Hatchet is up."""
        hatchet = self.get_client()
        if hatchet is None:
            return None

        workflow = register_workflow(
            hatchet, queue, processors, cron=self._config.cron_retry_webhooks
        )
        logger.info(
            "webhook_retry_workflow_registered",
            cron=self._config.cron_retry_webhooks,
            providers=sorted(processors),
        )
        return workflow
