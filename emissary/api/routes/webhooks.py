"""Inbound webhook endpoint.

Processing failures never bounce back to the provider: the raw payload is
parked in the retry queue and the request is acknowledged with 202.
"""

from fastapi import APIRouter, Request, Response, status

from emissary.api.dependencies import RetryQueueDep, RuntimeDep
from emissary.api.exceptions import ProviderNotFoundError
from emissary.api.models.webhooks import WebhookAck
from emissary.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/webhooks/{provider}", response_model=WebhookAck)
async def receive_webhook(
    provider: str,
    request: Request,
    response: Response,
    runtime: RuntimeDep,
    retry_queue: RetryQueueDep,
) -> WebhookAck:
    processor = runtime.processor_for(provider)
    if processor is None:
        raise ProviderNotFoundError(f"No webhook processor for provider: {provider}")

    payload = (await request.body()).decode("utf-8", errors="replace")
    try:
        await processor.process(payload)
    except Exception as e:
        logger.warning("webhook_processing_failed", provider=provider, error=str(e))
        record = await retry_queue.enqueue(provider, payload, str(e) or type(e).__name__)
        response.status_code = status.HTTP_202_ACCEPTED
        return WebhookAck(status="queued", retry_id=record.id)

    return WebhookAck(status="processed")
