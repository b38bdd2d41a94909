"""Inbound message endpoint for the HTTP API channel."""

from fastapi import APIRouter

from emissary.api.dependencies import PipelineDep
from emissary.api.models.messages import MessageRequest, MessageResponse
from emissary.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()

API_CHANNEL = "api"


@router.post("/messages", response_model=MessageResponse)
async def process_message(request: MessageRequest, pipeline: PipelineDep) -> MessageResponse:
    """Run one message through the pipeline and return the visible reply.

    A2A loop errors raised by delegated actions surface as a
    DELEGATION_LOOP error envelope.
    """
    result = await pipeline.process_message(
        request.owner_id,
        request.agent_id,
        request.message,
        API_CHANNEL,
        caller_id=request.caller_id,
    )
    logger.info(
        "api_message_processed",
        owner_id=request.owner_id,
        agent_id=request.agent_id,
        blocked=result.blocked,
        tokens_used=result.tokens_used,
    )
    return MessageResponse(**result.model_dump())
