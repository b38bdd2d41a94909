"""Agent-to-agent messaging endpoints."""

from typing import Literal

from fastapi import APIRouter, Query

from emissary.a2a.models import SendResult, ThreadDigest, ThreadMessage, ThreadSummary
from emissary.api.dependencies import A2ADep
from emissary.api.models.a2a import SendMessageRequest, SummarizeThreadRequest

router = APIRouter(prefix="/a2a")


@router.post("/messages", response_model=SendResult)
async def send_message(request: SendMessageRequest, controller: A2ADep) -> SendResult:
    """Send a message from one agent to another."""
    return await controller.send_message(
        request.from_agent_id,
        request.to_agent_id,
        request.message,
        thread_id=request.thread_id,
        hop_count=request.hop_count,
    )


@router.get("/threads", response_model=list[ThreadSummary])
async def list_threads(
    controller: A2ADep,
    owner_id: str,
    direction: Literal["inbound", "outbound"] = "inbound",
    limit: int = Query(default=50, ge=1, le=200),
) -> list[ThreadSummary]:
    """Inbox (inbound) or outbox (outbound) thread listing."""
    return await controller.list_threads(owner_id, direction, limit)


@router.get("/threads/{thread_id}/messages", response_model=list[ThreadMessage])
async def thread_messages(
    thread_id: str,
    controller: A2ADep,
    owner_id: str,
    limit: int = Query(default=100, ge=1, le=500),
) -> list[ThreadMessage]:
    return await controller.thread_messages(owner_id, thread_id, limit)


@router.post("/threads/{thread_id}/summary", response_model=ThreadDigest)
async def summarize_thread(
    thread_id: str, request: SummarizeThreadRequest, controller: A2ADep
) -> ThreadDigest:
    """Condense a thread into a summary memory."""
    return await controller.summarize_thread(request.owner_id, thread_id, request.agent_id)
