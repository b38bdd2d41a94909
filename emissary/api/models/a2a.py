"""Agent-to-agent request models."""

from pydantic import BaseModel, Field


class SendMessageRequest(BaseModel):
    """Request body for POST /v1/a2a/messages."""

    from_agent_id: str = Field(min_length=1)
    to_agent_id: str = Field(min_length=1)
    message: str = Field(min_length=1, max_length=50000)
    thread_id: str | None = None
    hop_count: int = 0


class SummarizeThreadRequest(BaseModel):
    """Request body for POST /v1/a2a/threads/{thread_id}/summary."""

    owner_id: str = Field(min_length=1)
    agent_id: str | None = None
