"""A2A result and listing models."""

from datetime import datetime

from pydantic import BaseModel, Field

from emissary.memory.models import MemoryDirection


def thread_id_for(agent_a: str, agent_b: str) -> str:
    """Deterministic thread id: both agent ids, sorted and joined."""
    first, second = sorted((agent_a, agent_b))
    return f"{first}:{second}"


class SendResult(BaseModel):
    thread_id: str
    accepted: bool = True
    hop_count: int = 0
    response: str | None = Field(default=None, description="Recipient reply when auto-responding")
    blocked: bool = False
    tokens_used: int = 0


class ThreadSummary(BaseModel):
    """One row of an inbox or outbox listing."""

    thread_id: str
    last_message_at: datetime
    message_count: int
    peer_agent_id: str | None = None
    peer_agent_name: str | None = None
    preview: str


class ThreadMessage(BaseModel):
    id: str
    created_at: datetime
    content: str
    direction: MemoryDirection
    agent_id: str | None = None
    peer_agent_id: str | None = None
    hop_count: int | None = None


class ThreadDigest(BaseModel):
    summary_memory_id: str
    summary: str
    message_count: int
