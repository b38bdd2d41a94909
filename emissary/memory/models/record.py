"""MemoryRecord model."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from emissary.utils.clock import utc_now
from emissary.utils.ids import new_id

MemoryKind = Literal["conversation", "conversation_summary", "reflection"]
MemoryRole = Literal["system", "user", "assistant"]
MemoryDirection = Literal["inbound", "outbound"]


class MemoryRecord(BaseModel):
    """An append-only conversational fact owned by one account.

    Records are never edited after creation; the only mutation is archival,
    which hides them from context assembly and recall.
    """

    id: str = Field(default_factory=new_id, description="Unique identifier")
    owner_id: str = Field(..., description="Owning account")
    agent_id: str | None = Field(default=None, description="Agent this memory belongs to")
    kind: MemoryKind = Field(default="conversation", description="Memory classification")
    content: str = Field(..., description="Free-text content")
    source: str = Field(..., description="Channel the memory came from")
    embedding: list[float] | None = Field(default=None, description="Vector embedding")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="role, thread_id, peer_agent_id, direction, hop_count, caller_id",
    )
    created_at: datetime = Field(default_factory=utc_now, description="Creation time")
    archived: bool = Field(default=False, description="Hidden from recall")
    archived_at: datetime | None = Field(default=None, description="Archival time")

    @property
    def role(self) -> MemoryRole:
        """Chat role this memory replays as."""
        role = self.metadata.get("role")
        if role in ("user", "assistant"):
            return role
        if self.kind == "conversation_summary":
            return "system"
        return "user"

    @property
    def thread_id(self) -> str | None:
        value = self.metadata.get("thread_id")
        return value if isinstance(value, str) and value else None

    @property
    def direction(self) -> MemoryDirection | None:
        value = self.metadata.get("direction")
        return value if value in ("inbound", "outbound") else None
