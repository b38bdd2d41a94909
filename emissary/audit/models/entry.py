"""AuditEntry model."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from emissary.utils.clock import utc_now
from emissary.utils.ids import new_id

CallerType = Literal["user", "agent", "a2a", "system", "webhook"]
AuditStatus = Literal["success", "in_progress", "error", "blocked"]


class AuditEntry(BaseModel):
    """Append-only audit log entry written after each pipeline side effect."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id, description="Unique identifier")
    owner_id: str = Field(..., description="Owning account")
    agent_id: str | None = Field(default=None, description="Agent that acted")
    action: str = Field(..., description="Event classification, e.g. message_processed")
    resource: str = Field(..., description="Affected resource kind")
    caller_type: CallerType = Field(default="agent", description="Who initiated the event")
    caller_identity: str | None = Field(default=None, description="Caller id or channel")
    details: dict[str, Any] = Field(default_factory=dict, description="Event payload")
    token_count: int | None = Field(default=None, description="Tokens spent, if any")
    status: AuditStatus = Field(default="success", description="Outcome")
    created_at: datetime = Field(default_factory=utc_now, description="Event time")
