"""Message request and response models."""

from pydantic import BaseModel, ConfigDict, Field


class MessageRequest(BaseModel):
    """Request body for POST /v1/messages."""

    owner_id: str = Field(min_length=1)
    """Account the message is addressed to."""

    agent_id: str | None = None
    """Agent to handle the message. Omit to use the owner's defaults."""

    message: str = Field(min_length=1, max_length=50000)
    """Inbound message text."""

    caller_id: str | None = None
    """Opaque caller identity recorded in memory and audit."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "owner_id": "user_123",
                "agent_id": "agent_456",
                "message": "Remind me to buy milk",
                "caller_id": "api-key-1",
            }
        }
    )


class MessageResponse(BaseModel):
    """Response body for POST /v1/messages."""

    response: str
    """Visible reply; never empty."""

    tokens_used: int = 0
    """Tokens reported by the provider."""

    blocked: bool = False
    """Whether the screener rejected the input."""

    security_flags: list[str] = Field(default_factory=list)
    """Warn-level flag types raised on the input."""
