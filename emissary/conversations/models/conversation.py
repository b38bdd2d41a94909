"""Conversation model: one external thread on one channel."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from emissary.utils.clock import utc_now
from emissary.utils.ids import new_id

MessageRole = Literal["user", "agent"]
DeliveryStatus = Literal["pending", "sent", "delivered", "bounced", "failed"]


class ConversationMessage(BaseModel):
    role: MessageRole
    content: str
    external_message_id: str | None = Field(
        default=None, description="Provider-assigned id, used to skip replays"
    )
    in_reply_to: str | None = Field(
        default=None, description="External id of the inbound message this reply answers"
    )
    sent: bool = Field(default=False, description="Outbound reply handed to the channel")
    created_at: datetime = Field(default_factory=utc_now)


class Conversation(BaseModel):
    """A transcript keyed by ``(owner_id, channel, external_id)``.

    ``external_id`` is whatever the channel uses to group messages: a mail
    thread id, a phone number, or the peer agent id for A2A.
    """

    id: str = Field(default_factory=new_id, description="Unique identifier")
    owner_id: str = Field(..., description="Owning account")
    agent_id: str | None = Field(default=None, description="Agent handling the thread")
    channel: str = Field(..., description="email, a2a, api, ...")
    external_id: str = Field(..., description="Channel-side thread key")
    messages: list[ConversationMessage] = Field(default_factory=list)
    delivery_status: DeliveryStatus | None = Field(
        default=None, description="Last outbound delivery state"
    )
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def has_message(self, external_message_id: str) -> bool:
        return any(m.external_message_id == external_message_id for m in self.messages)

    def reply_to(self, external_message_id: str) -> ConversationMessage | None:
        """The agent reply recorded for an inbound message, if any."""
        return next(
            (
                m
                for m in self.messages
                if m.role == "agent" and m.in_reply_to == external_message_id
            ),
            None,
        )
