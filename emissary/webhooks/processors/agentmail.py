"""AgentMail webhook processor.

Handles inbound mail (``message.received``) by running the pipeline on
the ``email`` channel and replying through the outbound mailer, and
delivery events (``message.sent|delivered|bounced``) by updating the
conversation's delivery status.

A replayed inbound message is skipped once its reply was sent. If the
earlier attempt failed before sending, the stored reply is resent without
running the pipeline again.
"""

import json
import re
from dataclasses import replace
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from emissary.agents.store import AgentDirectory
from emissary.collaborators.feed import FeedItem, FeedPublisher
from emissary.collaborators.mail import OutboundEmail, OutboundMailer
from emissary.conversations.models import ConversationMessage
from emissary.conversations.store import ConversationStore
from emissary.observability.logging import get_logger
from emissary.webhooks.processors.base import WebhookPayloadError, WebhookProcessor

logger = get_logger(__name__)

EMAIL_CHANNEL = "email"
DELIVERY_EVENTS = {
    "message.sent": "sent",
    "message.delivered": "delivered",
    "message.bounced": "bounced",
}
_BRACKETED_ADDRESS = re.compile(r"<([^>]+)>")


class _Address(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: str | None = None
    name: str | None = None


class _Message(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    inbox_id: str | None = None
    thread_id: str | None = None
    message_id: str | None = None
    from_: list[_Address] = Field(default_factory=list, alias="from")
    to: list[_Address] = Field(default_factory=list)
    subject: str | None = None
    text: str | None = None
    html: str | None = None


class _Delivery(BaseModel):
    model_config = ConfigDict(extra="ignore")

    inbox_id: str | None = None
    thread_id: str | None = None
    message_id: str | None = None
    recipients: list[Any] = Field(default_factory=list)

    def recipient_addresses(self) -> list[str]:
        addresses = []
        for recipient in self.recipients:
            if isinstance(recipient, str) and recipient:
                addresses.append(recipient)
            elif isinstance(recipient, dict) and recipient.get("address"):
                addresses.append(recipient["address"])
        return addresses


def normalize_address(value: str | None) -> str:
    """Lower-cased bare address from ``Name <addr>`` or ``addr``."""
    if not value:
        return ""
    trimmed = value.strip()
    match = _BRACKETED_ADDRESS.search(trimmed)
    return (match.group(1) if match else trimmed).strip().lower()


def local_part(address: str) -> str:
    at = address.find("@")
    return address[:at].strip().lower() if at > 0 else ""


class AgentMailProcessor(WebhookProcessor):
    """Processes AgentMail events."""

    provider = "agentmail"

    def __init__(
        self,
        *,
        pipeline,
        directory: AgentDirectory,
        conversations: ConversationStore,
        mailer: OutboundMailer,
        feed: FeedPublisher,
    ) -> None:
        self._pipeline = pipeline
        self._directory = directory
        self._conversations = conversations
        self._mailer = mailer
        self._feed = feed

    async def process(self, payload: str) -> None:
        try:
            event = json.loads(payload)
        except json.JSONDecodeError as e:
            raise WebhookPayloadError(f"Invalid JSON payload: {e}") from e
        if not isinstance(event, dict):
            raise WebhookPayloadError("Payload must be a JSON object")

        event_type = str(event.get("event_type") or event.get("type") or "").strip()
        if event_type == "message.received":
            await self._handle_received(event)
        elif event_type in DELIVERY_EVENTS:
            await self._handle_delivery(event_type, event)
        else:
            logger.debug("agentmail_event_ignored", event_type=event_type)

    async def _handle_received(self, event: dict[str, Any]) -> None:
        try:
            message = _Message.model_validate(event.get("message") or {})
        except ValidationError as e:
            raise WebhookPayloadError(f"Invalid message payload: {e}") from e

        recipient = normalize_address(
            (message.to[0].email if message.to else None) or event.get("to")
        )
        if not recipient:
            raise WebhookPayloadError("Invalid recipient")

        agent = await self._directory.find_agent_by_email(recipient)
        if agent is not None:
            owner_id, agent_id = agent.owner_id, agent.id
        else:
            username = local_part(recipient)
            if not username:
                raise WebhookPayloadError("Invalid recipient username")
            owner = await self._directory.find_owner_by_username(username)
            if owner is None:
                raise WebhookPayloadError(f"No agent receives mail at {recipient}")
            owner_id, agent_id = owner.id, None

        first_sender = message.from_[0].email if message.from_ else None
        sender = (first_sender or event.get("from") or "").strip()
        subject = (message.subject or event.get("subject") or "").strip()
        body = (message.text or event.get("text") or "").strip() or (
            message.html or event.get("html") or ""
        ).strip()
        if not sender or not body:
            raise WebhookPayloadError("Invalid payload")

        thread_id = message.thread_id or event.get("threadId")
        message_id = message.message_id or event.get("messageId")
        external_id = thread_id or message_id or sender

        conversation = await self._conversations.get_or_create(
            owner_id, EMAIL_CHANNEL, external_id, agent_id=agent_id
        )
        reply = OutboundEmail(
            from_address=recipient,
            to_address=sender,
            subject=f"Re: {subject}" if subject else "Re: your message",
            body="",
            thread_id=thread_id,
            in_reply_to=message_id,
        )

        if message_id and conversation.has_message(message_id):
            pending = conversation.reply_to(message_id)
            if pending is None or pending.sent:
                logger.info("agentmail_replay_skipped", message_id=message_id, thread_id=thread_id)
                return
            # Processed before but the reply never left; resend without a second run
            logger.info("agentmail_reply_resent", message_id=message_id, thread_id=thread_id)
            await self._send_reply(conversation.id, external_id, reply, pending.content)
            return

        text = f"Email from {sender}\nSubject: {subject or '(no subject)'}\n\n{body}"
        result = await self._pipeline.process_message(
            owner_id, agent_id, text, EMAIL_CHANNEL, caller_id=sender
        )

        await self._conversations.add_message(
            conversation.id,
            ConversationMessage(role="user", content=text, external_message_id=message_id),
        )
        await self._conversations.add_message(
            conversation.id,
            ConversationMessage(role="agent", content=result.response, in_reply_to=message_id),
        )

        outbound_sent = False
        if message_id:
            await self._send_reply(conversation.id, external_id, reply, result.response)
            outbound_sent = True
        else:
            logger.warning("agentmail_reply_skipped", reason="missing message_id", sender=sender)

        await self._feed.publish(
            FeedItem(
                owner_id=owner_id,
                item_type="message_handled",
                title="Email received",
                content=f"From {sender}: {subject}" if subject else f"From {sender}",
                metadata={
                    "channel": EMAIL_CHANNEL,
                    "blocked": result.blocked,
                    "external_id": external_id,
                    "outbound_sent": outbound_sent,
                },
            )
        )

    async def _send_reply(
        self, conversation_id: str, external_id: str, email: OutboundEmail, body: str
    ) -> None:
        await self._mailer.send(replace(email, body=body))
        if email.in_reply_to:
            await self._conversations.mark_reply_sent(conversation_id, email.in_reply_to)
        await self._conversations.update_delivery_status(EMAIL_CHANNEL, external_id, "sent")

    async def _handle_delivery(self, event_type: str, event: dict[str, Any]) -> None:
        section = {"message.sent": "send", "message.delivered": "delivery"}.get(event_type, "bounce")
        try:
            details = _Delivery.model_validate(event.get(section) or {})
        except ValidationError as e:
            raise WebhookPayloadError(f"Invalid {section} payload: {e}") from e
        if not details.thread_id:
            return

        updated = await self._conversations.update_delivery_status(
            EMAIL_CHANNEL, details.thread_id, DELIVERY_EVENTS[event_type]
        )
        logger.info(
            "agentmail_delivery_event",
            event_type=event_type,
            thread_id=details.thread_id,
            conversations=updated,
            recipients=details.recipient_addresses(),
        )
