"""In-memory implementation of ConversationStore."""

from emissary.conversations.models import Conversation, ConversationMessage, DeliveryStatus
from emissary.conversations.store import ConversationStore
from emissary.utils.clock import utc_now


class InMemoryConversationStore(ConversationStore):
    """In-memory implementation of ConversationStore for testing and development."""

    def __init__(self) -> None:
        self._conversations: dict[str, Conversation] = {}

    async def get_or_create(
        self,
        owner_id: str,
        channel: str,
        external_id: str,
        *,
        agent_id: str | None = None,
    ) -> Conversation:
        existing = await self.find(owner_id, channel, external_id)
        if existing is not None:
            return existing
        conversation = Conversation(
            owner_id=owner_id, agent_id=agent_id, channel=channel, external_id=external_id
        )
        self._conversations[conversation.id] = conversation
        return conversation

    async def get(self, conversation_id: str) -> Conversation | None:
        return self._conversations.get(conversation_id)

    async def find(self, owner_id: str, channel: str, external_id: str) -> Conversation | None:
        for conversation in self._conversations.values():
            if (
                conversation.owner_id == owner_id
                and conversation.channel == channel
                and conversation.external_id == external_id
            ):
                return conversation
        return None

    async def add_message(self, conversation_id: str, message: ConversationMessage) -> None:
        conversation = self._conversations.get(conversation_id)
        if conversation is None:
            raise KeyError(f"Conversation not found: {conversation_id}")
        conversation.messages.append(message)
        conversation.updated_at = utc_now()

    async def mark_reply_sent(self, conversation_id: str, in_reply_to: str) -> bool:
        conversation = self._conversations.get(conversation_id)
        if conversation is None:
            return False
        reply = conversation.reply_to(in_reply_to)
        if reply is None:
            return False
        reply.sent = True
        conversation.updated_at = utc_now()
        return True

    async def update_delivery_status(
        self, channel: str, external_id: str, status: DeliveryStatus
    ) -> int:
        updated = 0
        for conversation in self._conversations.values():
            if conversation.channel == channel and conversation.external_id == external_id:
                conversation.delivery_status = status
                conversation.updated_at = utc_now()
                updated += 1
        return updated
