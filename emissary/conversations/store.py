"""ConversationStore abstract interface."""

from abc import ABC, abstractmethod

from emissary.conversations.models import Conversation, ConversationMessage, DeliveryStatus


class ConversationStore(ABC):
    """Abstract interface for channel conversations.

    ``get_or_create`` is keyed by ``(owner_id, channel, external_id)`` so a
    replayed inbound event lands in the same conversation.
    """

    @abstractmethod
    async def get_or_create(
        self,
        owner_id: str,
        channel: str,
        external_id: str,
        *,
        agent_id: str | None = None,
    ) -> Conversation:
        """Return the conversation for the key, creating it if needed."""
        pass

    @abstractmethod
    async def get(self, conversation_id: str) -> Conversation | None:
        """Get a conversation by ID."""
        pass

    @abstractmethod
    async def find(self, owner_id: str, channel: str, external_id: str) -> Conversation | None:
        """Look up a conversation by its channel key."""
        pass

    @abstractmethod
    async def add_message(self, conversation_id: str, message: ConversationMessage) -> None:
        """Append a message to a conversation."""
        pass

    @abstractmethod
    async def mark_reply_sent(self, conversation_id: str, in_reply_to: str) -> bool:
        """Flag the reply to ``in_reply_to`` as sent. Returns False if there is none."""
        pass

    @abstractmethod
    async def update_delivery_status(
        self, channel: str, external_id: str, status: DeliveryStatus
    ) -> int:
        """Set delivery status on every conversation with this key. Returns the count."""
        pass
