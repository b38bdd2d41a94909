"""Per-channel conversation transcripts."""

from emissary.conversations.models import Conversation, ConversationMessage
from emissary.conversations.store import ConversationStore

__all__ = ["Conversation", "ConversationMessage", "ConversationStore"]
