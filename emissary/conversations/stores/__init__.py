"""ConversationStore implementations."""

from emissary.conversations.stores.inmemory import InMemoryConversationStore

__all__ = ["InMemoryConversationStore"]
