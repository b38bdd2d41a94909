"""Conversation domain models."""

from emissary.conversations.models.conversation import (
    Conversation,
    ConversationMessage,
    DeliveryStatus,
)

__all__ = ["Conversation", "ConversationMessage", "DeliveryStatus"]
