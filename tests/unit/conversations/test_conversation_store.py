"""Tests for the in-memory conversation store."""

import pytest

from emissary.conversations.models import ConversationMessage
from emissary.conversations.stores.inmemory import InMemoryConversationStore


@pytest.fixture
def store() -> InMemoryConversationStore:
    return InMemoryConversationStore()


class TestInMemoryConversationStore:
    """Tests for InMemoryConversationStore."""

    @pytest.mark.asyncio
    async def test_get_or_create_is_keyed_by_thread(self, store: InMemoryConversationStore) -> None:
        first = await store.get_or_create("owner-1", "email", "th-1", agent_id="agent-1")
        again = await store.get_or_create("owner-1", "email", "th-1")
        other_channel = await store.get_or_create("owner-1", "a2a", "th-1")
        other_owner = await store.get_or_create("owner-2", "email", "th-1")

        assert again.id == first.id
        assert again.agent_id == "agent-1"
        assert len({first.id, other_channel.id, other_owner.id}) == 3

    @pytest.mark.asyncio
    async def test_messages_and_replay_check(self, store: InMemoryConversationStore) -> None:
        conversation = await store.get_or_create("owner-1", "email", "th-1")

        await store.add_message(
            conversation.id,
            ConversationMessage(role="user", content="Hi", external_message_id="m-1"),
        )
        await store.add_message(conversation.id, ConversationMessage(role="agent", content="Hello"))

        stored = await store.get(conversation.id)
        assert [m.role for m in stored.messages] == ["user", "agent"]
        assert stored.has_message("m-1")
        assert not stored.has_message("m-2")

    @pytest.mark.asyncio
    async def test_add_to_missing_conversation(self, store: InMemoryConversationStore) -> None:
        with pytest.raises(KeyError):
            await store.add_message("missing", ConversationMessage(role="user", content="Hi"))

    @pytest.mark.asyncio
    async def test_mark_reply_sent(self, store: InMemoryConversationStore) -> None:
        conversation = await store.get_or_create("owner-1", "email", "th-1")
        await store.add_message(
            conversation.id,
            ConversationMessage(role="agent", content="See you Friday", in_reply_to="m-1"),
        )

        assert conversation.reply_to("m-1").sent is False
        assert await store.mark_reply_sent(conversation.id, "m-1") is True
        assert conversation.reply_to("m-1").sent is True
        assert conversation.reply_to("m-2") is None
        assert await store.mark_reply_sent(conversation.id, "m-2") is False
        assert await store.mark_reply_sent("missing", "m-1") is False

    @pytest.mark.asyncio
    async def test_delivery_status_by_external_id(
        self, store: InMemoryConversationStore
    ) -> None:
        """Status updates reach every owner's copy of the thread on that channel."""
        await store.get_or_create("owner-1", "email", "th-1")
        await store.get_or_create("owner-2", "email", "th-1")
        untouched = await store.get_or_create("owner-1", "email", "th-2")

        updated = await store.update_delivery_status("email", "th-1", "bounced")

        assert updated == 2
        assert (await store.find("owner-2", "email", "th-1")).delivery_status == "bounced"
        assert untouched.delivery_status is None
        assert await store.update_delivery_status("email", "unknown", "sent") == 0
