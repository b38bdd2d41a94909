"""Tests for InMemoryMemoryStore and MemoryRecord."""

from datetime import timedelta

import pytest

from emissary.memory.models import MemoryRecord
from emissary.memory.stores.inmemory import InMemoryMemoryStore
from emissary.utils.clock import utc_now

OWNER = "owner-1"


def make_record(content: str, **kwargs) -> MemoryRecord:
    kwargs.setdefault("owner_id", OWNER)
    kwargs.setdefault("source", "api")
    return MemoryRecord(content=content, **kwargs)


@pytest.fixture
def store() -> InMemoryMemoryStore:
    return InMemoryMemoryStore()


class TestMemoryRecord:
    """Tests for derived MemoryRecord properties."""

    def test_role_from_metadata(self) -> None:
        assert make_record("hi", metadata={"role": "assistant"}).role == "assistant"

    def test_summary_replays_as_system(self) -> None:
        assert make_record("digest", kind="conversation_summary").role == "system"

    def test_unknown_role_defaults_to_user(self) -> None:
        assert make_record("hi", metadata={"role": "tool"}).role == "user"

    def test_thread_and_direction(self) -> None:
        record = make_record("hi", metadata={"thread_id": "a:b", "direction": "outbound"})

        assert record.thread_id == "a:b"
        assert record.direction == "outbound"
        assert make_record("hi").thread_id is None
        assert make_record("hi", metadata={"direction": "sideways"}).direction is None


class TestListRecent:
    """Tests for list_recent."""

    @pytest.mark.asyncio
    async def test_newest_first(self, store: InMemoryMemoryStore) -> None:
        now = utc_now()
        await store.add(make_record("old", created_at=now - timedelta(minutes=5)))
        await store.add(make_record("new", created_at=now))

        records = await store.list_recent(OWNER)

        assert [r.content for r in records] == ["new", "old"]

    @pytest.mark.asyncio
    async def test_insertion_order_breaks_ties(self, store: InMemoryMemoryStore) -> None:
        now = utc_now()
        await store.add(make_record("first", created_at=now))
        await store.add(make_record("second", created_at=now))

        records = await store.list_recent(OWNER)

        assert [r.content for r in records] == ["second", "first"]

    @pytest.mark.asyncio
    async def test_filters(self, store: InMemoryMemoryStore) -> None:
        """Agent, source and kind filters combine."""
        await store.add(make_record("a", agent_id="agent-1"))
        await store.add(make_record("b", agent_id="agent-2"))
        await store.add(make_record("c", agent_id="agent-1", source="email"))
        await store.add(make_record("d", agent_id="agent-1", kind="reflection"))

        records = await store.list_recent(
            OWNER, agent_id="agent-1", source="api", kinds=("conversation",)
        )

        assert [r.content for r in records] == ["a"]

    @pytest.mark.asyncio
    async def test_archived_hidden(self, store: InMemoryMemoryStore) -> None:
        record = make_record("secret")
        await store.add(record)

        assert await store.archive(OWNER, record.id) is True
        assert await store.list_recent(OWNER) == []
        assert (await store.get(OWNER, record.id)).archived_at is not None

    @pytest.mark.asyncio
    async def test_archive_other_owner(self, store: InMemoryMemoryStore) -> None:
        record = make_record("mine")
        await store.add(record)

        assert await store.archive("owner-2", record.id) is False


class TestVectorSearch:
    """Tests for vector_search."""

    @pytest.mark.asyncio
    async def test_ranked_by_similarity(self, store: InMemoryMemoryStore) -> None:
        await store.add(make_record("far", embedding=[0.0, 1.0]))
        await store.add(make_record("near", embedding=[1.0, 0.1]))
        await store.add(make_record("none"))

        hits = await store.vector_search(OWNER, [1.0, 0.0], limit=5)

        assert [r.content for r, _ in hits] == ["near", "far"]
        assert hits[0][1] > hits[1][1]

    @pytest.mark.asyncio
    async def test_min_score_and_dimension_mismatch(self, store: InMemoryMemoryStore) -> None:
        await store.add(make_record("orthogonal", embedding=[0.0, 1.0]))
        await store.add(make_record("wrong size", embedding=[1.0, 0.0, 0.0]))

        hits = await store.vector_search(OWNER, [1.0, 0.0], min_score=0.5)

        assert hits == []
