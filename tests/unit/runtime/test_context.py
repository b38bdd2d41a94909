"""Tests for context assembly."""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from emissary.agents.stores.inmemory import InMemoryCredentialStore
from emissary.config.models.pipeline import PipelineConfig
from emissary.knowledge.graph import KnowledgeGraph
from emissary.knowledge.recall import KnowledgeRecallEngine
from emissary.knowledge.stores.inmemory import InMemoryKnowledgeStore
from emissary.memory.models import MemoryRecord
from emissary.memory.recall import SemanticRecall
from emissary.memory.stores.inmemory import InMemoryMemoryStore
from emissary.providers.llm.mock import MockProviderGateway
from emissary.runtime.context import ContextAssembler, ContextBundle, memory_to_message
from emissary.utils.clock import utc_now

OWNER = "owner-1"


def record(content: str, minutes_ago: int, **kwargs) -> MemoryRecord:
    return MemoryRecord(
        owner_id=OWNER,
        agent_id="agent-1",
        content=content,
        source="api",
        created_at=utc_now() - timedelta(minutes=minutes_ago),
        **kwargs,
    )


@pytest.fixture
def memory_store() -> InMemoryMemoryStore:
    return InMemoryMemoryStore()


@pytest.fixture
def knowledge_store() -> InMemoryKnowledgeStore:
    return InMemoryKnowledgeStore()


@pytest.fixture
def assembler(
    memory_store: InMemoryMemoryStore,
    knowledge_store: InMemoryKnowledgeStore,
    credentials: InMemoryCredentialStore,
) -> ContextAssembler:
    recall = SemanticRecall(MockProviderGateway(embedding=[1.0, 0.0]), credentials, memory_store)
    return ContextAssembler(
        memory_store,
        recall,
        KnowledgeRecallEngine(knowledge_store),
        PipelineConfig(recency_window=2, semantic_recall_limit=1),
    )


class TestMemoryToMessage:
    """Tests for memory_to_message."""

    def test_summary_prefixed(self) -> None:
        message = memory_to_message(record("Met twice.", 0, kind="conversation_summary"))

        assert message.role == "system"
        assert message.content == "Memory summary: Met twice."

    def test_assistant_turn(self) -> None:
        message = memory_to_message(record("Hi!", 0, metadata={"role": "assistant"}))
        assert (message.role, message.content) == ("assistant", "Hi!")


class TestGather:
    """Tests for ContextAssembler.gather."""

    @pytest.mark.asyncio
    async def test_recency_window_oldest_first(
        self, assembler: ContextAssembler, memory_store: InMemoryMemoryStore
    ) -> None:
        """Only the last N conversation records are replayed, oldest first."""
        await memory_store.add(record("first", 30))
        await memory_store.add(record("second", 20))
        await memory_store.add(record("third", 10))
        await memory_store.add(record("private thought", 5, kind="reflection"))

        bundle = await assembler.gather(OWNER, "agent-1", "hello")

        assert [r.content for r in bundle.recent] == ["second", "third"]

    @pytest.mark.asyncio
    async def test_semantic_recall(
        self, assembler: ContextAssembler, memory_store: InMemoryMemoryStore
    ) -> None:
        await memory_store.add(record("similar", 60, embedding=[0.9, 0.1]))

        bundle = await assembler.gather(OWNER, "agent-1", "hello")

        assert bundle.query_embedding == [1.0, 0.0]
        assert [r.content for r in bundle.recalled] == ["similar"]

    @pytest.mark.asyncio
    async def test_no_embedding_credential(
        self, memory_store: InMemoryMemoryStore, knowledge_store: InMemoryKnowledgeStore
    ) -> None:
        """Without a credential the context is recency-only."""
        await memory_store.add(record("similar", 60, embedding=[1.0, 0.0]))
        recall = SemanticRecall(
            MockProviderGateway(embedding=[1.0, 0.0]), InMemoryCredentialStore(), memory_store
        )
        assembler = ContextAssembler(memory_store, recall, KnowledgeRecallEngine(knowledge_store))

        bundle = await assembler.gather(OWNER, "agent-1", "hello")

        assert bundle.query_embedding is None
        assert bundle.recalled == []
        assert [r.content for r in bundle.recent] == ["similar"]

    @pytest.mark.asyncio
    async def test_knowledge_loaded(
        self, assembler: ContextAssembler, knowledge_store: InMemoryKnowledgeStore
    ) -> None:
        await KnowledgeGraph(knowledge_store).create_node(
            OWNER, title="Deploys", content="deploy on fridays never"
        )

        bundle = await assembler.gather(OWNER, "agent-1", "when do we deploy")

        assert [n.title for n in bundle.knowledge] == ["Deploys"]
        assert bundle.describe() == "0 messages, 0 memories, knowledge graph active"

    @pytest.mark.asyncio
    async def test_knowledge_failure_degrades(
        self, memory_store: InMemoryMemoryStore, credentials: InMemoryCredentialStore
    ) -> None:
        engine = AsyncMock(spec=KnowledgeRecallEngine)
        engine.load.side_effect = RuntimeError("index offline")
        recall = SemanticRecall(MockProviderGateway(), credentials, memory_store)
        assembler = ContextAssembler(memory_store, recall, engine)

        bundle = await assembler.gather(OWNER, None, "hello")

        assert bundle.knowledge == []


class TestAssemble:
    """Tests for ContextAssembler.assemble."""

    def test_message_order(self) -> None:
        bundle = ContextBundle(
            recent=[record("earlier question", 10), record("earlier answer", 9, metadata={"role": "assistant"})],
            recalled=[record("old fact", 100)],
        )

        messages = ContextAssembler.assemble("SYSTEM", bundle, "new question")

        assert [(m.role, m.content) for m in messages] == [
            ("system", "SYSTEM"),
            ("user", "earlier question"),
            ("assistant", "earlier answer"),
            ("user", "old fact"),
            ("user", "new question"),
        ]
