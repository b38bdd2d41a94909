"""Context assembly: recency window, semantic recall and knowledge recall.

The three reads are independent and run concurrently. Semantic recall and
knowledge recall are best effort; when either is unavailable the context
degrades to the recency window alone.
"""

import asyncio
from dataclasses import dataclass, field

from emissary.config.models.pipeline import PipelineConfig
from emissary.knowledge.models import RecalledNode
from emissary.knowledge.recall import KnowledgeRecallEngine, format_knowledge_section
from emissary.memory.models import MemoryRecord
from emissary.memory.recall import SemanticRecall
from emissary.memory.store import MemoryStore
from emissary.observability.logging import get_logger
from emissary.providers.llm.base import ChatMessage

logger = get_logger(__name__)

CONTEXT_KINDS = ("conversation", "conversation_summary")


def memory_to_message(record: MemoryRecord) -> ChatMessage:
    """Replay a memory record as a chat turn."""
    content = record.content
    if record.kind == "conversation_summary":
        content = f"Memory summary: {content}"
    return ChatMessage(role=record.role, content=content)


@dataclass
class ContextBundle:
    """Everything read before the model call."""

    recent: list[MemoryRecord] = field(default_factory=list)
    recalled: list[MemoryRecord] = field(default_factory=list)
    knowledge: list[RecalledNode] = field(default_factory=list)
    query_embedding: list[float] | None = None

    @property
    def knowledge_section(self) -> str:
        return format_knowledge_section(self.knowledge)

    def describe(self) -> str:
        detail = f"{len(self.recent)} messages, {len(self.recalled)} memories"
        if self.knowledge:
            detail += ", knowledge graph active"
        return detail


class ContextAssembler:
    """Builds the ordered message list for one model call."""

    def __init__(
        self,
        memory_store: MemoryStore,
        semantic_recall: SemanticRecall,
        knowledge: KnowledgeRecallEngine,
        config: PipelineConfig | None = None,
    ) -> None:
        self._memory_store = memory_store
        self._semantic_recall = semantic_recall
        self._knowledge = knowledge
        self._config = config or PipelineConfig()

    async def load_recent(self, owner_id: str, agent_id: str | None) -> list[MemoryRecord]:
        """Last N non-archived records, oldest first."""
        records = await self._memory_store.list_recent(
            owner_id,
            agent_id=agent_id,
            kinds=CONTEXT_KINDS,
            limit=self._config.recency_window,
        )
        return list(reversed(records))

    async def _recall_similar(
        self, owner_id: str, agent_id: str | None, text: str
    ) -> tuple[list[float] | None, list[MemoryRecord]]:
        embedding = await self._semantic_recall.embed(owner_id, text)
        if embedding is None:
            return None, []
        recalled = await self._semantic_recall.recall(
            owner_id, embedding, self._config.semantic_recall_limit, agent_id=agent_id
        )
        return embedding, recalled

    async def _recall_knowledge(
        self, owner_id: str, agent_id: str | None, text: str
    ) -> list[RecalledNode]:
        try:
            return await self._knowledge.load(
                owner_id, agent_id, text, max_nodes=self._config.knowledge_max_nodes
            )
        except Exception as e:
            logger.warning("knowledge_recall_failed", owner_id=owner_id, error=str(e))
            return []

    async def gather(self, owner_id: str, agent_id: str | None, text: str) -> ContextBundle:
        """Run the recency, semantic and knowledge reads concurrently."""
        (embedding, recalled), knowledge, recent = await asyncio.gather(
            self._recall_similar(owner_id, agent_id, text),
            self._recall_knowledge(owner_id, agent_id, text),
            self.load_recent(owner_id, agent_id),
        )
        return ContextBundle(
            recent=recent,
            recalled=recalled,
            knowledge=knowledge,
            query_embedding=embedding,
        )

    @staticmethod
    def assemble(system_prompt: str, bundle: ContextBundle, user_turn: str) -> list[ChatMessage]:
        """System prompt (+ knowledge), recency window, recalled memories, user turn.

        Recency and recall are not deduplicated against each other.
        """
        messages = [ChatMessage(role="system", content=system_prompt + bundle.knowledge_section)]
        messages.extend(memory_to_message(r) for r in bundle.recent)
        messages.extend(memory_to_message(r) for r in bundle.recalled)
        messages.append(ChatMessage(role="user", content=user_turn))
        return messages
