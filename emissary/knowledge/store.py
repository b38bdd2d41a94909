"""KnowledgeStore abstract interface."""

from abc import ABC, abstractmethod

from emissary.knowledge.models import KnowledgeNode, NodeType


class KnowledgeStore(ABC):
    """Abstract interface for knowledge node storage.

    Stores are plain persistence; link symmetry is enforced by
    :class:`~emissary.knowledge.graph.KnowledgeGraph`.
    """

    @abstractmethod
    async def save(self, node: KnowledgeNode) -> str:
        """Create or replace a node."""
        pass

    @abstractmethod
    async def get(self, owner_id: str, node_id: str) -> KnowledgeNode | None:
        """Get a node by ID, scoped to its owner."""
        pass

    @abstractmethod
    async def delete(self, owner_id: str, node_id: str) -> bool:
        """Delete a node. Returns False if it does not exist."""
        pass

    @abstractmethod
    async def text_search(
        self, owner_id: str, query: str, *, limit: int = 10
    ) -> list[KnowledgeNode]:
        """Full-text search over node content, best match first."""
        pass

    @abstractmethod
    async def list_nodes(
        self,
        owner_id: str,
        *,
        agent_id: str | None = None,
        skill_id: str | None = None,
        node_type: NodeType | None = None,
        limit: int = 100,
    ) -> list[KnowledgeNode]:
        """List nodes with optional filters, in insertion order."""
        pass
