"""In-memory implementation of KnowledgeStore."""

import re

from emissary.knowledge.models import KnowledgeNode, NodeType
from emissary.knowledge.store import KnowledgeStore

_TOKEN = re.compile(r"[a-z0-9]+")


def _tokens(text: str) -> set[str]:
    return set(_TOKEN.findall(text.lower()))


class InMemoryKnowledgeStore(KnowledgeStore):
    """In-memory implementation of KnowledgeStore for testing and development.

    Text search ranks nodes by how many distinct query terms their content
    contains; ties keep insertion order.
    """

    def __init__(self) -> None:
        self._nodes: dict[str, KnowledgeNode] = {}

    async def save(self, node: KnowledgeNode) -> str:
        self._nodes[node.id] = node
        return node.id

    async def get(self, owner_id: str, node_id: str) -> KnowledgeNode | None:
        node = self._nodes.get(node_id)
        if node is None or node.owner_id != owner_id:
            return None
        return node

    async def delete(self, owner_id: str, node_id: str) -> bool:
        if await self.get(owner_id, node_id) is None:
            return False
        del self._nodes[node_id]
        return True

    async def text_search(
        self, owner_id: str, query: str, *, limit: int = 10
    ) -> list[KnowledgeNode]:
        terms = _tokens(query)
        if not terms:
            return []

        scored: list[tuple[int, KnowledgeNode]] = []
        for node in self._nodes.values():
            if node.owner_id != owner_id:
                continue
            hits = len(terms & _tokens(node.content))
            if hits:
                scored.append((hits, node))

        scored.sort(key=lambda x: x[0], reverse=True)
        return [node for _, node in scored[:limit]]

    async def list_nodes(
        self,
        owner_id: str,
        *,
        agent_id: str | None = None,
        skill_id: str | None = None,
        node_type: NodeType | None = None,
        limit: int = 100,
    ) -> list[KnowledgeNode]:
        results = [
            node
            for node in self._nodes.values()
            if node.owner_id == owner_id
            and (agent_id is None or node.agent_id == agent_id)
            and (skill_id is None or node.skill_id == skill_id)
            and (node_type is None or node.node_type == node_type)
        ]
        return results[:limit]
