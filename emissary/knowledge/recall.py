"""Knowledge recall: text match, one-hop expansion and index-node boosting.

Results use progressive disclosure. Every node carries its title and
description; only the top text matches and index (``moc``) nodes carry full
content, which keeps the prompt section bounded.
"""

from emissary.knowledge.models import KnowledgeNode, RecalledNode
from emissary.knowledge.store import KnowledgeStore
from emissary.observability.logging import get_logger

logger = get_logger(__name__)

MAX_NODES_LOADED = 10


class KnowledgeRecallEngine:
    """Hybrid retrieval over an owner's knowledge graph."""

    def __init__(
        self,
        store: KnowledgeStore,
        *,
        full_content_count: int = 3,
        moc_candidate_limit: int = 20,
    ) -> None:
        self._store = store
        self._full_content_count = full_content_count
        self._moc_candidate_limit = moc_candidate_limit

    async def load(
        self,
        owner_id: str,
        agent_id: str | None,
        query: str,
        max_nodes: int = MAX_NODES_LOADED,
    ) -> list[RecalledNode]:
        """Load the nodes most relevant to ``query``.

        Args:
            owner_id: Account whose graph is searched
            agent_id: When set, nodes scoped to other agents are skipped
            query: Free text, usually the sanitized user message
            max_nodes: Upper bound on returned nodes

        Returns:
            Nodes ordered by score, highest first; ties keep discovery order
        """
        if max_nodes <= 0:
            return []

        results: dict[str, RecalledNode] = {}

        def visible(node: KnowledgeNode) -> bool:
            return not (agent_id and node.agent_id and node.agent_id != agent_id)

        # Phase 1: text matches, rank-scored
        hits = await self._store.text_search(owner_id, query, limit=max_nodes)
        for rank, node in enumerate(hits):
            if not visible(node):
                continue
            results[node.id] = RecalledNode.from_node(
                node,
                reason="text_match",
                score=len(hits) - rank,
                with_content=rank < self._full_content_count,
            )

        # Phase 2: one hop out from every match, description only
        visited = set(results)
        to_fetch: list[str] = []
        for recalled in list(results.values()):
            for link_id in recalled.linked_node_ids:
                if link_id not in visited and len(to_fetch) < max_nodes:
                    to_fetch.append(link_id)
                    visited.add(link_id)

        for link_id in to_fetch:
            if len(results) >= max_nodes:
                break
            neighbour = await self._store.get(owner_id, link_id)
            if neighbour is None or not visible(neighbour):
                continue
            results[neighbour.id] = RecalledNode.from_node(
                neighbour, reason="graph_traversal", score=0, with_content=False
            )

        # Phase 3: index nodes pointing into the current result set
        if len(results) < max_nodes:
            if agent_id:
                candidates = await self._store.list_nodes(
                    owner_id, agent_id=agent_id, limit=self._moc_candidate_limit
                )
            else:
                candidates = await self._store.list_nodes(
                    owner_id, node_type="moc", limit=self._moc_candidate_limit // 2
                )

            for moc in candidates:
                if len(results) >= max_nodes:
                    break
                if moc.node_type != "moc" or moc.id in results:
                    continue
                if any(link_id in results for link_id in moc.linked_node_ids):
                    results[moc.id] = RecalledNode.from_node(
                        moc, reason="moc_index", score=1, with_content=True
                    )

        ordered = sorted(results.values(), key=lambda n: n.score, reverse=True)
        logger.debug(
            "knowledge_recalled",
            owner_id=owner_id,
            matched=len(hits),
            returned=min(len(ordered), max_nodes),
        )
        return ordered[:max_nodes]


def format_knowledge_section(nodes: list[RecalledNode]) -> str:
    """Render recalled nodes as the system prompt's knowledge section.

    Returns an empty string when there is nothing to add.
    """
    if not nodes:
        return ""

    sections = [
        f"### {node.title}\n{node.content}" if node.content else f"- **{node.title}**: {node.description}"
        for node in nodes
    ]
    return "\n\n## Relevant Knowledge\n" + "\n\n".join(sections)
