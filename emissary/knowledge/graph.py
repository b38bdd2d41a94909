"""Knowledge graph mutations with symmetric link maintenance.

Every mutation that touches links updates both endpoints, so for any two
nodes A and B, A links to B exactly when B links to A. Agent-issued
mutations go through the same service as direct edits.
"""

from collections import Counter
from typing import Any

from emissary.knowledge.models import (
    MAX_CONTENT_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    MAX_LINKS,
    MAX_TAGS,
    MAX_TITLE_LENGTH,
    KnowledgeNode,
    NodeType,
)
from emissary.knowledge.store import KnowledgeStore
from emissary.observability.logging import get_logger
from emissary.utils.clock import utc_now

logger = get_logger(__name__)


class KnowledgeGraphError(Exception):
    """Base exception for knowledge graph mutations."""

    pass


class NodeNotFoundError(KnowledgeGraphError):
    """Node missing or owned by another account."""

    pass


class SelfLinkError(KnowledgeGraphError):
    """Attempt to link a node to itself."""

    pass


class LinkLimitError(KnowledgeGraphError):
    """One endpoint already holds the maximum number of links."""

    pass


def clip(value: str, limit: int) -> str:
    return value[:limit]


class KnowledgeGraph:
    """Create, edit, link and delete knowledge nodes for one store."""

    def __init__(self, store: KnowledgeStore) -> None:
        self._store = store

    async def create_node(
        self,
        owner_id: str,
        *,
        title: str,
        description: str = "",
        content: str = "",
        node_type: NodeType = "concept",
        tags: list[str] | None = None,
        linked_node_ids: list[str] | None = None,
        agent_id: str | None = None,
        skill_id: str | None = None,
        is_published: bool = False,
    ) -> KnowledgeNode:
        """Create a node, clipping fields to their limits.

        Requested links are validated against the owner first and then
        added symmetrically.

        Raises:
            NodeNotFoundError: If a requested link target does not exist
        """
        link_ids = list(dict.fromkeys(linked_node_ids or []))[:MAX_LINKS]
        for link_id in link_ids:
            await self._require(owner_id, link_id)

        node = KnowledgeNode(
            owner_id=owner_id,
            agent_id=agent_id,
            skill_id=skill_id,
            title=clip(title.strip(), MAX_TITLE_LENGTH),
            description=clip(description.strip(), MAX_DESCRIPTION_LENGTH),
            content=clip(content, MAX_CONTENT_LENGTH),
            node_type=node_type,
            tags=(tags or [])[:MAX_TAGS],
            is_published=is_published,
        )
        await self._store.save(node)

        for link_id in link_ids:
            await self.link(owner_id, node.id, link_id)

        logger.info("knowledge_node_created", node_id=node.id, node_type=node_type)
        return await self._require(owner_id, node.id)

    async def update_node(
        self,
        owner_id: str,
        node_id: str,
        *,
        linked_node_ids: list[str] | None = None,
        **changes: Any,
    ) -> KnowledgeNode:
        """Patch node fields; a new link list is applied as a symmetric diff."""
        node = await self._require(owner_id, node_id)

        patch: dict[str, Any] = {"updated_at": utc_now()}
        if changes.get("title") is not None:
            patch["title"] = clip(changes["title"].strip(), MAX_TITLE_LENGTH)
        if changes.get("description") is not None:
            patch["description"] = clip(changes["description"].strip(), MAX_DESCRIPTION_LENGTH)
        if changes.get("content") is not None:
            patch["content"] = clip(changes["content"], MAX_CONTENT_LENGTH)
        if changes.get("node_type") is not None:
            patch["node_type"] = changes["node_type"]
        if changes.get("tags") is not None:
            patch["tags"] = list(changes["tags"])[:MAX_TAGS]
        if changes.get("is_published") is not None:
            patch["is_published"] = changes["is_published"]

        await self._store.save(node.model_copy(update=patch))

        if linked_node_ids is not None:
            wanted = list(dict.fromkeys(linked_node_ids))[:MAX_LINKS]
            for link_id in wanted:
                await self._require(owner_id, link_id)
            for link_id in node.linked_node_ids:
                if link_id not in wanted:
                    await self.unlink(owner_id, node_id, link_id)
            for link_id in wanted:
                await self.link(owner_id, node_id, link_id)

        return await self._require(owner_id, node_id)

    async def delete_node(self, owner_id: str, node_id: str) -> None:
        """Delete a node and drop it from every neighbour's links."""
        node = await self._require(owner_id, node_id)
        for link_id in node.linked_node_ids:
            neighbour = await self._store.get(owner_id, link_id)
            if neighbour is not None:
                await self._set_links(
                    neighbour, [i for i in neighbour.linked_node_ids if i != node_id]
                )
        await self._store.delete(owner_id, node_id)
        logger.info("knowledge_node_deleted", node_id=node_id)

    async def link(self, owner_id: str, source_id: str, target_id: str) -> None:
        """Link two nodes in both directions. Linking twice is a no-op.

        Raises:
            SelfLinkError: If source and target are the same node
            NodeNotFoundError: If either node is missing
            LinkLimitError: If either side is already full
        """
        if source_id == target_id:
            raise SelfLinkError("Cannot link a node to itself")

        source = await self._require(owner_id, source_id)
        target = await self._require(owner_id, target_id)

        source_needs = target_id not in source.linked_node_ids
        target_needs = source_id not in target.linked_node_ids
        if (source_needs and len(source.linked_node_ids) >= MAX_LINKS) or (
            target_needs and len(target.linked_node_ids) >= MAX_LINKS
        ):
            raise LinkLimitError(f"Nodes may hold at most {MAX_LINKS} links")

        if source_needs:
            await self._set_links(source, [*source.linked_node_ids, target_id])
        if target_needs:
            await self._set_links(target, [*target.linked_node_ids, source_id])

    async def unlink(self, owner_id: str, source_id: str, target_id: str) -> None:
        """Remove the link between two nodes in both directions."""
        source = await self._require(owner_id, source_id)
        target = await self._require(owner_id, target_id)
        await self._set_links(source, [i for i in source.linked_node_ids if i != target_id])
        await self._set_links(target, [i for i in target.linked_node_ids if i != source_id])

    async def linked_nodes(self, owner_id: str, node_id: str) -> list[KnowledgeNode]:
        node = await self._require(owner_id, node_id)
        results = []
        for link_id in node.linked_node_ids:
            neighbour = await self._store.get(owner_id, link_id)
            if neighbour is not None:
                results.append(neighbour)
        return results

    async def stats(self, owner_id: str, *, skill_id: str | None = None) -> dict[str, Any]:
        """Node totals by type, for graph overview headers."""
        nodes = await self._store.list_nodes(owner_id, skill_id=skill_id, limit=500)
        return {
            "total_nodes": len(nodes),
            "by_type": dict(Counter(node.node_type for node in nodes)),
        }

    async def _require(self, owner_id: str, node_id: str) -> KnowledgeNode:
        node = await self._store.get(owner_id, node_id)
        if node is None:
            raise NodeNotFoundError(f"Knowledge node not found: {node_id}")
        return node

    async def _set_links(self, node: KnowledgeNode, links: list[str]) -> None:
        await self._store.save(
            node.model_copy(update={"linked_node_ids": links, "updated_at": utc_now()})
        )
