"""KnowledgeNode model and its recall view."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from emissary.utils.clock import utc_now
from emissary.utils.ids import new_id

MAX_TITLE_LENGTH = 120
MAX_DESCRIPTION_LENGTH = 200
MAX_CONTENT_LENGTH = 12000
MAX_TAGS = 20
MAX_LINKS = 30

NodeType = Literal["concept", "technique", "reference", "moc", "claim", "procedure"]
RelevanceReason = Literal["text_match", "graph_traversal", "moc_index"]


class KnowledgeNode(BaseModel):
    """A vertex in an owner's personal knowledge graph.

    Links are undirected: the graph service keeps ``linked_node_ids``
    symmetric across both endpoints.
    """

    id: str = Field(default_factory=new_id, description="Unique identifier")
    owner_id: str = Field(..., description="Owning account")
    skill_id: str | None = Field(default=None, description="Originating skill")
    agent_id: str | None = Field(default=None, description="Agent the node is scoped to")
    title: str = Field(..., max_length=MAX_TITLE_LENGTH)
    description: str = Field(default="", max_length=MAX_DESCRIPTION_LENGTH)
    content: str = Field(default="", max_length=MAX_CONTENT_LENGTH)
    node_type: NodeType = Field(default="concept")
    tags: list[str] = Field(default_factory=list, max_length=MAX_TAGS)
    linked_node_ids: list[str] = Field(default_factory=list, max_length=MAX_LINKS)
    is_published: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class RecalledNode(BaseModel):
    """A node as returned by knowledge recall.

    ``content`` is only populated for top text matches and index nodes.
    """

    id: str
    title: str
    description: str
    content: str | None = None
    node_type: NodeType
    tags: list[str] = Field(default_factory=list)
    linked_node_ids: list[str] = Field(default_factory=list)
    relevance_reason: RelevanceReason
    score: int

    @classmethod
    def from_node(
        cls,
        node: KnowledgeNode,
        *,
        reason: RelevanceReason,
        score: int,
        with_content: bool,
    ) -> "RecalledNode":
        return cls(
            id=node.id,
            title=node.title,
            description=node.description,
            content=node.content if with_content else None,
            node_type=node.node_type,
            tags=list(node.tags),
            linked_node_ids=list(node.linked_node_ids),
            relevance_reason=reason,
            score=score,
        )
