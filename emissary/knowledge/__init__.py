"""Personal knowledge graph: storage, symmetric linking and recall."""

from emissary.knowledge.graph import (
    KnowledgeGraph,
    KnowledgeGraphError,
    LinkLimitError,
    NodeNotFoundError,
    SelfLinkError,
)
from emissary.knowledge.models import KnowledgeNode, RecalledNode
from emissary.knowledge.recall import KnowledgeRecallEngine, format_knowledge_section
from emissary.knowledge.store import KnowledgeStore

__all__ = [
    "KnowledgeGraph",
    "KnowledgeGraphError",
    "KnowledgeNode",
    "KnowledgeRecallEngine",
    "KnowledgeStore",
    "LinkLimitError",
    "NodeNotFoundError",
    "RecalledNode",
    "SelfLinkError",
    "format_knowledge_section",
]
