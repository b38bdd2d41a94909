"""Knowledge graph models."""

from emissary.knowledge.models.node import (
    MAX_CONTENT_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    MAX_LINKS,
    MAX_TAGS,
    MAX_TITLE_LENGTH,
    KnowledgeNode,
    NodeType,
    RecalledNode,
    RelevanceReason,
)

__all__ = [
    "MAX_CONTENT_LENGTH",
    "MAX_DESCRIPTION_LENGTH",
    "MAX_LINKS",
    "MAX_TAGS",
    "MAX_TITLE_LENGTH",
    "KnowledgeNode",
    "NodeType",
    "RecalledNode",
    "RelevanceReason",
]
