"""KnowledgeStore implementations."""

from emissary.knowledge.stores.inmemory import InMemoryKnowledgeStore

__all__ = ["InMemoryKnowledgeStore"]
