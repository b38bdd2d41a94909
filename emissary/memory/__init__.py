"""Conversation memory: append-only records and semantic recall."""

from emissary.memory.models import MemoryRecord
from emissary.memory.recall import SemanticRecall
from emissary.memory.store import MemoryStore

__all__ = ["MemoryRecord", "MemoryStore", "SemanticRecall"]
