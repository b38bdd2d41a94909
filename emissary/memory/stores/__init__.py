"""MemoryStore implementations."""

from emissary.memory.stores.inmemory import InMemoryMemoryStore

__all__ = ["InMemoryMemoryStore"]
