"""MemoryStore abstract interface."""

from abc import ABC, abstractmethod

from emissary.memory.models import MemoryKind, MemoryRecord


class MemoryStore(ABC):
    """Abstract interface for memory storage.

    Supports recency queries, vector search over embedded records and
    archival. Archived records are excluded from every query.
    """

    @abstractmethod
    async def add(self, record: MemoryRecord) -> str:
        """Append a memory record."""
        pass

    @abstractmethod
    async def get(self, owner_id: str, record_id: str) -> MemoryRecord | None:
        """Get a record by ID."""
        pass

    @abstractmethod
    async def list_recent(
        self,
        owner_id: str,
        *,
        agent_id: str | None = None,
        source: str | None = None,
        kinds: tuple[MemoryKind, ...] | None = None,
        limit: int = 10,
    ) -> list[MemoryRecord]:
        """List the most recent records, newest first."""
        pass

    @abstractmethod
    async def vector_search(
        self,
        owner_id: str,
        query_embedding: list[float],
        *,
        limit: int = 8,
        min_score: float = 0.0,
    ) -> list[tuple[MemoryRecord, float]]:
        """Search records by vector similarity, best match first."""
        pass

    @abstractmethod
    async def archive(self, owner_id: str, record_id: str) -> bool:
        """Archive a record. Returns False if it does not exist."""
        pass
