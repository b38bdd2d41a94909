"""In-memory implementation of MemoryStore."""

from emissary.memory.models import MemoryKind, MemoryRecord
from emissary.memory.store import MemoryStore
from emissary.utils.clock import utc_now
from emissary.utils.vector import cosine_similarity


class InMemoryMemoryStore(MemoryStore):
    """In-memory implementation of MemoryStore for testing and development.

    Uses dict storage with linear scan for queries. Insertion order breaks
    ties between records created within the same clock tick.
    """

    def __init__(self) -> None:
        self._records: dict[str, MemoryRecord] = {}

    async def add(self, record: MemoryRecord) -> str:
        self._records[record.id] = record
        return record.id

    async def get(self, owner_id: str, record_id: str) -> MemoryRecord | None:
        record = self._records.get(record_id)
        if record is None or record.owner_id != owner_id:
            return None
        return record

    async def list_recent(
        self,
        owner_id: str,
        *,
        agent_id: str | None = None,
        source: str | None = None,
        kinds: tuple[MemoryKind, ...] | None = None,
        limit: int = 10,
    ) -> list[MemoryRecord]:
        results = [
            record
            for record in self._records.values()
            if record.owner_id == owner_id
            and not record.archived
            and (agent_id is None or record.agent_id == agent_id)
            and (source is None or record.source == source)
            and (kinds is None or record.kind in kinds)
        ]
        # dicts keep insertion order; reversed() gives newest first for equal timestamps
        results = list(reversed(results))
        results.sort(key=lambda r: r.created_at, reverse=True)
        return results[:limit]

    async def vector_search(
        self,
        owner_id: str,
        query_embedding: list[float],
        *,
        limit: int = 8,
        min_score: float = 0.0,
    ) -> list[tuple[MemoryRecord, float]]:
        results: list[tuple[MemoryRecord, float]] = []
        for record in self._records.values():
            if record.owner_id != owner_id or record.archived or not record.embedding:
                continue
            if len(record.embedding) != len(query_embedding):
                continue
            score = cosine_similarity(query_embedding, record.embedding)
            if score >= min_score:
                results.append((record, score))

        results.sort(key=lambda x: x[1], reverse=True)
        return results[:limit]

    async def archive(self, owner_id: str, record_id: str) -> bool:
        record = await self.get(owner_id, record_id)
        if record is None:
            return False
        self._records[record_id] = record.model_copy(
            update={"archived": True, "archived_at": utc_now()}
        )
        return True
