"""In-memory implementation of AuditStore."""

from emissary.audit.models import AuditEntry, SecurityFlagRecord
from emissary.audit.store import AuditStore


class InMemoryAuditStore(AuditStore):
    """In-memory implementation of AuditStore for testing and development.

    Uses simple list storage with linear scan for queries.
    """

    def __init__(self) -> None:
        self._entries: list[AuditEntry] = []
        self._flags: list[SecurityFlagRecord] = []

    async def save_entry(self, entry: AuditEntry) -> str:
        self._entries.append(entry)
        return entry.id

    async def list_entries(
        self,
        owner_id: str,
        *,
        action: str | None = None,
        limit: int = 100,
    ) -> list[AuditEntry]:
        results = [
            entry for entry in self._entries
            if entry.owner_id == owner_id and (action is None or entry.action == action)
        ]
        results.reverse()
        return results[:limit]

    async def save_security_flag(self, flag: SecurityFlagRecord) -> str:
        self._flags.append(flag)
        return flag.id

    async def list_security_flags(self, owner_id: str, *, limit: int = 100) -> list[SecurityFlagRecord]:
        results = [flag for flag in self._flags if flag.owner_id == owner_id]
        results.reverse()
        return results[:limit]
