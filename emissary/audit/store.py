"""AuditStore abstract interface."""

from abc import ABC, abstractmethod

from emissary.audit.models import AuditEntry, SecurityFlagRecord


class AuditStore(ABC):
    """Abstract interface for the audit log.

    Append-only storage for pipeline audit entries and security flags.
    """

    @abstractmethod
    async def save_entry(self, entry: AuditEntry) -> str:
        """Append an audit entry."""
        pass

    @abstractmethod
    async def list_entries(
        self,
        owner_id: str,
        *,
        action: str | None = None,
        limit: int = 100,
    ) -> list[AuditEntry]:
        """List entries for an owner, most recent first."""
        pass

    @abstractmethod
    async def save_security_flag(self, flag: SecurityFlagRecord) -> str:
        """Persist a security flag."""
        pass

    @abstractmethod
    async def list_security_flags(self, owner_id: str, *, limit: int = 100) -> list[SecurityFlagRecord]:
        """List security flags for an owner, most recent first."""
        pass
