"""AuditStore implementations."""

from emissary.audit.stores.inmemory import InMemoryAuditStore

__all__ = ["InMemoryAuditStore"]
