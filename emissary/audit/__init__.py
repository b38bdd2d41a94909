"""Audit log and security-flag records."""

from emissary.audit.models import AuditEntry, SecurityFlagRecord
from emissary.audit.store import AuditStore

__all__ = ["AuditEntry", "AuditStore", "SecurityFlagRecord"]
