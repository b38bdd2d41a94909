"""Audit domain models."""

from emissary.audit.models.entry import AuditEntry, AuditStatus, CallerType
from emissary.audit.models.security_flag import SecurityFlagRecord

__all__ = ["AuditEntry", "AuditStatus", "CallerType", "SecurityFlagRecord"]
