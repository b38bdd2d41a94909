"""Memory domain models."""

from emissary.memory.models.record import (
    MemoryDirection,
    MemoryKind,
    MemoryRecord,
    MemoryRole,
)

__all__ = ["MemoryDirection", "MemoryKind", "MemoryRecord", "MemoryRole"]
