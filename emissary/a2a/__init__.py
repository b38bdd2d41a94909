"""Agent-to-agent messaging with hop-count loop protection."""

from emissary.a2a.controller import A2AController
from emissary.a2a.errors import (
    AgentNotFoundError,
    DelegationError,
    DelegationLoopError,
    DelegationNotAllowedError,
    ThreadNotFoundError,
)
from emissary.a2a.models import SendResult, ThreadDigest, ThreadMessage, ThreadSummary, thread_id_for

__all__ = [
    "A2AController",
    "AgentNotFoundError",
    "DelegationError",
    "DelegationLoopError",
    "DelegationNotAllowedError",
    "SendResult",
    "ThreadDigest",
    "ThreadMessage",
    "ThreadNotFoundError",
    "ThreadSummary",
    "thread_id_for",
]
