"""A2A delegation errors."""


class DelegationError(Exception):
    """Base exception for agent-to-agent messaging."""

    pass


class AgentNotFoundError(DelegationError):
    """Sender, recipient or delegation target does not exist."""

    pass


class DelegationNotAllowedError(DelegationError):
    """Eligibility checks rejected the message."""

    pass


class DelegationLoopError(DelegationError):
    """Hop ceiling exceeded. Terminal: never isolated, always propagated."""

    def __init__(self, hop_count: int, max_hops: int) -> None:
        self.hop_count = hop_count
        self.max_hops = max_hops
        super().__init__(
            f"A2A loop protection triggered: hop {hop_count} exceeds limit {max_hops}"
        )


class ThreadNotFoundError(DelegationError):
    """No messages exist for the requested thread."""

    pass
