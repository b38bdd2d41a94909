"""Outbound email collaborator."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class OutboundEmail:
    from_address: str
    to_address: str
    subject: str
    body: str
    thread_id: str | None = None
    in_reply_to: str | None = None


class OutboundMailer(ABC):
    @abstractmethod
    async def send(self, email: OutboundEmail) -> None:
        """Hand a reply to the mail provider."""
        pass


class InMemoryOutboundMailer(OutboundMailer):
    def __init__(self) -> None:
        self.sent: list[OutboundEmail] = []

    async def send(self, email: OutboundEmail) -> None:
        self.sent.append(email)
