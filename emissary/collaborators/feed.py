"""Activity feed collaborator."""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

from emissary.utils.ids import new_id


class FeedItem(BaseModel):
    id: str = Field(default_factory=new_id)
    owner_id: str
    item_type: str
    title: str
    content: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    is_public: bool = False


class FeedPublisher(ABC):
    @abstractmethod
    async def publish(self, item: FeedItem) -> str:
        """Publish a feed item and return its ID."""
        pass


class InMemoryFeedPublisher(FeedPublisher):
    def __init__(self) -> None:
        self.items: list[FeedItem] = []

    async def publish(self, item: FeedItem) -> str:
        self.items.append(item)
        return item.id
