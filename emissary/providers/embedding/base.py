"""Embedding provider interface."""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field


class EmbeddingResponse(BaseModel):
    """Response from an embedding provider."""

    embeddings: list[list[float]] = Field(..., description="Embedding vectors")
    model: str = Field(..., description="Model used")
    usage: dict[str, int] | None = Field(default=None, description="Token usage stats")


class EmbeddingProvider(ABC):
    """Abstract interface for text embeddings."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @abstractmethod
    async def embed(self, texts: list[str], **kwargs: Any) -> EmbeddingResponse:
        """Embed a batch of texts."""
        pass

    async def close(self) -> None:
        """Release network resources."""
        return None

    async def __aenter__(self) -> "EmbeddingProvider":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
