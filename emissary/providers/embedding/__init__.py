"""Embedding providers."""

from emissary.providers.embedding.base import EmbeddingProvider, EmbeddingResponse
from emissary.providers.embedding.openai import OpenAIEmbeddingProvider

__all__ = ["EmbeddingProvider", "EmbeddingResponse", "OpenAIEmbeddingProvider"]
