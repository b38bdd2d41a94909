"""OpenAI-compatible embedding provider.

Serves both OpenAI and OpenRouter credentials, which expose the same
``/embeddings`` endpoint under different base URLs.
"""

from typing import Any

from openai import AsyncOpenAI, OpenAIError

from emissary.observability.logging import get_logger
from emissary.providers.embedding.base import EmbeddingProvider, EmbeddingResponse
from emissary.providers.errors import ProviderError

logger = get_logger(__name__)


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """Embedding provider using the OpenAI SDK."""

    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-3-small",
        base_url: str | None = None,
        timeout: float = 60.0,
    ):
        """Initialize OpenAI embedding provider.

        Args:
            api_key: Decrypted API key for the credential family
            model: Model identifier, e.g. text-embedding-3-small
            base_url: API root; defaults to the OpenAI endpoint
            timeout: Request timeout in seconds
        """
        if not api_key:
            raise ValueError("An API key is required for embeddings")
        self._model = model
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout)

    @property
    def provider_name(self) -> str:
        return "openai"

    async def embed(self, texts: list[str], **kwargs: Any) -> EmbeddingResponse:
        """Generate embeddings for ``texts``.

        Raises:
            ProviderError: If the API call fails
        """
        logger.debug("openai_embed_request", model=self._model, num_texts=len(texts))
        try:
            response = await self._client.embeddings.create(
                input=texts, model=self._model, **kwargs
            )
        except OpenAIError as e:
            logger.warning("openai_embed_error", model=self._model, error=str(e))
            raise ProviderError(f"Embedding API error: {e}") from e

        usage = None
        if response.usage:
            usage = {
                "total_tokens": response.usage.total_tokens,
                "prompt_tokens": response.usage.prompt_tokens,
            }

        return EmbeddingResponse(
            embeddings=[item.embedding for item in response.data],
            model=self._model,
            usage=usage,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.close()
