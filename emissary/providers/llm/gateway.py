"""Provider gateway: one entry point over every chat provider family.

The gateway owns the shared HTTP client, picks the adapter for a provider
family (unknown families fall back to the OpenAI-compatible adapter),
substitutes a fixed reply for empty completions, and records metrics.
It does not retry beyond the adapters' request variants; callers own
end-to-end timeouts.
"""

from typing import Any

import httpx

from emissary.config.models.providers import ProvidersConfig
from emissary.observability.logging import get_logger
from emissary.observability.metrics import LLM_TOKENS, PROVIDER_CALLS
from emissary.providers.embedding.base import EmbeddingProvider
from emissary.providers.embedding.openai import OpenAIEmbeddingProvider
from emissary.providers.llm.adapters import ChatAdapter, build_default_adapters
from emissary.providers.llm.base import (
    ChatMessage,
    CompletionResult,
    ProviderError,
    TransientProviderError,
)
from emissary.providers.llm.diagnostics import is_configuration_failure

logger = get_logger(__name__)

EMPTY_RESPONSE_FALLBACK = "I was unable to generate a response for this request."
DEFAULT_PROVIDER = "openai"


class ProviderGateway:
    """Uniform chat completion and embedding calls across providers.

    Example:
        async with ProviderGateway() as gateway:
            result = await gateway.invoke("anthropic", key, "claude-3-haiku", messages)
    """

    def __init__(
        self,
        config: ProvidersConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        adapters: dict[str, ChatAdapter] | None = None,
        embedding_factory: Any = OpenAIEmbeddingProvider,
    ) -> None:
        self._config = config or ProvidersConfig()
        self._client = client or httpx.AsyncClient(timeout=self._config.request_timeout)
        self._adapters = adapters or build_default_adapters(
            max_tokens=self._config.default_max_tokens,
            reasoning_max_tokens=self._config.reasoning_max_tokens,
            reasoning_effort=self._config.reasoning_effort,
            app_referer=self._config.app_referer,
            app_title=self._config.app_title,
        )
        self._embedding_factory = embedding_factory

    def adapter_for(self, provider: str) -> ChatAdapter:
        return self._adapters.get(provider) or self._adapters[DEFAULT_PROVIDER]

    async def invoke(
        self,
        provider: str,
        api_key: str,
        model: str,
        messages: list[ChatMessage],
        base_url: str | None = None,
    ) -> CompletionResult:
        """Run a chat completion and normalize the result.

        Raises:
            ProviderError: Classified provider failure; see
                :mod:`emissary.providers.llm.diagnostics` for user-facing text
        """
        adapter = self.adapter_for(provider)
        try:
            result = await adapter.complete(self._client, api_key, model, messages, base_url)
        except ProviderError as e:
            status = "config_error" if is_configuration_failure(e) else "error"
            PROVIDER_CALLS.labels(provider=provider, status=status).inc()
            logger.warning(
                "provider_call_failed",
                provider=provider,
                model=model,
                status_code=e.status_code,
                error=str(e)[:500],
            )
            raise
        except httpx.HTTPError as e:
            PROVIDER_CALLS.labels(provider=provider, status="error").inc()
            logger.warning("provider_call_failed", provider=provider, model=model, error=str(e))
            raise TransientProviderError(f"{provider} request failed: {e}") from e

        PROVIDER_CALLS.labels(provider=provider, status="success").inc()
        LLM_TOKENS.labels(provider=provider).inc(result.tokens_used)

        if not result.content.strip():
            return CompletionResult(content=EMPTY_RESPONSE_FALLBACK, tokens_used=result.tokens_used)
        return result

    async def embed(
        self,
        api_key: str,
        model: str,
        text: str,
        base_url: str | None = None,
    ) -> list[float]:
        """Embed one text through an OpenAI-compatible embeddings endpoint."""
        provider: EmbeddingProvider = self._embedding_factory(
            api_key=api_key,
            model=model,
            base_url=base_url,
            timeout=float(self._config.request_timeout),
        )
        async with provider:
            response = await provider.embed([text])
        if not response.embeddings or not response.embeddings[0]:
            raise ProviderError("Embedding API returned invalid vector")
        return response.embeddings[0]

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "ProviderGateway":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
