"""Scripted provider gateway for testing."""

from typing import Any

from emissary.providers.llm.base import ChatMessage, CompletionResult, ProviderError


class MockProviderGateway:
    """Stand-in for :class:`ProviderGateway` that returns scripted replies.

    Replies are consumed in order; the last one repeats. A reply may be a
    ``ProviderError`` instance, which is raised instead.
    """

    def __init__(
        self,
        replies: list[str | ProviderError] | None = None,
        *,
        tokens_used: int = 42,
        embedding: list[float] | None = None,
    ) -> None:
        self._replies = list(replies or ["Mock response"])
        self._tokens_used = tokens_used
        self._embedding = embedding
        self._call_history: list[dict[str, Any]] = []
        self._embed_history: list[str] = []

    @property
    def call_history(self) -> list[dict[str, Any]]:
        """Return history of calls for testing assertions."""
        return self._call_history

    @property
    def embed_history(self) -> list[str]:
        return self._embed_history

    def queue(self, *replies: str | ProviderError) -> None:
        self._replies.extend(replies)

    async def invoke(
        self,
        provider: str,
        api_key: str,
        model: str,
        messages: list[ChatMessage],
        base_url: str | None = None,
    ) -> CompletionResult:
        self._call_history.append({
            "provider": provider,
            "api_key": api_key,
            "model": model,
            "messages": messages,
            "base_url": base_url,
        })
        reply = self._replies.pop(0) if len(self._replies) > 1 else self._replies[0]
        if isinstance(reply, ProviderError):
            raise reply
        return CompletionResult(content=reply, tokens_used=self._tokens_used)

    async def embed(
        self,
        api_key: str,  # noqa: ARG002
        model: str,  # noqa: ARG002
        text: str,
        base_url: str | None = None,  # noqa: ARG002
    ) -> list[float]:
        self._embed_history.append(text)
        if self._embedding is None:
            raise ProviderError("Embedding API error: no embedding scripted")
        return list(self._embedding)

    async def close(self) -> None:
        pass
