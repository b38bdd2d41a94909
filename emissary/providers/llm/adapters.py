"""Per-family chat completion adapters over httpx.

Each adapter translates the canonical message list into one provider's
request shape and normalizes the reply into a :class:`CompletionResult`.
Adapters return an empty ``content`` when the provider produced no visible
text; the gateway substitutes the fallback reply.
"""

from abc import ABC, abstractmethod
from typing import Any

import httpx

from emissary.observability.logging import get_logger
from emissary.providers.llm.base import (
    ChatMessage,
    CompletionResult,
    ProviderError,
    TransientProviderError,
    error_for_status,
)

logger = get_logger(__name__)

OPENAI_BASE_URL = "https://api.openai.com/v1"
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
ANTHROPIC_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"
GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
MISTRAL_BASE_URL = "https://api.mistral.ai/v1"
DEEPSEEK_BASE_URL = "https://api.deepseek.com/v1"
MINIMAX_BASE_URL = "https://api.minimax.chat/v1"
KIMI_BASE_URL = "https://api.moonshot.ai/v1"

REASONING_PREFIXES = ("o1", "o3", "o4", "gpt-5")
REASONING_MARKERS = ("o1-", "o3-", "o4-")


def is_reasoning_model(model: str) -> bool:
    """Whether ``model`` spends hidden reasoning tokens before visible output."""
    lower = model.lower()
    return lower.startswith(REASONING_PREFIXES) or any(m in lower for m in REASONING_MARKERS)


def _messages_payload(messages: list[ChatMessage]) -> list[dict[str, str]]:
    return [{"role": m.role, "content": m.content} for m in messages]


def _part_text(part: Any) -> str:
    if isinstance(part, str):
        return part
    if isinstance(part, dict) and isinstance(part.get("text"), str):
        return part["text"]
    return ""


def _split_system(messages: list[ChatMessage]) -> tuple[str | None, list[ChatMessage]]:
    system = next((m.content for m in messages if m.role == "system"), None)
    return system, [m for m in messages if m.role != "system"]


async def _post_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    label: str,
    headers: dict[str, str],
    payload: dict[str, Any],
    params: dict[str, str] | None = None,
) -> dict[str, Any]:
    try:
        response = await client.post(url, headers=headers, json=payload, params=params)
    except httpx.TimeoutException as e:
        raise TransientProviderError(f"{label} API timeout: {e}") from e
    except httpx.TransportError as e:
        raise TransientProviderError(f"{label} API connection error: {e}") from e

    if not response.is_success:
        raise error_for_status(response.status_code, f"{label} API error: {response.text}")

    try:
        data = response.json()
    except ValueError as e:
        raise ProviderError(f"{label} API returned invalid JSON") from e
    if not isinstance(data, dict):
        raise ProviderError(f"{label} API returned a non-object body")
    return data


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _count(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


class ChatAdapter(ABC):
    """Abstract adapter for one provider family."""

    label: str = "Provider"

    @abstractmethod
    async def complete(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        model: str,
        messages: list[ChatMessage],
        base_url: str | None = None,
    ) -> CompletionResult:
        """Run one chat completion."""
        pass


class OpenAICompatibleAdapter(ChatAdapter):
    """Adapter for the OpenAI chat completions shape.

    Used for OpenAI itself and for the many providers that mirror its API.
    With ``shape_variants`` enabled, the request is retried with
    progressively simpler parameter sets until one is accepted, since
    providers disagree on which token-budget parameter they support.
    """

    def __init__(
        self,
        label: str = "OpenAI",
        default_base_url: str = OPENAI_BASE_URL,
        *,
        shape_variants: bool = True,
        honor_base_url: bool = True,
        extra_headers: dict[str, str] | None = None,
        max_tokens: int = 2048,
        reasoning_max_tokens: int = 16384,
        reasoning_effort: str = "low",
    ) -> None:
        self.label = label
        self._default_base_url = default_base_url
        self._shape_variants = shape_variants
        self._honor_base_url = honor_base_url
        self._extra_headers = extra_headers or {}
        self._max_tokens = max_tokens
        self._reasoning_max_tokens = reasoning_max_tokens
        self._reasoning_effort = reasoning_effort

    def request_variants(self, model: str, messages: list[ChatMessage]) -> list[dict[str, Any]]:
        """Request bodies to try, most specific first."""
        base: dict[str, Any] = {"model": model, "messages": _messages_payload(messages)}
        if not self._shape_variants:
            return [{**base, "max_tokens": self._max_tokens}]

        if is_reasoning_model(model):
            budget = self._reasoning_max_tokens
            return [
                {**base, "max_completion_tokens": budget, "reasoning_effort": self._reasoning_effort},
                {**base, "max_completion_tokens": budget},
                base,
            ]
        return [
            {**base, "max_completion_tokens": self._max_tokens},
            {**base, "max_tokens": self._max_tokens},
            base,
        ]

    async def complete(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        model: str,
        messages: list[ChatMessage],
        base_url: str | None = None,
    ) -> CompletionResult:
        root = (base_url if base_url and self._honor_base_url else self._default_base_url)
        endpoint = f"{root.rstrip('/')}/chat/completions"
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            **self._extra_headers,
        }

        last_error: ProviderError | None = None
        data: dict[str, Any] | None = None
        for index, variant in enumerate(self.request_variants(model, messages)):
            try:
                data = await _post_json(
                    client, endpoint, label=self.label, headers=headers, payload=variant
                )
                break
            except TransientProviderError:
                raise
            except ProviderError as e:
                last_error = e
                logger.debug(
                    "provider_request_variant_rejected",
                    provider=self.label,
                    model=model,
                    variant=index,
                    status_code=e.status_code,
                )

        if data is None:
            raise last_error or ProviderError(f"{self.label} API error: unknown error")

        return self._normalize(data, model)

    def _normalize(self, data: dict[str, Any], model: str) -> CompletionResult:
        usage = _mapping(data.get("usage"))
        tokens = _count(usage.get("total_tokens"))
        try:
            choice = data["choices"][0]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderError(f"{self.label} API returned no choices") from e
        choice = _mapping(choice)
        message = _mapping(choice.get("message"))

        refusal = message.get("refusal")
        if isinstance(refusal, str) and refusal.strip():
            logger.warning("provider_refusal", provider=self.label, model=model, refusal=refusal)
            return CompletionResult(
                content=f"I was unable to process that request: {refusal}",
                tokens_used=tokens,
            )

        raw = message.get("content")
        if isinstance(raw, str):
            content = raw
        elif isinstance(raw, list):
            content = "".join(_part_text(part) for part in raw)
        else:
            content = ""

        if not content.strip():
            details = _mapping(usage.get("completion_tokens_details"))
            logger.warning(
                "provider_empty_content",
                provider=self.label,
                model=model,
                completion_tokens=usage.get("completion_tokens"),
                reasoning_tokens=details.get("reasoning_tokens"),
                finish_reason=choice.get("finish_reason"),
            )
            return CompletionResult(content="", tokens_used=tokens)

        return CompletionResult(content=content, tokens_used=tokens)


class AnthropicAdapter(ChatAdapter):
    """Anthropic Messages API. The system prompt travels outside the turn list."""

    label = "Anthropic"

    def __init__(self, max_tokens: int = 2048) -> None:
        self._max_tokens = max_tokens

    async def complete(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        model: str,
        messages: list[ChatMessage],
        base_url: str | None = None,  # noqa: ARG002
    ) -> CompletionResult:
        system, turns = _split_system(messages)
        payload: dict[str, Any] = {
            "model": model,
            "max_tokens": self._max_tokens,
            "messages": _messages_payload(turns),
        }
        if system:
            payload["system"] = system

        data = await _post_json(
            client,
            ANTHROPIC_URL,
            label=self.label,
            headers={
                "x-api-key": api_key,
                "anthropic-version": ANTHROPIC_VERSION,
                "Content-Type": "application/json",
            },
            payload=payload,
        )

        blocks = data.get("content")
        content = "".join(
            _part_text(block)
            for block in (blocks if isinstance(blocks, list) else [])
            if isinstance(block, dict) and block.get("type", "text") == "text"
        )
        usage = _mapping(data.get("usage"))
        tokens = _count(usage.get("input_tokens")) + _count(usage.get("output_tokens"))
        return CompletionResult(content=content, tokens_used=tokens)


class GeminiAdapter(ChatAdapter):
    """Google Gemini generateContent API."""

    label = "Gemini"

    def __init__(self, max_tokens: int = 2048) -> None:
        self._max_tokens = max_tokens

    async def complete(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        model: str,
        messages: list[ChatMessage],
        base_url: str | None = None,  # noqa: ARG002
    ) -> CompletionResult:
        system, turns = _split_system(messages)
        payload: dict[str, Any] = {
            "contents": [
                {
                    "role": "model" if m.role == "assistant" else "user",
                    "parts": [{"text": m.content}],
                }
                for m in turns
            ],
            "generationConfig": {"maxOutputTokens": self._max_tokens},
        }
        if system:
            payload["systemInstruction"] = {"parts": [{"text": system}]}

        data = await _post_json(
            client,
            GEMINI_URL.format(model=model),
            label=self.label,
            headers={"Content-Type": "application/json"},
            payload=payload,
            params={"key": api_key},
        )

        try:
            parts = data["candidates"][0]["content"].get("parts") or []
        except (KeyError, IndexError, TypeError, AttributeError):
            parts = []
        if not isinstance(parts, list):
            parts = []
        content = "".join(_part_text(p) for p in parts if isinstance(p, dict))
        usage = _mapping(data.get("usageMetadata"))
        tokens = _count(usage.get("promptTokenCount")) + _count(usage.get("candidatesTokenCount"))
        return CompletionResult(content=content, tokens_used=tokens)


def build_default_adapters(
    *,
    max_tokens: int = 2048,
    reasoning_max_tokens: int = 16384,
    reasoning_effort: str = "low",
    app_referer: str = "https://emissary.local",
    app_title: str = "Emissary Agent Runtime",
) -> dict[str, ChatAdapter]:
    """Adapter registry keyed by provider family name."""

    def openai_like(label: str, base_url: str) -> OpenAICompatibleAdapter:
        return OpenAICompatibleAdapter(
            label,
            base_url,
            max_tokens=max_tokens,
            reasoning_max_tokens=reasoning_max_tokens,
            reasoning_effort=reasoning_effort,
        )

    return {
        "openai": openai_like("OpenAI", OPENAI_BASE_URL),
        "deepseek": openai_like("DeepSeek", DEEPSEEK_BASE_URL),
        "minimax": openai_like("MiniMax", MINIMAX_BASE_URL),
        "kimi": openai_like("Kimi", KIMI_BASE_URL),
        "openrouter": OpenAICompatibleAdapter(
            "OpenRouter",
            OPENROUTER_BASE_URL,
            shape_variants=False,
            honor_base_url=False,
            extra_headers={"HTTP-Referer": app_referer, "X-Title": app_title},
            max_tokens=max_tokens,
        ),
        "mistral": OpenAICompatibleAdapter(
            "Mistral",
            MISTRAL_BASE_URL,
            shape_variants=False,
            honor_base_url=False,
            max_tokens=max_tokens,
        ),
        "anthropic": AnthropicAdapter(max_tokens=max_tokens),
        "google": GeminiAdapter(max_tokens=max_tokens),
    }
