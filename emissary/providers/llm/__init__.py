"""Chat completion providers behind a single gateway."""

from emissary.providers.llm.base import (
    AuthenticationError,
    ChatMessage,
    CompletionResult,
    ConfigurationError,
    InvalidRequestError,
    ModelError,
    ProviderError,
    RateLimitError,
    TransientProviderError,
)
from emissary.providers.llm.diagnostics import (
    GENERIC_ERROR_RESPONSE,
    build_config_diagnostic,
    describe_provider_failure,
)
from emissary.providers.llm.gateway import EMPTY_RESPONSE_FALLBACK, ProviderGateway
from emissary.providers.llm.mock import MockProviderGateway

__all__ = [
    "EMPTY_RESPONSE_FALLBACK",
    "GENERIC_ERROR_RESPONSE",
    "AuthenticationError",
    "ChatMessage",
    "CompletionResult",
    "ConfigurationError",
    "InvalidRequestError",
    "MockProviderGateway",
    "ModelError",
    "ProviderError",
    "ProviderGateway",
    "RateLimitError",
    "TransientProviderError",
    "build_config_diagnostic",
    "describe_provider_failure",
]
