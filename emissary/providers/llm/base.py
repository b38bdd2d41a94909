"""Chat completion data models and error types.

This module provides the core types used by the provider gateway:
- ChatMessage: canonical input message
- CompletionResult: normalized output
- Error types for configuration and transient failures
"""

from typing import Literal

from pydantic import BaseModel, Field

from emissary.providers.errors import (
    AuthenticationError,
    ConfigurationError,
    InvalidRequestError,
    ModelError,
    ProviderError,
    RateLimitError,
    TransientProviderError,
    error_for_status,
)

ChatRole = Literal["system", "user", "assistant"]


class ChatMessage(BaseModel):
    """A message in a conversation."""

    role: ChatRole = Field(..., description="Role: system, user, or assistant")
    content: str = Field(..., description="Message content")


class CompletionResult(BaseModel):
    """Normalized response from any provider family."""

    content: str = Field(..., description="Visible generated text")
    tokens_used: int = Field(default=0, ge=0, description="Prompt plus completion tokens")


__all__ = [
    "AuthenticationError",
    "ChatMessage",
    "ChatRole",
    "CompletionResult",
    "ConfigurationError",
    "InvalidRequestError",
    "ModelError",
    "ProviderError",
    "RateLimitError",
    "TransientProviderError",
    "error_for_status",
]
