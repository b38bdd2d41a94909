"""Model provider configuration models."""

from pydantic import BaseModel, Field


class EmbeddingCredentialConfig(BaseModel):
    """Embedding model per credential family."""

    openai_model: str = Field(default="text-embedding-3-small")
    openrouter_model: str = Field(default="openai/text-embedding-3-small")
    openai_base_url: str = Field(default="https://api.openai.com/v1")
    openrouter_base_url: str = Field(default="https://openrouter.ai/api/v1")


class ProvidersConfig(BaseModel):
    """Provider gateway configuration."""

    request_timeout: int = Field(default=60, gt=0, description="HTTP timeout in seconds")
    default_max_tokens: int = Field(
        default=2048, gt=0, description="Output budget for ordinary models"
    )
    reasoning_max_tokens: int = Field(
        default=16384, gt=0, description="Output budget for reasoning models"
    )
    reasoning_effort: str = Field(
        default="low", description="Effort hint sent on the first reasoning request variant"
    )
    app_referer: str = Field(
        default="https://emissary.local", description="HTTP-Referer sent to OpenRouter"
    )
    app_title: str = Field(
        default="Emissary Agent Runtime", description="X-Title sent to OpenRouter"
    )
    embedding: EmbeddingCredentialConfig = Field(default_factory=EmbeddingCredentialConfig)
