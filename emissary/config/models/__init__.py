"""Configuration models for all Emissary subsystems."""

from emissary.config.models.a2a import A2ASettings
from emissary.config.models.api import APIConfig
from emissary.config.models.jobs import HatchetConfig, JobsConfig
from emissary.config.models.observability import ObservabilityConfig
from emissary.config.models.pipeline import PipelineConfig
from emissary.config.models.providers import EmbeddingCredentialConfig, ProvidersConfig
from emissary.config.models.webhooks import WebhookRetryConfig

__all__ = [
    "A2ASettings",
    "APIConfig",
    "EmbeddingCredentialConfig",
    "HatchetConfig",
    "JobsConfig",
    "ObservabilityConfig",
    "PipelineConfig",
    "ProvidersConfig",
    "WebhookRetryConfig",
]
