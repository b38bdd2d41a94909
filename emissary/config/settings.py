"""Root settings model.

Precedence, highest first: constructor arguments, ``EMISSARY_*`` environment
variables (``__`` separates nested sections), the loaded TOML layers, then
model defaults.
"""

from typing import Any, Literal

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from emissary.config.models.a2a import A2ASettings
from emissary.config.models.api import APIConfig
from emissary.config.models.jobs import JobsConfig
from emissary.config.models.observability import ObservabilityConfig
from emissary.config.models.pipeline import PipelineConfig
from emissary.config.models.providers import ProvidersConfig
from emissary.config.models.webhooks import WebhookRetryConfig

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_toml_config: dict[str, Any] = {}


def set_toml_config(config: dict[str, Any]) -> None:
    """Install the merged TOML layers read by every later ``Settings()``."""
    global _toml_config
    _toml_config = dict(config)


class LoadedTomlSource(PydanticBaseSettingsSource):
    """Exposes the installed TOML dict as the lowest-priority settings source."""

    def get_field_value(
        self, field: Any, field_name: str  # noqa: ARG002
    ) -> tuple[Any, str, bool]:
        value = _toml_config.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        return {key: value for key, value in _toml_config.items() if value is not None}


class Settings(BaseSettings):
    """Everything the runtime reads at startup."""

    model_config = SettingsConfigDict(
        env_prefix="EMISSARY_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="emissary", description="Name bound into log events")
    debug: bool = False
    log_level: LogLevel = "INFO"

    api: APIConfig = Field(default_factory=APIConfig)
    providers: ProvidersConfig = Field(
        default_factory=ProvidersConfig,
        description="Chat and embedding provider endpoints, timeouts and token budgets",
    )
    pipeline: PipelineConfig = Field(
        default_factory=PipelineConfig,
        description="Recall limits and fixed reply texts",
    )
    a2a: A2ASettings = Field(
        default_factory=A2ASettings,
        description="Hop ceiling and thread summary shape",
    )
    webhooks: WebhookRetryConfig = Field(
        default_factory=WebhookRetryConfig,
        description="Backoff and attempt bounds for failed webhook ingestions",
    )
    jobs: JobsConfig = Field(default_factory=JobsConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, env_settings, LoadedTomlSource(settings_cls))
