"""Observability configuration."""

from typing import Literal

from pydantic import BaseModel, Field


class ObservabilityConfig(BaseModel):
    """Logging and metrics configuration."""

    log_format: Literal["json", "console"] = Field(
        default="json", description="Log renderer: json for production, console for dev"
    )
    redact_pii: bool = Field(default=True, description="Redact PII from log events")
    metrics_enabled: bool = Field(default=True, description="Expose /metrics")
