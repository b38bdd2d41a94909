"""Background job settings."""

from pydantic import BaseModel, Field, SecretStr


class HatchetConfig(BaseModel):
    """Connection and schedule for the Hatchet-driven webhook retry poller.

    Disabled by default; the API process then only enqueues failed webhooks.
    """

    enabled: bool = False
    server_url: str = Field(default="http://localhost:7077", description="Hatchet engine URL")
    api_key: SecretStr | None = Field(
        default=None, description="Engine token, usually from EMISSARY_JOBS__HATCHET__API_KEY"
    )
    cron_retry_webhooks: str = Field(
        default="* * * * *", description="How often due retry records are drained"
    )


class JobsConfig(BaseModel):
    hatchet: HatchetConfig = Field(default_factory=HatchetConfig)
