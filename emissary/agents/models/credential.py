"""Decrypted provider credential."""

from typing import Any

from pydantic import BaseModel, Field, SecretStr


class Credential(BaseModel):
    """A decrypted API key handed out by the credential collaborator."""

    service: str = Field(..., description="Provider family the key is for")
    api_key: SecretStr = Field(..., description="Decrypted key")
    config: dict[str, Any] = Field(default_factory=dict, description="e.g. base_url")
    is_active: bool = True

    @property
    def base_url(self) -> str | None:
        value = self.config.get("base_url")
        return value if isinstance(value, str) and value else None
