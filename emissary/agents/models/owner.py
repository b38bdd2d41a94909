"""Owner (account) model."""

from pydantic import BaseModel, Field

from emissary.agents.models.agent import LLMConfig
from emissary.utils.ids import new_id


class PrivacySettings(BaseModel):
    """Account-level visibility switches.

    Unset visibility flags count as visible; agent-to-agent access must be
    opted into explicitly.
    """

    profile_visible: bool | None = None
    show_endpoints: bool | None = None
    allow_agent_to_agent: bool = False

    @property
    def endpoints_reachable(self) -> bool:
        return (
            self.profile_visible is not False
            and self.show_endpoints is not False
            and self.allow_agent_to_agent
        )


class Owner(BaseModel):
    """An account that owns agents, memories and knowledge."""

    id: str = Field(default_factory=new_id)
    name: str | None = Field(default=None, description="Display name")
    username: str | None = Field(default=None, description="Public handle")
    llm_config: LLMConfig | None = Field(default=None, description="Default model")
    privacy: PrivacySettings = Field(default_factory=PrivacySettings)
