"""Agent model and its nested configuration."""

from pydantic import BaseModel, Field

from emissary.utils.ids import new_id


class LLMConfig(BaseModel):
    """Which provider family and model an agent talks to."""

    provider: str = Field(..., description="Provider family, e.g. openai, anthropic")
    model: str = Field(..., description="Model identifier at the provider")


class A2AConfig(BaseModel):
    """Agent-to-agent messaging settings."""

    enabled: bool = Field(default=False, description="Accept and send A2A messages")
    allow_public_agents: bool = Field(
        default=False, description="Accept messages from agents of other accounts"
    )
    auto_respond: bool = Field(default=True, description="Process inbound messages immediately")
    max_auto_reply_hops: int | None = Field(
        default=None, ge=0, description="Hop ceiling; falls back to the global default"
    )


class PublicConnect(BaseModel):
    """Discovery endpoints shown on the agent's public page."""

    show_api: bool = False
    show_mcp: bool = False
    show_skill_file: bool = False

    @property
    def any_visible(self) -> bool:
        return self.show_api or self.show_mcp or self.show_skill_file


class Personality(BaseModel):
    custom_instructions: str | None = None


class Agent(BaseModel):
    """A configured persona owned by an account."""

    id: str = Field(default_factory=new_id, description="Unique identifier")
    owner_id: str = Field(..., description="Owning account")
    name: str = Field(..., description="Display name")
    slug: str = Field(..., description="Owner-unique handle used for delegation")
    email: str | None = Field(default=None, description="Inbound email address")
    is_default: bool = Field(default=False)
    is_public: bool = Field(default=False)
    llm_config: LLMConfig | None = Field(
        default=None, description="Overrides the owner's default model"
    )
    personality: Personality = Field(default_factory=Personality)
    a2a_config: A2AConfig = Field(default_factory=A2AConfig)
    public_connect: PublicConnect = Field(default_factory=PublicConnect)
