"""Skill and capability models."""

from pydantic import BaseModel, Field

from emissary.utils.ids import new_id


class Capability(BaseModel):
    name: str = Field(..., max_length=64)
    description: str = Field(..., max_length=320)


class Skill(BaseModel):
    """A published bundle of capabilities, optionally bound to one agent."""

    id: str = Field(default_factory=new_id)
    owner_id: str
    agent_id: str | None = None
    name: str = Field(..., max_length=80)
    bio: str = Field(default="", max_length=1200)
    capabilities: list[Capability] = Field(default_factory=list, max_length=25)
    is_published: bool = False
    is_active: bool | None = Field(default=None, description="None counts as active")

    @property
    def active(self) -> bool:
        return self.is_active is not False
