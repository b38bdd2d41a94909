"""Agent directory models."""

from emissary.agents.models.agent import (
    A2AConfig,
    Agent,
    LLMConfig,
    Personality,
    PublicConnect,
)
from emissary.agents.models.credential import Credential
from emissary.agents.models.owner import Owner, PrivacySettings
from emissary.agents.models.skill import Capability, Skill

__all__ = [
    "A2AConfig",
    "Agent",
    "Capability",
    "Credential",
    "LLMConfig",
    "Owner",
    "Personality",
    "PrivacySettings",
    "PublicConnect",
    "Skill",
]
