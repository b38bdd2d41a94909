"""Agent directory: owners, agents, skills and credentials."""

from emissary.agents.models import (
    A2AConfig,
    Agent,
    Capability,
    Credential,
    LLMConfig,
    Owner,
    PrivacySettings,
    PublicConnect,
    Skill,
)
from emissary.agents.store import AgentDirectory, CredentialStore

__all__ = [
    "A2AConfig",
    "Agent",
    "AgentDirectory",
    "Capability",
    "Credential",
    "CredentialStore",
    "LLMConfig",
    "Owner",
    "PrivacySettings",
    "PublicConnect",
    "Skill",
]
