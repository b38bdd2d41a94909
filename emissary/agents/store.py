"""Agent directory and credential interfaces."""

from abc import ABC, abstractmethod

from emissary.agents.models import Agent, Credential, Owner, Skill


class AgentDirectory(ABC):
    """Abstract lookup over owners, agents and skills."""

    @abstractmethod
    async def get_owner(self, owner_id: str) -> Owner | None:
        """Get an owner by ID."""
        pass

    @abstractmethod
    async def find_owner_by_username(self, username: str) -> Owner | None:
        """Get an owner by public username (case-insensitive)."""
        pass

    @abstractmethod
    async def get_agent(self, agent_id: str) -> Agent | None:
        """Get an agent by ID."""
        pass

    @abstractmethod
    async def get_agent_by_slug(self, owner_id: str, slug: str) -> Agent | None:
        """Get one of the owner's agents by slug."""
        pass

    @abstractmethod
    async def get_default_agent(self, owner_id: str) -> Agent | None:
        """Get the owner's default agent, or their first agent."""
        pass

    @abstractmethod
    async def find_agent_by_email(self, address: str) -> Agent | None:
        """Get the agent that receives mail at ``address``."""
        pass

    @abstractmethod
    async def list_skills(
        self, owner_id: str, *, agent_id: str | None = None, limit: int = 50
    ) -> list[Skill]:
        """List skills for an owner, optionally only those bound to one agent."""
        pass

    @abstractmethod
    async def get_skill(self, owner_id: str, skill_id: str) -> Skill | None:
        """Get a skill by ID."""
        pass

    @abstractmethod
    async def save_skill(self, skill: Skill) -> str:
        """Create or replace a skill."""
        pass


class CredentialStore(ABC):
    """Credential collaborator. Decryption happens behind this interface."""

    @abstractmethod
    async def get_decrypted_api_key(self, owner_id: str, service: str) -> Credential | None:
        """Return the owner's active credential for ``service``, if any."""
        pass
