"""In-memory agent directory and credential store."""

from emissary.agents.models import Agent, Credential, Owner, Skill
from emissary.agents.store import AgentDirectory, CredentialStore


class InMemoryAgentDirectory(AgentDirectory):
    """In-memory implementation of AgentDirectory for testing and development."""

    def __init__(self) -> None:
        self._owners: dict[str, Owner] = {}
        self._agents: dict[str, Agent] = {}
        self._skills: dict[str, Skill] = {}

    def add_owner(self, owner: Owner) -> Owner:
        self._owners[owner.id] = owner
        return owner

    def add_agent(self, agent: Agent) -> Agent:
        self._agents[agent.id] = agent
        return agent

    async def get_owner(self, owner_id: str) -> Owner | None:
        return self._owners.get(owner_id)

    async def find_owner_by_username(self, username: str) -> Owner | None:
        wanted = username.lower()
        for owner in self._owners.values():
            if owner.username and owner.username.lower() == wanted:
                return owner
        return None

    async def get_agent(self, agent_id: str) -> Agent | None:
        return self._agents.get(agent_id)

    async def get_agent_by_slug(self, owner_id: str, slug: str) -> Agent | None:
        for agent in self._agents.values():
            if agent.owner_id == owner_id and agent.slug == slug:
                return agent
        return None

    async def get_default_agent(self, owner_id: str) -> Agent | None:
        owned = [a for a in self._agents.values() if a.owner_id == owner_id]
        for agent in owned:
            if agent.is_default:
                return agent
        return owned[0] if owned else None

    async def find_agent_by_email(self, address: str) -> Agent | None:
        wanted = address.strip().lower()
        for agent in self._agents.values():
            if agent.email and agent.email.lower() == wanted:
                return agent
        return None

    async def list_skills(
        self, owner_id: str, *, agent_id: str | None = None, limit: int = 50
    ) -> list[Skill]:
        results = [
            skill
            for skill in self._skills.values()
            if skill.owner_id == owner_id and (agent_id is None or skill.agent_id == agent_id)
        ]
        return results[:limit]

    async def get_skill(self, owner_id: str, skill_id: str) -> Skill | None:
        skill = self._skills.get(skill_id)
        if skill is None or skill.owner_id != owner_id:
            return None
        return skill

    async def save_skill(self, skill: Skill) -> str:
        self._skills[skill.id] = skill
        return skill.id


class InMemoryCredentialStore(CredentialStore):
    """Credentials held in plain memory, keyed by (owner, service)."""

    def __init__(self) -> None:
        self._credentials: dict[tuple[str, str], Credential] = {}

    def put(self, owner_id: str, credential: Credential) -> None:
        self._credentials[(owner_id, credential.service)] = credential

    async def get_decrypted_api_key(self, owner_id: str, service: str) -> Credential | None:
        credential = self._credentials.get((owner_id, service))
        if credential is None or not credential.is_active:
            return None
        if not credential.api_key.get_secret_value():
            return None
        return credential
