"""Resolve the model and system prompt an agent runs with."""

from dataclasses import dataclass, field

from emissary.agents.store import AgentDirectory
from emissary.runtime.prompt import DEFAULT_CAPABILITIES, build_system_prompt


@dataclass
class AgentRuntimeConfig:
    provider: str
    model: str
    system_prompt: str
    agent_name: str
    capabilities: list[str] = field(default_factory=list)


async def resolve_agent_config(
    directory: AgentDirectory,
    owner_id: str,
    agent_id: str | None = None,
    *,
    max_skills: int = 10,
) -> AgentRuntimeConfig | None:
    """Merge owner defaults with the agent's own settings.

    The agent's LLM config overrides the owner's. Capabilities come from
    the owner's active skills that are unbound or bound to this agent.

    Returns:
        The resolved config, or None when the owner is unknown or no model
        is configured at either level
    """
    owner = await directory.get_owner(owner_id)
    if owner is None:
        return None

    llm_config = owner.llm_config
    agent_name = owner.name or "Agent"
    custom_instructions = None

    if agent_id:
        agent = await directory.get_agent(agent_id)
        if agent is not None and agent.owner_id == owner_id:
            agent_name = agent.name
            llm_config = agent.llm_config or llm_config
            custom_instructions = agent.personality.custom_instructions

    if llm_config is None:
        return None

    skills = [s for s in await directory.list_skills(owner_id) if s.active][:max_skills]
    capabilities = [
        f"{capability.name}: {capability.description}"
        for skill in skills
        if not (agent_id and skill.agent_id and skill.agent_id != agent_id)
        for capability in skill.capabilities
    ]

    system_prompt = build_system_prompt(
        agent_name,
        owner.name or "User",
        capabilities or list(DEFAULT_CAPABILITIES),
        custom_instructions=custom_instructions,
    )
    return AgentRuntimeConfig(
        provider=llm_config.provider,
        model=llm_config.model,
        system_prompt=system_prompt,
        agent_name=agent_name,
        capabilities=capabilities,
    )
