"""Shared test fixtures for the Emissary test suite."""

from collections.abc import Generator

import pytest
from pydantic import SecretStr

from emissary.agents.models import A2AConfig, Agent, Credential, LLMConfig, Owner
from emissary.agents.stores.inmemory import InMemoryAgentDirectory, InMemoryCredentialStore
from emissary.config.settings import Settings, set_toml_config
from emissary.providers.llm.mock import MockProviderGateway
from emissary.runtime.container import Runtime, build_runtime


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache and TOML source before and after each test.

    This ensures test isolation for configuration tests.
    """
    from emissary.api import dependencies
    from emissary.config import get_settings

    set_toml_config({})
    get_settings.cache_clear()
    dependencies.get_settings.cache_clear()
    yield
    set_toml_config({})
    get_settings.cache_clear()
    dependencies.get_settings.cache_clear()


@pytest.fixture
def owner() -> Owner:
    return Owner(
        id="owner-1",
        name="Ada",
        username="ada",
        llm_config=LLMConfig(provider="openai", model="gpt-4o-mini"),
    )


@pytest.fixture
def agent(owner: Owner) -> Agent:
    return Agent(
        id="agent-1",
        owner_id=owner.id,
        name="Scout",
        slug="scout",
        email="scout@agents.example.com",
        is_default=True,
        a2a_config=A2AConfig(enabled=True),
    )


@pytest.fixture
def directory(owner: Owner, agent: Agent) -> InMemoryAgentDirectory:
    """Directory holding one owner with one default agent."""
    directory = InMemoryAgentDirectory()
    directory.add_owner(owner)
    directory.add_agent(agent)
    return directory


@pytest.fixture
def credentials(owner: Owner) -> InMemoryCredentialStore:
    """Credential store with an OpenAI key for the owner."""
    store = InMemoryCredentialStore()
    store.put(owner.id, Credential(service="openai", api_key=SecretStr("sk-test-key")))
    return store


@pytest.fixture
def gateway() -> MockProviderGateway:
    """Scripted gateway; embeddings fail unless a vector is scripted."""
    return MockProviderGateway(["Hello from the agent."])


@pytest.fixture
def runtime(
    directory: InMemoryAgentDirectory,
    credentials: InMemoryCredentialStore,
    gateway: MockProviderGateway,
) -> Runtime:
    """Fully wired in-memory runtime."""
    return build_runtime(
        Settings(), directory=directory, credentials=credentials, gateway=gateway
    )
