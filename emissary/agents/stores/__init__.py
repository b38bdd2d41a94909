"""Directory and credential store implementations."""

from emissary.agents.stores.inmemory import InMemoryAgentDirectory, InMemoryCredentialStore

__all__ = ["InMemoryAgentDirectory", "InMemoryCredentialStore"]
