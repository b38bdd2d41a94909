"""Text-to-speech collaborator. Synthesis itself happens elsewhere."""

from abc import ABC, abstractmethod


class AudioGenerator(ABC):
    @abstractmethod
    async def generate(self, owner_id: str, agent_id: str | None, text: str) -> str | None:
        """Synthesize ``text`` and return a storage reference, or None."""
        pass


class InMemoryAudioGenerator(AudioGenerator):
    """Records requests and hands back a fake storage reference."""

    def __init__(self) -> None:
        self.requests: list[tuple[str, str | None, str]] = []

    async def generate(self, owner_id: str, agent_id: str | None, text: str) -> str | None:
        self.requests.append((owner_id, agent_id, text))
        return f"audio-{len(self.requests)}"
