"""Semantic memory recall over embedded conversation records.

Embedding is best effort: a missing credential or a failed call returns
None and the pipeline falls back to recency-only context.
"""

from emissary.agents.store import CredentialStore
from emissary.config.models.providers import EmbeddingCredentialConfig
from emissary.memory.models import MemoryRecord
from emissary.memory.store import MemoryStore
from emissary.observability.logging import get_logger

logger = get_logger(__name__)


class SemanticRecall:
    """Embeds text with the owner's credentials and recalls similar memories."""

    def __init__(
        self,
        gateway,
        credentials: CredentialStore,
        store: MemoryStore,
        config: EmbeddingCredentialConfig | None = None,
    ) -> None:
        self._gateway = gateway
        self._credentials = credentials
        self._store = store
        self._config = config or EmbeddingCredentialConfig()

    async def _resolve_credentials(self, owner_id: str) -> tuple[str, str, str] | None:
        """(api_key, model, base_url) for embeddings; OpenAI first, then OpenRouter."""
        openai = await self._credentials.get_decrypted_api_key(owner_id, "openai")
        if openai is not None:
            return (
                openai.api_key.get_secret_value(),
                self._config.openai_model,
                openai.base_url or self._config.openai_base_url,
            )

        openrouter = await self._credentials.get_decrypted_api_key(owner_id, "openrouter")
        if openrouter is not None:
            return (
                openrouter.api_key.get_secret_value(),
                self._config.openrouter_model,
                self._config.openrouter_base_url,
            )
        return None

    async def embed(self, owner_id: str, text: str) -> list[float] | None:
        """Embed ``text``, or return None when no embedding is available."""
        if not text.strip():
            return None

        try:
            resolved = await self._resolve_credentials(owner_id)
        except Exception as e:
            logger.warning("embedding_credentials_failed", owner_id=owner_id, error=str(e))
            return None
        if resolved is None:
            logger.debug("embedding_skipped_no_credential", owner_id=owner_id)
            return None

        api_key, model, base_url = resolved
        try:
            return await self._gateway.embed(api_key, model, text, base_url)
        except Exception as e:
            logger.warning(
                "embedding_failed",
                owner_id=owner_id,
                model=model,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

    async def recall(
        self,
        owner_id: str,
        vector: list[float] | None,
        limit: int = 8,
        *,
        agent_id: str | None = None,
    ) -> list[MemoryRecord]:
        """Nearest memories to ``vector``, returned oldest first."""
        if not vector or limit <= 0:
            return []

        # Over-fetch so the agent filter still leaves ``limit`` candidates
        fetch = limit * 3 if agent_id else limit
        hits = await self._store.vector_search(owner_id, vector, limit=fetch)
        records = [
            record
            for record, _score in hits
            if agent_id is None or record.agent_id == agent_id
        ][:limit]
        records.sort(key=lambda r: r.created_at)
        return records
