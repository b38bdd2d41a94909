"""Message pipeline configuration models."""

from pydantic import BaseModel, Field

REFUSAL_MESSAGE = (
    "I'm unable to process that request as it appears to contain content that "
    "violates my security guidelines. If you believe this is an error, please "
    "rephrase your request."
)


class PipelineConfig(BaseModel):
    """Knobs for context assembly and reply shaping."""

    recency_window: int = Field(
        default=10, ge=0, description="Most recent memories replayed into context"
    )
    semantic_recall_limit: int = Field(
        default=8, ge=0, description="Nearest-neighbour memories added to context"
    )
    knowledge_max_nodes: int = Field(
        default=5, ge=0, le=10, description="Knowledge nodes injected into the system prompt"
    )
    knowledge_full_content_count: int = Field(
        default=3, ge=0, description="Top text matches loaded with full content"
    )
    moc_candidate_limit: int = Field(
        default=20, ge=0, description="Index nodes considered for MOC boosting"
    )
    max_active_skills: int = Field(
        default=10, ge=0, description="Active skills folded into agent capabilities"
    )
    refusal_message: str = Field(
        default=REFUSAL_MESSAGE, description="Reply returned when input is blocked"
    )
    empty_reply_placeholder: str = Field(
        default="Task actions processed.",
        description="Reply used when the model left no visible text or summary",
    )
