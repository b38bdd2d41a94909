"""Agent-to-agent delegation configuration."""

from pydantic import BaseModel, Field


class A2ASettings(BaseModel):
    """Process-wide defaults for A2A delegation.

    Per-agent values on the agent's own A2A config take precedence.
    """

    default_max_auto_reply_hops: int = Field(
        default=2, ge=0, description="Hop ceiling when an agent does not set one"
    )
    summary_line_count: int = Field(
        default=12, ge=1, description="Transcript lines kept by thread summaries"
    )
    summary_preview_chars: int = Field(
        default=180, ge=20, description="Characters kept per summarized line"
    )
