"""SecurityFlagRecord model."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from emissary.utils.clock import utc_now
from emissary.utils.ids import new_id


class SecurityFlagRecord(BaseModel):
    """Persisted record of a screener flag that blocked an input."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    owner_id: str = Field(..., description="Account whose agent received the input")
    source: str = Field(..., description="Channel the input arrived on")
    flag_type: str = Field(..., description="Screener rule family")
    severity: str = Field(..., description="warn or block")
    pattern: str = Field(..., description="Matched text, clipped or redacted")
    input_snippet: str = Field(..., max_length=200, description="Leading input excerpt")
    action: str = Field(default="blocked", description="What the pipeline did")
    created_at: datetime = Field(default_factory=utc_now)
