"""Screening rule records and scan results."""

import re
from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, Field

Severity = Literal["warn", "block"]
ScanSeverity = Literal["none", "warn", "block"]


@dataclass(frozen=True)
class ScreeningRule:
    """One immutable screening rule.

    Attributes:
        flag_type: Family reported when the rule matches
        pattern: Compiled pattern searched against the raw input
        severity: warn passes the input through, block stops the pipeline
        replacement: Text substituted for matches in the sanitized input,
            or None to leave matches in place
        redact_match: Record "[REDACTED]" instead of the matched text
    """

    flag_type: str
    pattern: re.Pattern[str]
    severity: Severity
    replacement: str | None = None
    redact_match: bool = False


class SecurityFlag(BaseModel):
    """A rule hit on one input."""

    flag_type: str = Field(..., description="Rule family")
    severity: Severity = Field(..., description="warn or block")
    pattern: str = Field(..., description="Source of the matching pattern")
    match: str = Field(..., description="Matched text, clipped or redacted")


class ScanResult(BaseModel):
    """Outcome of screening one input."""

    sanitized_input: str = Field(..., description="Input with risky fragments neutralized")
    severity: ScanSeverity = Field(..., description="Highest severity among flags")
    flags: list[SecurityFlag] = Field(default_factory=list)

    @property
    def blocked(self) -> bool:
        return self.severity == "block"

    @property
    def flag_types(self) -> list[str]:
        """Distinct flag families in first-seen order."""
        return list(dict.fromkeys(flag.flag_type for flag in self.flags))
