"""Input safety screening."""

from emissary.security.models import ScanResult, ScreeningRule, SecurityFlag
from emissary.security.rules import DEFAULT_RULES
from emissary.security.screener import InputScreener

__all__ = ["DEFAULT_RULES", "InputScreener", "ScanResult", "ScreeningRule", "SecurityFlag"]
