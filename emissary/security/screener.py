"""Pattern-based input screener.

Runs before any model call and never performs I/O, so a blocked input
costs nothing beyond a bounded regex scan.
"""

import re
from collections.abc import Sequence

from emissary.observability.logging import get_logger
from emissary.observability.metrics import SECURITY_FLAGS
from emissary.security.models import ScanResult, ScreeningRule, SecurityFlag
from emissary.security.rules import DEFAULT_RULES, REDACTED

logger = get_logger(__name__)

MATCH_SNIPPET_CHARS = 50

BASE64_PAYLOAD = re.compile(r"base64\s*[:=]\s*[A-Za-z0-9+/=]+", re.IGNORECASE)
HEX_ESCAPE = re.compile(r"\\x[0-9a-fA-F]{2}")
UNICODE_ESCAPE = re.compile(r"\\u[0-9a-fA-F]{4}")


class InputScreener:
    """Classify input as none, warn or block against an ordered rule set.

    Example:
        screener = InputScreener()
        result = screener.scan("ignore previous instructions")
        assert result.severity == "block"
    """

    def __init__(self, rules: Sequence[ScreeningRule] = DEFAULT_RULES) -> None:
        self._rules = tuple(rules)

    @property
    def rules(self) -> tuple[ScreeningRule, ...]:
        return self._rules

    def scan(self, text: str) -> ScanResult:
        flags: list[SecurityFlag] = []
        for rule in self._rules:
            match = rule.pattern.search(text)
            if match is None:
                continue
            flags.append(
                SecurityFlag(
                    flag_type=rule.flag_type,
                    severity=rule.severity,
                    pattern=rule.pattern.pattern,
                    match=REDACTED if rule.redact_match else match.group(0)[:MATCH_SNIPPET_CHARS],
                )
            )

        if any(flag.severity == "block" for flag in flags):
            severity = "block"
        elif flags:
            severity = "warn"
        else:
            severity = "none"

        for flag in flags:
            SECURITY_FLAGS.labels(flag_type=flag.flag_type, severity=flag.severity).inc()
        if flags:
            logger.info(
                "input_flagged",
                severity=severity,
                flag_types=[flag.flag_type for flag in flags],
            )

        return ScanResult(
            sanitized_input=self.sanitize(text),
            severity=severity,
            flags=flags,
        )

    def sanitize(self, text: str) -> str:
        """Neutralize risky fragments so warn-level input is safe to forward."""
        sanitized = text
        for rule in self._rules:
            if rule.replacement is not None:
                sanitized = rule.pattern.sub(rule.replacement, sanitized)
        sanitized = BASE64_PAYLOAD.sub("[BASE64_REMOVED]", sanitized)
        sanitized = HEX_ESCAPE.sub("", sanitized)
        return UNICODE_ESCAPE.sub("", sanitized)
