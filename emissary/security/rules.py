"""Default screening rule set.

Rules are evaluated in order; every matching rule contributes a flag.
Injection, exfiltration, key material, destructive shell and code
execution block the input. Sensitive data and hardcoded secrets only warn,
since users legitimately paste their own details.
"""

import re

from emissary.security.models import ScreeningRule

BLOCKED = "[BLOCKED]"
REDACTED = "[REDACTED]"

_I = re.IGNORECASE


def _rule(flag_type: str, pattern: str, severity: str, flags: int = _I, **kwargs) -> ScreeningRule:
    return ScreeningRule(
        flag_type=flag_type,
        pattern=re.compile(pattern, flags),
        severity=severity,  # type: ignore[arg-type]
        **kwargs,
    )


INJECTION_RULES: tuple[ScreeningRule, ...] = tuple(
    _rule("injection", pattern, "block", replacement=BLOCKED)
    for pattern in (
        # Instruction overrides
        r"ignore\s+(all\s+)?(previous|prior|above)\s+(instructions?|prompts?)",
        r"disregard\s+(all\s+)?(your\s+)?(instructions?|rules?|guidelines?)",
        r"forget\s+(everything|all)\s+(you|your)",
        # Role manipulation
        r"you\s+are\s+(now|actually)\s+(a\s+)?(?!my\s+agent)",
        r"pretend\s+(to\s+)?be\s+(?!helpful)",
        r"act\s+as\s+(if|though)\s+you",
        # System prompt extraction
        r"what\s+(is|are)\s+your\s+(system\s+)?prompt",
        r"reveal\s+your\s+(instructions|prompts?|rules)",
        r"show\s+me\s+your\s+(original|initial)\s+(instructions?|prompt)",
        # Output manipulation
        r"output\s+(only|just)\s+the\s+(following|text)",
        r"respond\s+with\s+(only|just)\s+\"[^\"]+\"",
        # Jailbreaks
        r"DAN\s*[:=]|do\s+anything\s+now",
        r"developer\s+mode|sudo\s+mode",
        r"jailbreak|bypass\s+(your\s+)?restrictions",
        # Encoded payloads
        r"base64\s*[:=]\s*[A-Za-z0-9+/=]+",
        r"hex\s*[:=]\s*[0-9a-fA-F]+",
    )
)

PRIVATE_KEY_RULES: tuple[ScreeningRule, ...] = (
    _rule(
        "private_key",
        r"-----BEGIN (?:[A-Z0-9]+ )*PRIVATE KEY-----",
        "block",
        flags=0,
        replacement=REDACTED,
        redact_match=True,
    ),
)

SENSITIVE_RULES: tuple[ScreeningRule, ...] = tuple(
    _rule("sensitive", pattern, "warn", flags=flags, replacement=REDACTED, redact_match=True)
    for pattern, flags in (
        (r"(?:api[_-]?key|secret[_-]?key|password|token|bearer)\s*[:=]\s*\S+", _I),
        (r"sk-[a-zA-Z0-9]{20,}", _I),
        (r"ghp_[a-zA-Z0-9]{36}", _I),
        (r"xox[baprs]-[0-9a-zA-Z-]+", _I),
        (r"\b\d{4}[-\s]?\d{4}[-\s]?\d{4}[-\s]?\d{4}\b", 0),
        (r"\b\d{3}[-\s]?\d{2}[-\s]?\d{4}\b", 0),
        (r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}", 0),
    )
)

HARDCODED_SECRET_RULES: tuple[ScreeningRule, ...] = (
    _rule("hardcoded_secret", r"\b(?:AKIA|ASIA)[0-9A-Z]{16}\b", "warn", flags=0,
          replacement=REDACTED, redact_match=True),
    _rule(
        "hardcoded_secret",
        r"\b(?:client_secret|secret|passwd|pwd|auth_token)\s*=\s*[\"'][^\"'\s]{8,}[\"']",
        "warn",
        replacement=REDACTED,
        redact_match=True,
    ),
)

EXFILTRATION_RULES: tuple[ScreeningRule, ...] = tuple(
    _rule("exfiltration", pattern, "block")
    for pattern in (
        r"send\s+(this|my|the)\s+(data|info|details)\s+to\s+\S+",
        r"post\s+to\s+https?://",
        r"\b(?:curl|wget)\b|\bfetch\s*\(",
        r"upload\s+(this|my|the)\s+(file|data)",
    )
)

DESTRUCTIVE_SHELL_RULES: tuple[ScreeningRule, ...] = tuple(
    _rule("destructive_shell", pattern, "block")
    for pattern in (
        r"\brm\s+(?:-[a-z]*\s+)*-[a-z]*(?:rf|fr)[a-z]*\s+(?:/|~|\*|\$HOME)",
        r"\|\s*(?:sudo\s+)?(?:ba|z|k|da)?sh\b",
        r"\bmkfs(?:\.\w+)?\b",
        r"\bdd\s+if=\S+\s+of=/dev/",
        r":\(\)\s*\{\s*:\s*\|\s*:\s*&\s*\}\s*;\s*:",
        r"\bchmod\s+-R\s+777\s+/",
        r">\s*/dev/sd[a-z]\b",
    )
)

CODE_EXECUTION_RULES: tuple[ScreeningRule, ...] = tuple(
    _rule("code_execution", pattern, "block")
    for pattern in (
        r"\b(?:eval|exec)\s*\(",
        r"\bos\.(?:system|popen)\s*\(",
        r"\bsubprocess\.(?:run|call|Popen|check_output|check_call)\s*\(",
        r"__import__\s*\(",
        r"\bchild_process\b",
    )
)

DEFAULT_RULES: tuple[ScreeningRule, ...] = (
    *INJECTION_RULES,
    *PRIVATE_KEY_RULES,
    *SENSITIVE_RULES,
    *HARDCODED_SECRET_RULES,
    *EXFILTRATION_RULES,
    *DESTRUCTIVE_SHELL_RULES,
    *CODE_EXECUTION_RULES,
)
