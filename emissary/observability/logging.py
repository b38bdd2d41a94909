"""structlog setup.

JSON lines in production, coloured console output in development. Every
event passes through ``PIIRedactor`` unless redaction is turned off: inbound
mail, A2A transcripts and provider errors all carry caller addresses and
pasted keys, so values are scanned as well as key names.

Pipeline runs bind ``owner_id``, ``agent_id``, ``channel`` and ``hop_count``
with ``run_context()`` so nested A2A hops log under their own identity.
"""

import re
import sys
from collections.abc import Iterator, MutableMapping
from contextlib import contextmanager
from typing import Any, cast

import structlog
from structlog.types import EventDict, WrappedLogger

REDACTED = "[REDACTED]"

SENSITIVE_KEYS: frozenset[str] = frozenset({
    # credentials
    "api_key",
    "access_token",
    "refresh_token",
    "authorization",
    "token",
    "secret",
    "password",
    "private_key",
    "credential",
    "credentials",
    # contact details of callers and mail peers
    "email",
    "phone",
    "sender",
    "recipient",
    "from_address",
    "to_address",
})

# Applied in order; SSNs before phones since the phone shape also matches them
VALUE_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (
        re.compile(r"\b(?:sk-[A-Za-z0-9_-]{16,}|ghp_[A-Za-z0-9]{36}|xox[baprs]-[A-Za-z0-9-]+)"),
        "[API_KEY]",
    ),
    (re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"), "[EMAIL]"),
    (re.compile(r"\d{3}-\d{2}-\d{4}"), "[SSN]"),
    (re.compile(r"\+?[\d\s\-\(\)]{10,}"), "[PHONE]"),
)

_LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40, "CRITICAL": 50}


class PIIRedactor:
    """structlog processor masking sensitive keys and PII-shaped values."""

    def __call__(
        self,
        _logger: WrappedLogger,
        _method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        return cast(EventDict, self._mapping(event_dict))

    def _mapping(self, data: MutableMapping[str, Any]) -> dict[str, Any]:
        return {
            key: REDACTED if key.lower() in SENSITIVE_KEYS else self._value(value)
            for key, value in data.items()
        }

    def _value(self, value: Any) -> Any:
        if isinstance(value, str):
            for pattern, mask in VALUE_PATTERNS:
                value = pattern.sub(mask, value)
            return value
        if isinstance(value, dict):
            return self._mapping(value)
        if isinstance(value, list):
            return [self._value(item) for item in value]
        return value


def setup_logging(
    level: str = "INFO",
    format: str = "json",
    redact_pii: bool = True,
) -> None:
    """Configure structlog for the process.

    Args:
        level: Minimum level name; unknown names fall back to INFO
        format: "json" or "console"
        redact_pii: Install ``PIIRedactor`` before rendering
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if redact_pii:
        processors.append(PIIRedactor())
    processors.append(
        structlog.processors.JSONRenderer()
        if format == "json"
        else structlog.dev.ConsoleRenderer(colors=True)
    )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_LEVELS.get(level.upper(), 20)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=True,
    )


@contextmanager
def run_context(
    owner_id: str, agent_id: str | None, channel: str, hop_count: int | None = None
) -> Iterator[None]:
    """Bind a pipeline run's identity to every event logged inside the block."""
    with structlog.contextvars.bound_contextvars(
        owner_id=owner_id, agent_id=agent_id, channel=channel, hop_count=hop_count
    ):
        yield


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
