"""Task outcome policy for terminal status updates.

The stored outcome prefers the model's visible reply, then the summary
embedded in the action, then a fixed generic note. Vacuous text (known
acknowledgement phrases or anything under 40 characters) never becomes an
outcome. Internal identifiers are scrubbed so they cannot leak into
displayed or spoken text.
"""

import re

MIN_OUTCOME_LENGTH = 40
MAX_OUTCOME_LENGTH = 8000

BOILERPLATE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^processing scheduled tasks\.?$"),
    re.compile(r"^done\.?$"),
    re.compile(r"^done\. i applied the requested app update\.?$"),
    re.compile(r"^tasks? processed\.?$"),
    re.compile(r"^completed\.?$"),
)

FAILED_OUTCOME = (
    "Task failed, but the agent did not return a detailed failure report. "
    "Run it again for full details."
)
COMPLETED_OUTCOME = (
    "Task marked completed, but the agent did not return detailed output. "
    "Run it again for full results."
)

INTERNAL_ID_PATTERN = re.compile(
    r"\b(?:task(?:id)?[\s=:\"]*)?[a-z0-9]{28,36}\b", re.IGNORECASE
)
_EXCESS_NEWLINES = re.compile(r"\n{3,}")
_NON_ALNUM = re.compile(r"[^a-z0-9]", re.IGNORECASE)


def is_boilerplate(text: str) -> bool:
    """Whether ``text`` is too generic to serve as a task outcome."""
    normalized = text.strip().lower()
    if not normalized:
        return True
    if any(pattern.match(normalized) for pattern in BOILERPLATE_PATTERNS):
        return True
    return len(normalized) < MIN_OUTCOME_LENGTH


def _scrub(match: re.Match[str]) -> str:
    # The bound applies to the whole match, label included
    candidate = _NON_ALNUM.sub("", match.group(0))
    if not 28 <= len(candidate) <= 36:
        return match.group(0)
    has_letters = any(c.isalpha() for c in candidate)
    has_digits = any(c.isdigit() for c in candidate)
    return "" if has_letters and has_digits else match.group(0)


def strip_internal_ids(text: str) -> str:
    """Remove mixed letter/digit ids, with any leading "task id:" label.

    A match counts as an id when its letters and digits, label included,
    number 28 to 36.
    """
    scrubbed = INTERNAL_ID_PATTERN.sub(_scrub, text)
    return _EXCESS_NEWLINES.sub("\n\n", scrubbed).strip()


def pick_task_outcome(
    status: str,
    reply: str,
    action_summary: str | None = None,
) -> str | None:
    """Choose the outcome text stored with a task status update.

    Non-terminal updates keep the action's own summary, if any.
    """
    summary = (action_summary or "").strip()
    if status not in ("completed", "failed"):
        return summary or None

    for candidate in (reply.strip(), summary):
        if candidate and not is_boilerplate(candidate):
            return strip_internal_ids(candidate)[:MAX_OUTCOME_LENGTH]

    return FAILED_OUTCOME if status == "failed" else COMPLETED_OUTCOME
