"""Model output parsing: private reasoning, app actions and the visible reply.

Model output is untrusted free text. Parsing never raises: a malformed
action block, a non-list payload or an unknown action type is dropped and
the rest of the reply is kept.
"""

import json
import re
from dataclasses import dataclass, field

from emissary.observability.logging import get_logger
from emissary.runtime.actions import AppAction, UpdateTaskStatusAction, action_from_raw

logger = get_logger(__name__)

THINKING_PATTERN = re.compile(r"<thinking>\s*(.*?)\s*</thinking>", re.IGNORECASE | re.DOTALL)
ACTIONS_PATTERN = re.compile(
    r"<app_actions>\s*(.*?)\s*</app_actions>", re.IGNORECASE | re.DOTALL
)

EMPTY_REPLY_PLACEHOLDER = "Task actions processed."


@dataclass
class ParsedResponse:
    """A model reply split into its parts."""

    clean_response: str
    actions: list[AppAction] = field(default_factory=list)
    thinking: str | None = None

    def visible_reply(self, placeholder: str = EMPTY_REPLY_PLACEHOLDER) -> str:
        """Reply shown to the caller; never empty.

        Falls back to the first status update's outcome summary, then to
        ``placeholder``.
        """
        if self.clean_response.strip():
            return self.clean_response.strip()
        for action in self.actions:
            if isinstance(action, UpdateTaskStatusAction) and action.outcome_summary:
                return action.outcome_summary.strip()
        return placeholder


def extract_thinking(raw: str) -> tuple[str, str | None]:
    """Split off the first ``<thinking>`` block.

    Returns:
        (text without the block, thinking content or None)
    """
    match = THINKING_PATTERN.search(raw)
    if match is None:
        return raw, None
    thinking = match.group(1).strip() or None
    without = (raw[: match.start()] + raw[match.end() :]).strip()
    return without, thinking


def parse_actions(payload: str) -> list[AppAction]:
    """Parse the JSON body of an action block into typed actions."""
    if not payload:
        return []
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        logger.warning("app_actions_invalid_json", error=str(e))
        return []
    if not isinstance(data, list):
        logger.warning("app_actions_not_a_list", payload_type=type(data).__name__)
        return []

    actions: list[AppAction] = []
    for entry in data:
        action = action_from_raw(entry)
        if action is None:
            logger.debug(
                "app_action_dropped",
                action_type=entry.get("type") if isinstance(entry, dict) else None,
            )
            continue
        actions.append(action)
    return actions


def parse_response(raw: str) -> ParsedResponse:
    """Parse a raw model reply.

    Args:
        raw: Completion text as returned by the provider gateway

    Returns:
        ParsedResponse with reasoning and actions removed from the text
    """
    without_thinking, thinking = extract_thinking(raw)

    match = ACTIONS_PATTERN.search(without_thinking)
    if match is None:
        return ParsedResponse(clean_response=without_thinking.strip(), thinking=thinking)

    clean = (without_thinking[: match.start()] + without_thinking[match.end() :]).strip()
    return ParsedResponse(
        clean_response=clean,
        actions=parse_actions(match.group(1).strip()),
        thinking=thinking,
    )
