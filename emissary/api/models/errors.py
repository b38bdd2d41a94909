"""Error envelope shared by every route."""

from enum import Enum

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Machine-readable error codes.

    Delegation failures keep their own codes so channel adapters can tell a
    loop (stop forwarding) from a policy refusal (surface to the user).
    """

    INVALID_REQUEST = "INVALID_REQUEST"
    """Body or query failed validation."""

    AGENT_NOT_FOUND = "AGENT_NOT_FOUND"

    THREAD_NOT_FOUND = "THREAD_NOT_FOUND"
    """The A2A thread has no messages for this owner."""

    PROVIDER_NOT_FOUND = "PROVIDER_NOT_FOUND"
    """No webhook processor is registered for the provider."""

    DELEGATION_NOT_ALLOWED = "DELEGATION_NOT_ALLOWED"
    """A2A eligibility checks rejected the message."""

    DELEGATION_LOOP = "DELEGATION_LOOP"
    """The A2A chain went past the recipient's hop ceiling."""

    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorDetail(BaseModel):
    """One failing field of a validation error."""

    field: str | None = None
    message: str


class ErrorBody(BaseModel):
    code: ErrorCode
    message: str
    details: list[ErrorDetail] | None = None
    """Per-field failures; only set for INVALID_REQUEST."""


class ErrorResponse(BaseModel):
    """Top-level error body.

    Example:
        {
            "error": {
                "code": "DELEGATION_LOOP",
                "message": "A2A loop protection triggered: hop 3 exceeds limit 2"
            }
        }
    """

    error: ErrorBody
