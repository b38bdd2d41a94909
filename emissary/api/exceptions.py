"""API exception hierarchy for consistent error handling.

All API exceptions inherit from EmissaryAPIError, which provides
status_code and error_code attributes used by the global exception
handler to generate consistent error responses.
"""

from emissary.a2a import errors as a2a_errors
from emissary.api.models.errors import ErrorCode


class EmissaryAPIError(Exception):
    """Base exception for all API errors.

    Subclasses set status_code and error_code to define the HTTP response.
    The global exception handler uses these to generate ErrorResponse.
    """

    status_code: int = 500
    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidRequestError(EmissaryAPIError):
    """Raised when request validation fails."""

    status_code = 400
    error_code = ErrorCode.INVALID_REQUEST


class AgentNotFoundError(EmissaryAPIError):
    """Raised when an agent doesn't exist."""

    status_code = 404
    error_code = ErrorCode.AGENT_NOT_FOUND


class ThreadNotFoundError(EmissaryAPIError):
    """Raised when an A2A thread has no messages."""

    status_code = 404
    error_code = ErrorCode.THREAD_NOT_FOUND


class ProviderNotFoundError(EmissaryAPIError):
    """Raised when no webhook processor handles the provider."""

    status_code = 404
    error_code = ErrorCode.PROVIDER_NOT_FOUND


class DelegationNotAllowedAPIError(EmissaryAPIError):
    """Raised when A2A eligibility checks fail."""

    status_code = 403
    error_code = ErrorCode.DELEGATION_NOT_ALLOWED


class DelegationLoopAPIError(EmissaryAPIError):
    """Raised when an A2A chain exceeds its hop ceiling."""

    status_code = 409
    error_code = ErrorCode.DELEGATION_LOOP


def from_delegation_error(exc: a2a_errors.DelegationError) -> EmissaryAPIError:
    """Map a domain delegation error onto its API counterpart."""
    if isinstance(exc, a2a_errors.DelegationLoopError):
        return DelegationLoopAPIError(str(exc))
    if isinstance(exc, a2a_errors.DelegationNotAllowedError):
        return DelegationNotAllowedAPIError(str(exc))
    if isinstance(exc, a2a_errors.AgentNotFoundError):
        return AgentNotFoundError(str(exc))
    if isinstance(exc, a2a_errors.ThreadNotFoundError):
        return ThreadNotFoundError(str(exc))
    return EmissaryAPIError(str(exc))
