"""Provider error taxonomy shared by chat and embedding providers.

ConfigurationError subclasses mean the call cannot succeed until settings
change; TransientProviderError subclasses may succeed on a later attempt.
"""


class ProviderError(Exception):
    """Base exception for model provider errors."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ConfigurationError(ProviderError):
    """The request can never succeed until settings change."""

    pass


class AuthenticationError(ConfigurationError):
    """Invalid or missing API key."""

    pass


class ModelError(ConfigurationError):
    """Model or endpoint not found."""

    pass


class InvalidRequestError(ConfigurationError):
    """Request shape rejected, e.g. an unsupported parameter."""

    pass


class TransientProviderError(ProviderError):
    """Network failure or server-side error; may succeed later."""

    pass


class RateLimitError(TransientProviderError):
    """Rate limit exceeded."""

    pass


def error_for_status(status_code: int, message: str) -> ProviderError:
    """Map an HTTP status to the matching provider error."""
    if status_code in (401, 403):
        return AuthenticationError(message, status_code=status_code)
    if status_code == 404:
        return ModelError(message, status_code=status_code)
    if status_code == 429:
        return RateLimitError(message, status_code=status_code)
    if status_code in (400, 422):
        return InvalidRequestError(message, status_code=status_code)
    if status_code >= 500:
        return TransientProviderError(message, status_code=status_code)
    return ProviderError(message, status_code=status_code)
