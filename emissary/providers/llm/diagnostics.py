"""User-facing diagnostics for provider configuration failures.

A call that failed because of settings (wrong key, unknown model, bad base
URL, unsupported parameter) gets a reply naming the likely culprit instead
of a generic apology. Classification combines the typed error with
keywords from the provider's error text, since providers report the same
problem with different status codes.
"""

from emissary.providers.llm.base import (
    ConfigurationError,
    ProviderError,
    TransientProviderError,
)

GENERIC_ERROR_RESPONSE = "I encountered an error processing your request. Please try again later."

CONFIG_KEYWORDS = (
    "unsupported parameter",
    "invalid_request_error",
    "model",
    "api key",
    "unauthorized",
    "authentication",
    '"401"',
    '"403"',
    "not found",
    "endpoint",
    "base url",
)

DEFAULT_HINT = "Check provider, model, and BYOK credential settings in Settings."


def is_configuration_failure(error: Exception) -> bool:
    """Whether retrying without a settings change is pointless."""
    if isinstance(error, ConfigurationError):
        return True
    if isinstance(error, TransientProviderError):
        return False
    text = str(error).lower()
    return any(keyword in text for keyword in CONFIG_KEYWORDS)


def build_config_diagnostic(
    provider: str,
    model: str,
    error: Exception,
    base_url: str | None = None,
) -> str | None:
    """Explain a configuration failure, or return None for other errors."""
    if not is_configuration_failure(error):
        return None

    text = str(error).lower()
    hints: list[str] = []
    if "unsupported parameter" in text:
        hints.append("Provider/model parameter mismatch. Try a different model for this provider.")
    if ("model" in text and "not found" in text) or "does not exist" in text:
        hints.append("Model ID may be invalid for this provider. Re-check model name in Settings.")
    if (
        "incorrect api key" in text
        or "invalid api key" in text
        or "authentication" in text
        or (isinstance(error, ProviderError) and error.status_code in (401, 403))
    ):
        hints.append("API key may be invalid or inactive. Re-save the key in Settings.")
    if base_url and ("endpoint" in text or "not found" in text or "base url" in text):
        hints.append(
            f"Base URL may be incorrect ({base_url}). Verify it is provider-correct "
            "and includes the expected /v1 path."
        )
    if not hints:
        hints.append(DEFAULT_HINT)

    return (
        f"I could not call {provider} model {model} due to a configuration issue. "
        + " ".join(hints)
    )


def describe_provider_failure(
    provider: str,
    model: str,
    error: Exception,
    base_url: str | None = None,
) -> str:
    """Reply text for a failed model call: a diagnostic or the generic apology."""
    return build_config_diagnostic(provider, model, error, base_url) or GENERIC_ERROR_RESPONSE
