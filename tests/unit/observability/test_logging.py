"""Tests for structured logging."""

import json
from io import StringIO

import pytest
import structlog

from emissary.observability.logging import (
    PIIRedactor,
    get_logger,
    run_context,
    setup_logging,
)


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_json_format(self) -> None:
        setup_logging(level="INFO", format="json", redact_pii=False)
        logger = get_logger("test")
        logger.info("test_message")

    def test_setup_console_format(self) -> None:
        """Should configure console format for development."""
        setup_logging(level="DEBUG", format="console", redact_pii=False)
        logger = get_logger("test")
        logger.debug("test_message")

    def test_unknown_level_defaults_to_info(self) -> None:
        setup_logging(level="verbose", format="json", redact_pii=True)
        logger = get_logger("test")
        logger.info("test_message", api_key="sk-abcdefghijklmnopqrstuv")


class TestPIIRedactor:
    """Tests for PII redaction."""

    @pytest.fixture
    def redactor(self) -> PIIRedactor:
        return PIIRedactor()

    @pytest.mark.parametrize(
        "key", ["email", "password", "api_key", "Authorization", "credentials", "sender"]
    )
    def test_redacts_sensitive_keys(self, redactor: PIIRedactor, key: str) -> None:
        result = redactor(None, None, {key: "value", "other": "value"})  # type: ignore
        assert result[key] == "[REDACTED]"
        assert result["other"] == "value"

    def test_redacts_provider_keys_in_text(self, redactor: PIIRedactor) -> None:
        """Provider API keys pasted into messages never reach the logs."""
        event_dict = {"error": "Incorrect API key provided: sk-proj-abcdefghijklmnop1234"}
        result = redactor(None, None, event_dict)  # type: ignore
        assert result["error"] == "Incorrect API key provided: [API_KEY]"

    def test_redacts_email_pattern_in_string_value(self, redactor: PIIRedactor) -> None:
        event_dict = {"message": "Contact user@example.com for help"}
        result = redactor(None, None, event_dict)  # type: ignore
        assert result["message"] == "Contact [EMAIL] for help"

    def test_redacts_ssn_pattern_in_string_value(self, redactor: PIIRedactor) -> None:
        event_dict = {"message": "SSN 123-45-6789 on file"}
        result = redactor(None, None, event_dict)  # type: ignore
        assert result["message"] == "SSN [SSN] on file"

    def test_redacts_phone_pattern_in_string_value(self, redactor: PIIRedactor) -> None:
        event_dict = {"message": "Call me at +1-555-123-4567 please"}
        result = redactor(None, None, event_dict)  # type: ignore
        assert "+1-555-123-4567" not in result["message"]
        assert "[PHONE]" in result["message"]

    def test_handles_nested_structures(self, redactor: PIIRedactor) -> None:
        event_dict = {
            "caller": {"email": "user@example.com", "name": "John"},
            "recipients": ["a@example.com", "team"],
        }
        result = redactor(None, None, event_dict)  # type: ignore
        assert result["caller"] == {"email": "[REDACTED]", "name": "John"}
        assert result["recipients"] == ["[EMAIL]", "team"]

    def test_preserves_non_pii_data(self, redactor: PIIRedactor) -> None:
        event_dict = {
            "event": "pipeline_completed",
            "latency_ms": 150,
            "blocked": False,
            "tokens_used": 42,
        }
        result = redactor(None, None, event_dict)  # type: ignore
        assert result == event_dict


class TestJSONLogging:
    """Tests for JSON log output format."""

    def test_redacted_json_output(self) -> None:
        """Redaction runs before rendering."""
        output = StringIO()
        structlog.configure(
            processors=[
                structlog.processors.add_log_level,
                PIIRedactor(),
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(0),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(output),
            cache_logger_on_first_use=False,
        )

        structlog.get_logger("test").info(
            "agentmail_reply_skipped",
            sender="bob@example.org",
            reason="bounce from bob@example.org",
        )

        parsed = json.loads(output.getvalue().strip())
        assert parsed["event"] == "agentmail_reply_skipped"
        assert parsed["sender"] == "[REDACTED]"
        assert parsed["reason"] == "bounce from [EMAIL]"
        assert parsed["level"] == "info"


class TestRunContext:
    """Tests for run_context."""

    def test_binds_and_restores(self) -> None:
        with run_context("owner-1", "agent-1", "a2a", hop_count=1):
            bound = structlog.contextvars.get_contextvars()
            assert bound["owner_id"] == "owner-1"
            assert bound["hop_count"] == 1

            with run_context("owner-1", "agent-2", "a2a", hop_count=2):
                assert structlog.contextvars.get_contextvars()["agent_id"] == "agent-2"

            assert structlog.contextvars.get_contextvars()["agent_id"] == "agent-1"

        assert "owner_id" not in structlog.contextvars.get_contextvars()
