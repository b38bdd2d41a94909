"""Tests for task outcome selection."""

from emissary.runtime.outcome import (
    COMPLETED_OUTCOME,
    FAILED_OUTCOME,
    is_boilerplate,
    pick_task_outcome,
    strip_internal_ids,
)

LONG_REPLY = "I compiled the quarterly figures and attached the spreadsheet to the task."
TASK_REF = "k57d2f8a9b3c4e5f6a7b8c9d0e1f2a3b"


class TestIsBoilerplate:
    """Tests for is_boilerplate."""

    def test_known_phrases(self) -> None:
        assert is_boilerplate("Done.")
        assert is_boilerplate("  Processing scheduled tasks ")
        assert is_boilerplate("")

    def test_short_text(self) -> None:
        assert is_boilerplate("Sent the email.")

    def test_substantive_text(self) -> None:
        assert not is_boilerplate(LONG_REPLY)


class TestStripInternalIds:
    """Tests for strip_internal_ids."""

    def test_mixed_token_removed(self) -> None:
        result = strip_internal_ids(f"Finished {TASK_REF} today")

        assert TASK_REF not in result
        assert result.startswith("Finished")
        assert result.endswith("today")

    def test_labelled_token_removed(self) -> None:
        short_ref = TASK_REF[:28]
        assert strip_internal_ids(f"taskId: {short_ref}\nAll good") == "All good"

    def test_label_counts_toward_length(self) -> None:
        """A label that pushes the match past 36 characters keeps it."""
        long_ref = "a1" * 17
        text = f"Task {long_ref} is open"

        assert strip_internal_ids(text) == text

    def test_letters_only_token_kept(self) -> None:
        word = "a" * 30
        assert strip_internal_ids(f"keep {word}") == f"keep {word}"

    def test_newlines_collapsed(self) -> None:
        assert strip_internal_ids("one\n\n\n\ntwo") == "one\n\ntwo"


class TestPickTaskOutcome:
    """Tests for pick_task_outcome."""

    def test_non_terminal_keeps_summary(self) -> None:
        assert pick_task_outcome("in_progress", LONG_REPLY, "halfway") == "halfway"
        assert pick_task_outcome("pending", LONG_REPLY) is None

    def test_prefers_reply(self) -> None:
        assert pick_task_outcome("completed", LONG_REPLY, "x" * 50) == LONG_REPLY

    def test_summary_when_reply_vacuous(self) -> None:
        summary = "The migration plan covers all four services and the rollback steps."
        assert pick_task_outcome("completed", "Done.", summary) == summary

    def test_generic_completed(self) -> None:
        assert pick_task_outcome("completed", "Done.", "ok") == COMPLETED_OUTCOME

    def test_generic_failed(self) -> None:
        assert pick_task_outcome("failed", "Task processed.") == FAILED_OUTCOME

    def test_ids_scrubbed_and_clipped(self) -> None:
        reply = f"Report for {TASK_REF}: " + "z" * 9000

        outcome = pick_task_outcome("completed", reply)

        assert TASK_REF not in outcome
        assert len(outcome) == 8000
