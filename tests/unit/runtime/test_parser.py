"""Tests for app action validation and model output parsing."""

from emissary.runtime.actions import (
    CreateKnowledgeNodeAction,
    CreateTaskAction,
    DelegateToAgentAction,
    MoveTaskAction,
    UpdateTaskStatusAction,
    action_from_raw,
)
from emissary.runtime.parser import extract_thinking, parse_actions, parse_response


class TestActionFromRaw:
    """Tests for per-variant validation."""

    def test_camel_and_snake_case(self) -> None:
        camel = action_from_raw({"type": "create_task", "description": "x", "isPublic": True})
        snake = action_from_raw({"type": "create_task", "description": "x", "is_public": True})

        assert camel == snake == CreateTaskAction(description="x", is_public=True)

    def test_fields_trimmed_and_clipped(self) -> None:
        action = action_from_raw({"type": "create_task", "description": "  " + "a" * 900})

        assert action.description == "a" * 800

    def test_missing_required_field(self) -> None:
        assert action_from_raw({"type": "create_task", "description": "   "}) is None
        assert action_from_raw({"type": "delegate_to_agent", "targetAgentSlug": "x"}) is None

    def test_unknown_type_and_non_dict(self) -> None:
        assert action_from_raw({"type": "launch_rocket"}) is None
        assert action_from_raw(["create_task"]) is None

    def test_non_string_type(self) -> None:
        assert action_from_raw({"type": ["create_task"], "description": "x"}) is None
        assert action_from_raw({"type": {"x": 1}}) is None
        assert action_from_raw({"type": None}) is None

    def test_status_must_be_known(self) -> None:
        assert action_from_raw({"type": "update_task_status", "taskId": "t1", "status": "done"}) is None

    def test_outcome_links_filtered(self) -> None:
        action = action_from_raw(
            {
                "type": "update_task_status",
                "taskId": "t1",
                "status": "completed",
                "outcomeLinks": [" https://a ", "", 3] + ["https://b"] * 10,
            }
        )

        assert isinstance(action, UpdateTaskStatusAction)
        assert action.outcome_links[0] == "https://a"
        assert len(action.outcome_links) == 8

    def test_move_task_needs_column(self) -> None:
        assert action_from_raw({"type": "move_task", "taskId": "t1"}) is None
        assert action_from_raw(
            {"type": "move_task", "taskId": "t1", "boardColumnName": "Done"}
        ) == MoveTaskAction(task_id="t1", board_column_name="Done")

    def test_knowledge_node_defaults(self) -> None:
        """Description falls back to the title and unknown node types to concept."""
        action = action_from_raw(
            {"type": "create_knowledge_node", "title": "T", "content": "C", "nodeType": "poem"}
        )

        assert action == CreateKnowledgeNodeAction(title="T", description="T", content="C")


class TestParseResponse:
    """Tests for parse_response."""

    def test_reply_with_action_block(self) -> None:
        raw = (
            "Hi there!\n"
            '<app_actions>[{"type":"create_task","description":"Buy milk"}]</app_actions>'
        )

        parsed = parse_response(raw)

        assert parsed.clean_response == "Hi there!"
        assert parsed.actions == [CreateTaskAction(description="Buy milk")]
        assert parsed.thinking is None

    def test_plain_reply(self) -> None:
        parsed = parse_response("  Just text.  ")

        assert parsed.clean_response == "Just text."
        assert parsed.actions == []

    def test_malformed_json_keeps_reply(self) -> None:
        """A broken action block is dropped without losing the reply."""
        parsed = parse_response("Sure.\n<app_actions>[{not json</app_actions>")

        assert parsed.clean_response == "Sure."
        assert parsed.actions == []

    def test_non_list_payload(self) -> None:
        assert parse_actions('{"type": "create_task", "description": "x"}') == []

    def test_invalid_entries_dropped(self) -> None:
        actions = parse_actions(
            '[{"type":"create_task","description":"ok"},{"type":"bogus"},'
            '{"type":"delegate_to_agent","targetAgentSlug":"helper","taskDescription":"Research"}]'
        )

        assert actions == [
            CreateTaskAction(description="ok"),
            DelegateToAgentAction(target_agent_slug="helper", task_description="Research"),
        ]

    def test_unhashable_type_entries_dropped(self) -> None:
        parsed = parse_response(
            'Hi there!<app_actions>[{"type": ["create_task"], "description": "x"},'
            '{"type": {"x": 1}},{"type":"create_task","description":"Buy milk"}]</app_actions>'
        )

        assert parsed.clean_response == "Hi there!"
        assert parsed.actions == [CreateTaskAction(description="Buy milk")]

    def test_thinking_block_removed(self) -> None:
        parsed = parse_response("<thinking>\nUser wants a list.\n</thinking>\nHere it is.")

        assert parsed.thinking == "User wants a list."
        assert parsed.clean_response == "Here it is."

    def test_empty_thinking_block(self) -> None:
        text, thinking = extract_thinking("<thinking> </thinking>Hello")

        assert text == "Hello"
        assert thinking is None


class TestVisibleReply:
    """Tests for ParsedResponse.visible_reply."""

    def test_falls_back_to_outcome_summary(self) -> None:
        parsed = parse_response(
            '<app_actions>[{"type":"update_task_status","taskId":"t1",'
            '"status":"completed","outcomeSummary":"Report drafted."}]</app_actions>'
        )

        assert parsed.visible_reply() == "Report drafted."

    def test_falls_back_to_placeholder(self) -> None:
        parsed = parse_response('<app_actions>[{"type":"create_task","description":"x"}]</app_actions>')

        assert parsed.visible_reply() == "Task actions processed."
        assert parsed.visible_reply("Done") == "Done"
