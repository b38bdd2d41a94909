"""Tests for the in-memory task board."""

import pytest

from emissary.collaborators.board import InMemoryTaskBoard
from emissary.runtime.result import PipelineStep
from emissary.utils.clock import utc_now


@pytest.fixture
def board() -> InMemoryTaskBoard:
    return InMemoryTaskBoard()


class TestInMemoryTaskBoard:
    """Tests for InMemoryTaskBoard."""

    @pytest.mark.asyncio
    async def test_create_and_update(self, board: InMemoryTaskBoard) -> None:
        task_id = await board.create_task("owner-1", "Book a table", agent_id="agent-1")

        await board.update_task(
            "owner-1",
            task_id,
            status="completed",
            outcome_summary="Booked for 8pm",
            outcome_links=["https://example.com/booking"],
            board_column_name="Done",
        )

        task = board.tasks[task_id]
        assert task.status == "completed"
        assert task.outcome_summary == "Booked for 8pm"
        assert task.outcome_links == ["https://example.com/booking"]
        assert task.board_column_name == "Done"
        assert task.description == "Book a table"

    @pytest.mark.asyncio
    async def test_other_owner_cannot_update(self, board: InMemoryTaskBoard) -> None:
        task_id = await board.create_task("owner-1", "Private")

        with pytest.raises(KeyError):
            await board.update_task("owner-2", task_id, status="completed")
        assert board.tasks[task_id].status == "pending"

    @pytest.mark.asyncio
    async def test_subtask_requires_owned_parent(self, board: InMemoryTaskBoard) -> None:
        parent = await board.create_task("owner-1", "Plan trip")

        child = await board.create_task("owner-1", "Book flight", parent_task_id=parent)

        assert board.tasks[child].parent_task_id == parent
        with pytest.raises(KeyError):
            await board.create_task("owner-2", "Hijack", parent_task_id=parent)

    @pytest.mark.asyncio
    async def test_outcome_file_and_audio(self, board: InMemoryTaskBoard) -> None:
        task_id = await board.create_task("owner-1", "Write report")

        ref = await board.store_outcome_file("owner-1", task_id, "# Report")
        await board.link_outcome_audio("owner-1", task_id, "audio-1")

        task = board.tasks[task_id]
        assert board.files[ref] == "# Report"
        assert task.outcome_file == ref
        assert task.outcome_audio == "audio-1"

    @pytest.mark.asyncio
    async def test_workflow_steps(self, board: InMemoryTaskBoard) -> None:
        task_id = await board.create_task("owner-1", "Research")
        steps = [PipelineStep(label="Screening input", status="completed", started_at=utc_now())]

        await board.set_workflow_steps(task_id, steps)

        assert [s.label for s in board.tasks[task_id].workflow_steps] == ["Screening input"]
        with pytest.raises(KeyError):
            await board.set_workflow_steps("missing", steps)
