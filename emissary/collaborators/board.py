"""Task board collaborator."""

from abc import ABC, abstractmethod
from datetime import datetime

from pydantic import BaseModel, Field

from emissary.runtime.result import PipelineStep
from emissary.utils.clock import utc_now
from emissary.utils.ids import new_id


class Task(BaseModel):
    id: str = Field(default_factory=new_id)
    owner_id: str
    agent_id: str | None = None
    parent_task_id: str | None = None
    description: str
    is_public: bool = False
    source: str | None = None
    status: str = "pending"
    board_column_id: str | None = None
    board_column_name: str | None = None
    outcome_summary: str | None = None
    outcome_links: list[str] = Field(default_factory=list)
    outcome_file: str | None = None
    outcome_audio: str | None = None
    workflow_steps: list[PipelineStep] = Field(default_factory=list)
    updated_at: datetime = Field(default_factory=utc_now)


class TaskBoard(ABC):
    """Where agent-created tasks live. Owned by the dashboard, not the pipeline."""

    @abstractmethod
    async def create_task(
        self,
        owner_id: str,
        description: str,
        *,
        agent_id: str | None = None,
        is_public: bool = False,
        source: str | None = None,
        parent_task_id: str | None = None,
    ) -> str:
        """Create a task and return its ID."""
        pass

    @abstractmethod
    async def update_task(
        self,
        owner_id: str,
        task_id: str,
        *,
        agent_id: str | None = None,
        status: str | None = None,
        outcome_summary: str | None = None,
        outcome_links: list[str] | None = None,
        board_column_id: str | None = None,
        board_column_name: str | None = None,
        source: str | None = None,
    ) -> None:
        """Update status, outcome or column of an owner's task."""
        pass

    @abstractmethod
    async def store_outcome_file(self, owner_id: str, task_id: str, content: str) -> str:
        """Store a long-form outcome and return its reference."""
        pass

    @abstractmethod
    async def link_outcome_audio(self, owner_id: str, task_id: str, audio_ref: str) -> None:
        """Attach generated narration to a task."""
        pass

    @abstractmethod
    async def set_workflow_steps(self, task_id: str, steps: list[PipelineStep]) -> None:
        """Attach a pipeline run's steps to a task."""
        pass


class InMemoryTaskBoard(TaskBoard):
    """In-memory TaskBoard for testing and development."""

    def __init__(self) -> None:
        self.tasks: dict[str, Task] = {}
        self.files: dict[str, str] = {}

    def _owned(self, owner_id: str, task_id: str) -> Task:
        task = self.tasks.get(task_id)
        if task is None or task.owner_id != owner_id:
            raise KeyError(f"Task not found: {task_id}")
        return task

    async def create_task(
        self,
        owner_id: str,
        description: str,
        *,
        agent_id: str | None = None,
        is_public: bool = False,
        source: str | None = None,
        parent_task_id: str | None = None,
    ) -> str:
        if parent_task_id is not None:
            self._owned(owner_id, parent_task_id)
        task = Task(
            owner_id=owner_id,
            agent_id=agent_id,
            description=description,
            is_public=is_public,
            source=source,
            parent_task_id=parent_task_id,
        )
        self.tasks[task.id] = task
        return task.id

    async def update_task(
        self,
        owner_id: str,
        task_id: str,
        *,
        agent_id: str | None = None,  # noqa: ARG002
        status: str | None = None,
        outcome_summary: str | None = None,
        outcome_links: list[str] | None = None,
        board_column_id: str | None = None,
        board_column_name: str | None = None,
        source: str | None = None,  # noqa: ARG002
    ) -> None:
        task = self._owned(owner_id, task_id)
        if status is not None:
            task.status = status
        if outcome_summary is not None:
            task.outcome_summary = outcome_summary
        if outcome_links is not None:
            task.outcome_links = outcome_links
        if board_column_id is not None:
            task.board_column_id = board_column_id
        if board_column_name is not None:
            task.board_column_name = board_column_name
        task.updated_at = utc_now()

    async def store_outcome_file(self, owner_id: str, task_id: str, content: str) -> str:
        task = self._owned(owner_id, task_id)
        ref = f"outcome-{task_id}"
        self.files[ref] = content
        task.outcome_file = ref
        return ref

    async def link_outcome_audio(self, owner_id: str, task_id: str, audio_ref: str) -> None:
        self._owned(owner_id, task_id).outcome_audio = audio_ref

    async def set_workflow_steps(self, task_id: str, steps: list[PipelineStep]) -> None:
        task = self.tasks.get(task_id)
        if task is None:
            raise KeyError(f"Task not found: {task_id}")
        task.workflow_steps = steps
