"""Executes parsed app actions against external collaborators.

Actions run in order. A failing action is logged and skipped; it never
aborts its siblings or the reply. The one exception is
:class:`DelegationLoopError`, which ends the whole delegation chain.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from emissary.a2a.errors import DelegationLoopError
from emissary.agents.models import Capability, Skill
from emissary.agents.store import AgentDirectory
from emissary.collaborators.audio import AudioGenerator
from emissary.collaborators.board import TaskBoard
from emissary.collaborators.feed import FeedItem, FeedPublisher
from emissary.knowledge.graph import KnowledgeGraph
from emissary.observability.logging import get_logger
from emissary.observability.metrics import ACTIONS_EXECUTED
from emissary.runtime.actions import (
    TERMINAL_STATUSES,
    AppAction,
    CallToolAction,
    CapabilitySpec,
    CreateFeedItemAction,
    CreateKnowledgeNodeAction,
    CreateSkillAction,
    CreateSubtaskAction,
    CreateTaskAction,
    DelegateToAgentAction,
    GenerateAudioAction,
    GenerateImageAction,
    LinkKnowledgeNodesAction,
    MoveTaskAction,
    UpdateSkillAction,
    UpdateTaskStatusAction,
)
from emissary.runtime.outcome import MAX_OUTCOME_LENGTH, pick_task_outcome

if TYPE_CHECKING:
    from emissary.a2a.controller import A2AController

logger = get_logger(__name__)


@dataclass
class ActionContext:
    """Who the actions run for, and the reply they were issued with."""

    owner_id: str
    agent_id: str | None
    channel: str
    reply: str
    caller_id: str | None = None
    hop_count: int | None = None
    touched_task_ids: list[str] = field(default_factory=list)

    def touch(self, task_id: str) -> None:
        if task_id not in self.touched_task_ids:
            self.touched_task_ids.append(task_id)


@dataclass
class DispatchReport:
    executed: int = 0
    failed: int = 0

    @property
    def detail(self) -> str:
        total = self.executed + self.failed
        if self.failed:
            return f"{total} dispatched, {self.failed} failed"
        return f"{total} dispatched"


def _capabilities(specs: list[CapabilitySpec]) -> list[Capability]:
    return [Capability(name=c.name, description=c.description) for c in specs]


class ActionDispatcher:
    """Runs each action type against its collaborator."""

    def __init__(
        self,
        *,
        task_board: TaskBoard,
        feed: FeedPublisher,
        audio: AudioGenerator,
        directory: AgentDirectory,
        knowledge_graph: KnowledgeGraph,
        delegator: "A2AController | None" = None,
    ) -> None:
        self._board = task_board
        self._feed = feed
        self._audio = audio
        self._directory = directory
        self._graph = knowledge_graph
        self.delegator = delegator
        self._handlers: dict[type, Any] = {
            CreateTaskAction: self._create_task,
            CreateFeedItemAction: self._create_feed_item,
            CreateSkillAction: self._create_skill,
            UpdateTaskStatusAction: self._update_task_status,
            MoveTaskAction: self._move_task,
            UpdateSkillAction: self._update_skill,
            CreateSubtaskAction: self._create_subtask,
            DelegateToAgentAction: self._delegate,
            GenerateImageAction: self._generate_image,
            GenerateAudioAction: self._generate_audio,
            CallToolAction: self._call_tool,
            CreateKnowledgeNodeAction: self._create_knowledge_node,
            LinkKnowledgeNodesAction: self._link_knowledge_nodes,
        }

    async def dispatch(self, actions: list[AppAction], ctx: ActionContext) -> DispatchReport:
        """Execute ``actions`` sequentially with per-action isolation.

        Raises:
            DelegationLoopError: A delegation exceeded its hop ceiling
        """
        report = DispatchReport()
        for action in actions:
            handler = self._handlers[type(action)]
            try:
                await handler(action, ctx)
            except DelegationLoopError:
                ACTIONS_EXECUTED.labels(action_type=action.type, status="error").inc()
                raise
            except Exception as e:
                report.failed += 1
                ACTIONS_EXECUTED.labels(action_type=action.type, status="error").inc()
                logger.warning(
                    "action_failed",
                    action_type=action.type,
                    owner_id=ctx.owner_id,
                    agent_id=ctx.agent_id,
                    error=str(e),
                )
                continue
            report.executed += 1
            ACTIONS_EXECUTED.labels(action_type=action.type, status="success").inc()
        return report

    async def _create_task(self, action: CreateTaskAction, ctx: ActionContext) -> None:
        task_id = await self._board.create_task(
            ctx.owner_id,
            action.description,
            agent_id=ctx.agent_id,
            is_public=action.is_public,
            source=ctx.channel,
        )
        ctx.touch(task_id)

    async def _create_subtask(self, action: CreateSubtaskAction, ctx: ActionContext) -> None:
        task_id = await self._board.create_task(
            ctx.owner_id,
            action.description,
            agent_id=ctx.agent_id,
            is_public=action.is_public,
            source=ctx.channel,
            parent_task_id=action.parent_task_id,
        )
        ctx.touch(task_id)

    async def _create_feed_item(self, action: CreateFeedItemAction, ctx: ActionContext) -> None:
        await self._feed.publish(
            FeedItem(
                owner_id=ctx.owner_id,
                item_type="status_update",
                title=action.title,
                content=action.content,
                is_public=action.is_public,
                metadata={
                    "source": ctx.channel,
                    "caller_id": ctx.caller_id,
                    "generated_by": "agent_runtime",
                },
            )
        )

    async def _create_skill(self, action: CreateSkillAction, ctx: ActionContext) -> None:
        await self._directory.save_skill(
            Skill(
                owner_id=ctx.owner_id,
                agent_id=ctx.agent_id,
                name=action.name,
                bio=action.bio or "",
                capabilities=_capabilities(action.capabilities),
                is_active=True,
            )
        )

    async def _update_skill(self, action: UpdateSkillAction, ctx: ActionContext) -> None:
        skill = await self._directory.get_skill(ctx.owner_id, action.skill_id)
        if skill is None:
            raise KeyError(f"Skill not found: {action.skill_id}")

        changes: dict[str, Any] = {}
        if action.name is not None:
            changes["name"] = action.name
        if action.bio is not None:
            changes["bio"] = action.bio
        if action.capabilities is not None:
            changes["capabilities"] = _capabilities(action.capabilities)
        if action.is_active is not None:
            changes["is_active"] = action.is_active
        await self._directory.save_skill(skill.model_copy(update=changes))

    async def _update_task_status(self, action: UpdateTaskStatusAction, ctx: ActionContext) -> None:
        outcome = pick_task_outcome(action.status, ctx.reply, action.outcome_summary)
        await self._board.update_task(
            ctx.owner_id,
            action.task_id,
            agent_id=ctx.agent_id,
            status=action.status,
            outcome_summary=outcome,
            outcome_links=action.outcome_links,
            source=ctx.channel,
        )
        ctx.touch(action.task_id)

        if action.status in TERMINAL_STATUSES and len(ctx.reply) > MAX_OUTCOME_LENGTH:
            try:
                await self._board.store_outcome_file(ctx.owner_id, action.task_id, ctx.reply)
            except Exception as e:
                logger.warning("outcome_file_failed", task_id=action.task_id, error=str(e))

    async def _move_task(self, action: MoveTaskAction, ctx: ActionContext) -> None:
        await self._board.update_task(
            ctx.owner_id,
            action.task_id,
            agent_id=ctx.agent_id,
            board_column_id=action.board_column_id,
            board_column_name=action.board_column_name,
            source=ctx.channel,
        )
        ctx.touch(action.task_id)

    async def _delegate(self, action: DelegateToAgentAction, ctx: ActionContext) -> None:
        if self.delegator is None:
            logger.warning("delegation_unavailable", target=action.target_agent_slug)
            return
        await self.delegator.delegate(
            ctx.owner_id,
            action.target_agent_slug,
            action.task_description,
            from_agent_id=ctx.agent_id,
            hop_count=0 if ctx.hop_count is None else ctx.hop_count + 1,
        )

    async def _generate_image(self, action: GenerateImageAction, ctx: ActionContext) -> None:
        logger.info("generate_image_requested", owner_id=ctx.owner_id, prompt=action.prompt[:100])

    async def _generate_audio(self, action: GenerateAudioAction, ctx: ActionContext) -> None:
        agent_id = ctx.agent_id
        if agent_id is None:
            default_agent = await self._directory.get_default_agent(ctx.owner_id)
            agent_id = default_agent.id if default_agent else None

        audio_ref = await self._audio.generate(ctx.owner_id, agent_id, action.text)
        if audio_ref and action.task_id:
            await self._board.link_outcome_audio(ctx.owner_id, action.task_id, audio_ref)
            ctx.touch(action.task_id)

    async def _call_tool(self, action: CallToolAction, ctx: ActionContext) -> None:
        """Record the request; no tool registry is wired into the runtime."""
        logger.info("call_tool_requested", owner_id=ctx.owner_id, tool_name=action.tool_name)

    async def _create_knowledge_node(
        self, action: CreateKnowledgeNodeAction, ctx: ActionContext
    ) -> None:
        await self._graph.create_node(
            ctx.owner_id,
            title=action.title,
            description=action.description,
            content=action.content,
            node_type=action.node_type,
            tags=action.tags,
            agent_id=ctx.agent_id,
        )

    async def _link_knowledge_nodes(
        self, action: LinkKnowledgeNodesAction, ctx: ActionContext
    ) -> None:
        await self._graph.link(ctx.owner_id, action.source_node_id, action.target_node_id)
