"""App actions the model can request, as a closed tagged union.

Each variant has one validating constructor, ``from_raw``, that reads the
model's JSON object (camelCase keys, snake_case also accepted), trims and
clips fields, and returns None when the entry is unusable. Nothing here
raises on bad model output.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

from emissary.knowledge.models import MAX_CONTENT_LENGTH, MAX_DESCRIPTION_LENGTH, MAX_TAGS, NodeType

TaskStatus = Literal["pending", "in_progress", "completed", "failed"]
TERMINAL_STATUSES: frozenset[str] = frozenset({"completed", "failed"})

NODE_TYPES: tuple[str, ...] = ("concept", "technique", "reference", "moc", "claim", "procedure")
MAX_CAPABILITIES = 25
MAX_OUTCOME_LINKS = 8


def _raw(candidate: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in candidate:
            return candidate[key]
    return None


def _text(candidate: dict[str, Any], *keys: str) -> str:
    """Trimmed string field, or "" when missing or not a string."""
    value = _raw(candidate, *keys)
    return value.strip() if isinstance(value, str) else ""


def _optional_text(candidate: dict[str, Any], limit: int, *keys: str) -> str | None:
    value = _text(candidate, *keys)
    return value[:limit] if value else None


def _flag(candidate: dict[str, Any], *keys: str) -> bool:
    return _raw(candidate, *keys) is True


class CapabilitySpec(BaseModel):
    name: str = Field(..., max_length=64)
    description: str = Field(..., max_length=320)


def _capabilities(candidate: dict[str, Any]) -> list[CapabilitySpec]:
    raw = candidate.get("capabilities")
    if not isinstance(raw, list):
        return []
    capabilities: list[CapabilitySpec] = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        name = _text(entry, "name")[:64]
        description = _text(entry, "description")[:320]
        if name and description:
            capabilities.append(CapabilitySpec(name=name, description=description))
    return capabilities[:MAX_CAPABILITIES]


class CreateTaskAction(BaseModel):
    type: Literal["create_task"] = "create_task"
    description: str = Field(..., max_length=800)
    is_public: bool = False

    @classmethod
    def from_raw(cls, candidate: dict[str, Any]) -> "CreateTaskAction | None":
        description = _text(candidate, "description")
        if not description:
            return None
        return cls(description=description[:800], is_public=_flag(candidate, "isPublic", "is_public"))


class CreateFeedItemAction(BaseModel):
    type: Literal["create_feed_item"] = "create_feed_item"
    title: str = Field(..., max_length=120)
    content: str | None = Field(default=None, max_length=320)
    is_public: bool = False

    @classmethod
    def from_raw(cls, candidate: dict[str, Any]) -> "CreateFeedItemAction | None":
        title = _text(candidate, "title")
        if not title:
            return None
        return cls(
            title=title[:120],
            content=_optional_text(candidate, 320, "content"),
            is_public=_flag(candidate, "isPublic", "is_public"),
        )


class CreateSkillAction(BaseModel):
    type: Literal["create_skill"] = "create_skill"
    name: str = Field(..., max_length=80)
    bio: str | None = Field(default=None, max_length=1200)
    capabilities: list[CapabilitySpec] = Field(default_factory=list)

    @classmethod
    def from_raw(cls, candidate: dict[str, Any]) -> "CreateSkillAction | None":
        name = _text(candidate, "name")
        if not name:
            return None
        return cls(
            name=name[:80],
            bio=_optional_text(candidate, 1200, "bio"),
            capabilities=_capabilities(candidate),
        )


class UpdateTaskStatusAction(BaseModel):
    type: Literal["update_task_status"] = "update_task_status"
    task_id: str
    status: TaskStatus
    outcome_summary: str | None = Field(default=None, max_length=2000)
    outcome_links: list[str] | None = None

    @classmethod
    def from_raw(cls, candidate: dict[str, Any]) -> "UpdateTaskStatusAction | None":
        task_id = _text(candidate, "taskId", "task_id")
        status = candidate.get("status")
        if not task_id or status not in ("pending", "in_progress", "completed", "failed"):
            return None

        links_raw = _raw(candidate, "outcomeLinks", "outcome_links")
        links = None
        if isinstance(links_raw, list):
            links = [
                link.strip() for link in links_raw if isinstance(link, str) and link.strip()
            ][:MAX_OUTCOME_LINKS]

        return cls(
            task_id=task_id,
            status=status,
            outcome_summary=_optional_text(candidate, 2000, "outcomeSummary", "outcome_summary"),
            outcome_links=links,
        )


class MoveTaskAction(BaseModel):
    type: Literal["move_task"] = "move_task"
    task_id: str
    board_column_id: str | None = None
    board_column_name: str | None = Field(default=None, max_length=80)

    @classmethod
    def from_raw(cls, candidate: dict[str, Any]) -> "MoveTaskAction | None":
        task_id = _text(candidate, "taskId", "task_id")
        column_id = _text(candidate, "boardColumnId", "board_column_id") or None
        column_name = _optional_text(candidate, 80, "boardColumnName", "board_column_name")
        if not task_id or not (column_id or column_name):
            return None
        return cls(task_id=task_id, board_column_id=column_id, board_column_name=column_name)


class UpdateSkillAction(BaseModel):
    type: Literal["update_skill"] = "update_skill"
    skill_id: str
    name: str | None = Field(default=None, max_length=80)
    bio: str | None = Field(default=None, max_length=1200)
    capabilities: list[CapabilitySpec] | None = None
    is_active: bool | None = None

    @classmethod
    def from_raw(cls, candidate: dict[str, Any]) -> "UpdateSkillAction | None":
        skill_id = _text(candidate, "skillId", "skill_id")
        if not skill_id:
            return None
        is_active = _raw(candidate, "isActive", "is_active")
        return cls(
            skill_id=skill_id,
            name=_optional_text(candidate, 80, "name"),
            bio=_optional_text(candidate, 1200, "bio"),
            capabilities=_capabilities(candidate) or None,
            is_active=is_active if isinstance(is_active, bool) else None,
        )


class CreateSubtaskAction(BaseModel):
    type: Literal["create_subtask"] = "create_subtask"
    parent_task_id: str
    description: str = Field(..., max_length=800)
    is_public: bool = False

    @classmethod
    def from_raw(cls, candidate: dict[str, Any]) -> "CreateSubtaskAction | None":
        parent_task_id = _text(candidate, "parentTaskId", "parent_task_id")
        description = _text(candidate, "description")
        if not parent_task_id or not description:
            return None
        return cls(
            parent_task_id=parent_task_id,
            description=description[:800],
            is_public=_flag(candidate, "isPublic", "is_public"),
        )


class DelegateToAgentAction(BaseModel):
    type: Literal["delegate_to_agent"] = "delegate_to_agent"
    target_agent_slug: str
    task_description: str = Field(..., max_length=800)

    @classmethod
    def from_raw(cls, candidate: dict[str, Any]) -> "DelegateToAgentAction | None":
        slug = _text(candidate, "targetAgentSlug", "target_agent_slug")
        description = _text(candidate, "taskDescription", "task_description")
        if not slug or not description:
            return None
        return cls(target_agent_slug=slug, task_description=description[:800])


class GenerateImageAction(BaseModel):
    type: Literal["generate_image"] = "generate_image"
    prompt: str = Field(..., max_length=1000)
    task_id: str | None = None

    @classmethod
    def from_raw(cls, candidate: dict[str, Any]) -> "GenerateImageAction | None":
        prompt = _text(candidate, "prompt")
        if not prompt:
            return None
        return cls(prompt=prompt[:1000], task_id=_text(candidate, "taskId", "task_id") or None)


class GenerateAudioAction(BaseModel):
    type: Literal["generate_audio"] = "generate_audio"
    text: str = Field(..., max_length=5000)
    task_id: str | None = None

    @classmethod
    def from_raw(cls, candidate: dict[str, Any]) -> "GenerateAudioAction | None":
        text = _text(candidate, "text")
        if not text:
            return None
        return cls(text=text[:5000], task_id=_text(candidate, "taskId", "task_id") or None)


class CallToolAction(BaseModel):
    type: Literal["call_tool"] = "call_tool"
    tool_name: str = Field(..., max_length=120)
    input: dict[str, Any] | None = None

    @classmethod
    def from_raw(cls, candidate: dict[str, Any]) -> "CallToolAction | None":
        tool_name = _text(candidate, "toolName", "tool_name")
        if not tool_name:
            return None
        tool_input = candidate.get("input")
        return cls(
            tool_name=tool_name[:120],
            input=tool_input if isinstance(tool_input, dict) else None,
        )


class CreateKnowledgeNodeAction(BaseModel):
    type: Literal["create_knowledge_node"] = "create_knowledge_node"
    title: str = Field(..., max_length=120)
    description: str = Field(..., max_length=MAX_DESCRIPTION_LENGTH)
    content: str = Field(..., max_length=MAX_CONTENT_LENGTH)
    node_type: NodeType = "concept"
    tags: list[str] | None = None

    @classmethod
    def from_raw(cls, candidate: dict[str, Any]) -> "CreateKnowledgeNodeAction | None":
        title = _text(candidate, "title")
        content = candidate.get("content")
        if not title or not isinstance(content, str) or not content:
            return None
        description = _text(candidate, "description") or title
        node_type = _raw(candidate, "nodeType", "node_type")
        tags_raw = candidate.get("tags")
        return cls(
            title=title[:120],
            description=description[:MAX_DESCRIPTION_LENGTH],
            content=content[:MAX_CONTENT_LENGTH],
            node_type=node_type if node_type in NODE_TYPES else "concept",
            tags=(
                [tag for tag in tags_raw if isinstance(tag, str)][:MAX_TAGS]
                if isinstance(tags_raw, list)
                else None
            ),
        )


class LinkKnowledgeNodesAction(BaseModel):
    type: Literal["link_knowledge_nodes"] = "link_knowledge_nodes"
    source_node_id: str
    target_node_id: str

    @classmethod
    def from_raw(cls, candidate: dict[str, Any]) -> "LinkKnowledgeNodesAction | None":
        source = _text(candidate, "sourceNodeId", "source_node_id")
        target = _text(candidate, "targetNodeId", "target_node_id")
        if not source or not target:
            return None
        return cls(source_node_id=source, target_node_id=target)


AppAction = Annotated[
    Union[
        CreateTaskAction,
        CreateFeedItemAction,
        CreateSkillAction,
        UpdateTaskStatusAction,
        MoveTaskAction,
        UpdateSkillAction,
        CreateSubtaskAction,
        DelegateToAgentAction,
        GenerateImageAction,
        GenerateAudioAction,
        CallToolAction,
        CreateKnowledgeNodeAction,
        LinkKnowledgeNodesAction,
    ],
    Field(discriminator="type"),
]

ACTION_TYPES: dict[str, type[BaseModel]] = {
    "create_task": CreateTaskAction,
    "create_feed_item": CreateFeedItemAction,
    "create_skill": CreateSkillAction,
    "update_task_status": UpdateTaskStatusAction,
    "move_task": MoveTaskAction,
    "update_skill": UpdateSkillAction,
    "create_subtask": CreateSubtaskAction,
    "delegate_to_agent": DelegateToAgentAction,
    "generate_image": GenerateImageAction,
    "generate_audio": GenerateAudioAction,
    "call_tool": CallToolAction,
    "create_knowledge_node": CreateKnowledgeNodeAction,
    "link_knowledge_nodes": LinkKnowledgeNodesAction,
}


def action_from_raw(candidate: Any) -> AppAction | None:
    """Build the action variant named by ``candidate["type"]``, if valid."""
    if not isinstance(candidate, dict):
        return None
    action_type = candidate.get("type")
    if not isinstance(action_type, str):
        return None
    action_cls = ACTION_TYPES.get(action_type)
    if action_cls is None:
        return None
    return action_cls.from_raw(candidate)  # type: ignore[attr-defined]
