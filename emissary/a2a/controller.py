"""Agent-to-agent messaging and delegation.

Each message moves through received, eligibility-checked, memory-recorded,
processed, response-recorded and audited. Every hop is an independent
pipeline run; the only state carried between hops is the hop count, and a
hop past the recipient's ceiling raises :class:`DelegationLoopError`.
"""

from emissary.a2a.errors import (
    AgentNotFoundError,
    DelegationLoopError,
    DelegationNotAllowedError,
    ThreadNotFoundError,
)
from emissary.a2a.models import (
    SendResult,
    ThreadDigest,
    ThreadMessage,
    ThreadSummary,
    thread_id_for,
)
from emissary.agents.models import Agent
from emissary.agents.store import AgentDirectory
from emissary.audit.models import AuditEntry
from emissary.audit.store import AuditStore
from emissary.collaborators.feed import FeedItem, FeedPublisher
from emissary.config.models.a2a import A2ASettings
from emissary.conversations.models import ConversationMessage
from emissary.conversations.store import ConversationStore
from emissary.memory.models import MemoryDirection, MemoryRecord
from emissary.memory.store import MemoryStore
from emissary.observability.logging import get_logger
from emissary.observability.metrics import A2A_MESSAGES

logger = get_logger(__name__)

A2A_CHANNEL = "a2a"
A2A_SCAN_LIMIT = 1000
PUBLIC_SKILL_SCAN_LIMIT = 20
DEFAULT_THREAD_LIMIT = 50
DEFAULT_MESSAGE_LIMIT = 100


class A2AController:
    """Sends, processes and lists agent-to-agent messages."""

    def __init__(
        self,
        *,
        pipeline,
        directory: AgentDirectory,
        memory_store: MemoryStore,
        conversations: ConversationStore,
        audit_store: AuditStore,
        feed: FeedPublisher,
        config: A2ASettings | None = None,
    ) -> None:
        self._pipeline = pipeline
        self._directory = directory
        self._memory = memory_store
        self._conversations = conversations
        self._audit = audit_store
        self._feed = feed
        self._config = config or A2ASettings()

    def max_hops_for(self, agent: Agent) -> int:
        configured = agent.a2a_config.max_auto_reply_hops
        return self._config.default_max_auto_reply_hops if configured is None else configured

    def check_hop(self, recipient: Agent, hop_count: int) -> int:
        """Clamp ``hop_count`` at zero and enforce the recipient's ceiling."""
        hop = max(0, hop_count)
        max_hops = self.max_hops_for(recipient)
        if hop > max_hops:
            A2A_MESSAGES.labels(status="loop_rejected").inc()
            logger.warning(
                "a2a_hop_limit_reached",
                recipient_id=recipient.id,
                hop_count=hop,
                max_hops=max_hops,
            )
            raise DelegationLoopError(hop, max_hops)
        return hop

    async def check_eligibility(self, sender: Agent, recipient: Agent) -> None:
        """Raise unless ``sender`` may message ``recipient``.

        Raises:
            DelegationNotAllowedError: A2A disabled on either side, or the
                recipient is not open to other accounts
        """
        if not sender.a2a_config.enabled:
            raise DelegationNotAllowedError("Sender agent does not allow A2A messaging")
        if not recipient.a2a_config.enabled:
            raise DelegationNotAllowedError("Recipient agent does not allow A2A messaging")
        if sender.owner_id == recipient.owner_id:
            return

        owner = await self._directory.get_owner(recipient.owner_id)
        skills = await self._directory.list_skills(
            recipient.owner_id, agent_id=recipient.id, limit=PUBLIC_SKILL_SCAN_LIMIT
        )
        has_public_skill = any(skill.is_published and skill.active for skill in skills)
        endpoints_visible = owner is not None and owner.privacy.endpoints_reachable

        if not (
            recipient.is_public
            and recipient.a2a_config.allow_public_agents
            and has_public_skill
            and endpoints_visible
            and recipient.public_connect.any_visible
        ):
            raise DelegationNotAllowedError(
                "Recipient agent is not open for cross-user A2A messaging"
            )

    async def _require_agent(self, agent_id: str) -> Agent:
        agent = await self._directory.get_agent(agent_id)
        if agent is None:
            raise AgentNotFoundError(f"Agent not found: {agent_id}")
        return agent

    async def send_message(
        self,
        from_agent_id: str,
        to_agent_id: str,
        message: str,
        *,
        thread_id: str | None = None,
        hop_count: int = 0,
    ) -> SendResult:
        """Deliver a message from one agent to another.

        Records symmetric transcripts, then processes the recipient's inbox
        right away unless the recipient turned auto-respond off.

        Raises:
            AgentNotFoundError: Either agent is unknown
            DelegationNotAllowedError: Eligibility failed
            DelegationLoopError: ``hop_count`` exceeds the recipient's ceiling
        """
        sender = await self._require_agent(from_agent_id)
        recipient = await self._require_agent(to_agent_id)
        await self.check_eligibility(sender, recipient)

        thread = thread_id or thread_id_for(sender.id, recipient.id)
        hop = self.check_hop(recipient, hop_count)

        await self._save_a2a_memory(
            sender, recipient, message, thread, hop, direction="outbound", role="assistant"
        )
        await self._save_a2a_memory(
            recipient, sender, message, thread, hop, direction="inbound", role="user"
        )

        conversation = await self._conversations.get_or_create(
            recipient.owner_id, A2A_CHANNEL, sender.id, agent_id=recipient.id
        )
        await self._conversations.add_message(
            conversation.id, ConversationMessage(role="user", content=message)
        )

        await self._audit.save_entry(
            AuditEntry(
                owner_id=sender.owner_id,
                agent_id=sender.id,
                action="a2a_message_sent",
                resource=A2A_CHANNEL,
                caller_type="a2a",
                caller_identity=sender.id,
                status="in_progress",
                details={"thread_id": thread, "to_agent_id": recipient.id, "hop_count": hop},
            )
        )
        if sender.is_public:
            await self._feed.publish(
                FeedItem(
                    owner_id=sender.owner_id,
                    item_type="message_handled",
                    title=f"{sender.name} sent an agent-to-agent message",
                    content=f"To {recipient.name}",
                    metadata={"thread_id": thread, "to_agent_id": recipient.id},
                    is_public=True,
                )
            )

        A2A_MESSAGES.labels(status="sent").inc()
        logger.info(
            "a2a_message_sent",
            from_agent_id=sender.id,
            to_agent_id=recipient.id,
            thread_id=thread,
            hop_count=hop,
        )

        result = SendResult(thread_id=thread, hop_count=hop)
        if not recipient.a2a_config.auto_respond:
            return result

        reply = await self.process_inbox(sender, recipient, message, thread, conversation.id, hop)
        return result.model_copy(update=reply)

    async def process_inbox(
        self,
        sender: Agent,
        recipient: Agent,
        message: str,
        thread_id: str,
        conversation_id: str,
        hop_count: int,
    ) -> dict:
        """Run the recipient's pipeline on a delivered message and record the reply."""
        result = await self._pipeline.process_message(
            recipient.owner_id,
            recipient.id,
            message,
            A2A_CHANNEL,
            caller_id=f"agent:{sender.id}",
            hop_count=hop_count,
        )

        await self._conversations.add_message(
            conversation_id, ConversationMessage(role="agent", content=result.response)
        )

        # The reply travels back one hop further along the chain
        await self._save_a2a_memory(
            sender,
            recipient,
            result.response,
            thread_id,
            hop_count + 1,
            direction="inbound",
            role="user",
        )
        sender_conversation = await self._conversations.get_or_create(
            sender.owner_id, A2A_CHANNEL, recipient.id, agent_id=sender.id
        )
        await self._conversations.add_message(
            sender_conversation.id, ConversationMessage(role="user", content=result.response)
        )

        status = "blocked" if result.blocked else "success"
        await self._audit.save_entry(
            AuditEntry(
                owner_id=sender.owner_id,
                agent_id=sender.id,
                action="a2a_message_completed",
                resource=A2A_CHANNEL,
                caller_type="a2a",
                caller_identity=sender.id,
                status=status,
                token_count=result.tokens_used,
                details={"thread_id": thread_id, "to_agent_id": recipient.id},
            )
        )
        await self._audit.save_entry(
            AuditEntry(
                owner_id=recipient.owner_id,
                agent_id=recipient.id,
                action="a2a_message_received",
                resource=A2A_CHANNEL,
                caller_type="a2a",
                caller_identity=sender.id,
                status=status,
                token_count=result.tokens_used,
                details={"thread_id": thread_id, "from_agent_id": sender.id},
            )
        )
        if recipient.is_public:
            await self._feed.publish(
                FeedItem(
                    owner_id=recipient.owner_id,
                    item_type="message_handled",
                    title=f"{recipient.name} handled an agent-to-agent message",
                    content=f"From {sender.name}",
                    metadata={"thread_id": thread_id, "from_agent_id": sender.id},
                    is_public=True,
                )
            )

        A2A_MESSAGES.labels(status=status).inc()
        return {
            "response": result.response,
            "blocked": result.blocked,
            "tokens_used": result.tokens_used,
        }

    async def delegate(
        self,
        owner_id: str,
        target_slug: str,
        task_description: str,
        *,
        from_agent_id: str | None = None,
        hop_count: int = 0,
    ) -> SendResult:
        """Hand a task to another of the owner's agents, found by slug.

        Delegation within one account skips the cross-account checks but
        still honours the target's hop ceiling. When the sender is known,
        both sides get the same directional transcript as ``send_message``.

        Raises:
            AgentNotFoundError: No agent with that slug
            DelegationLoopError: ``hop_count`` exceeds the target's ceiling
        """
        target = await self._directory.get_agent_by_slug(owner_id, target_slug)
        if target is None:
            raise AgentNotFoundError(f"No agent with slug {target_slug!r}")
        hop = self.check_hop(target, hop_count)
        thread = thread_id_for(from_agent_id, target.id) if from_agent_id else target.id

        sender = await self._directory.get_agent(from_agent_id) if from_agent_id else None
        if sender is not None:
            await self._save_a2a_memory(
                sender, target, task_description, thread, hop, direction="outbound", role="assistant"
            )
            await self._save_a2a_memory(
                target, sender, task_description, thread, hop, direction="inbound", role="user"
            )

        logger.info(
            "agent_delegation",
            owner_id=owner_id,
            from_agent_id=from_agent_id,
            to_agent_id=target.id,
            hop_count=hop,
        )
        result = await self._pipeline.process_message(
            owner_id,
            target.id,
            task_description,
            A2A_CHANNEL,
            caller_id=from_agent_id,
            hop_count=hop,
        )
        return SendResult(
            thread_id=thread,
            hop_count=hop,
            response=result.response,
            blocked=result.blocked,
            tokens_used=result.tokens_used,
        )

    async def _save_a2a_memory(
        self,
        owner_agent: Agent,
        peer: Agent,
        content: str,
        thread_id: str,
        hop_count: int,
        *,
        direction: MemoryDirection,
        role: str,
    ) -> None:
        await self._memory.add(
            MemoryRecord(
                owner_id=owner_agent.owner_id,
                agent_id=owner_agent.id,
                content=content,
                source=A2A_CHANNEL,
                metadata={
                    "role": role,
                    "thread_id": thread_id,
                    "hop_count": hop_count,
                    "peer_agent_id": peer.id,
                    "direction": direction,
                },
            )
        )

    async def _a2a_memories(self, owner_id: str) -> list[MemoryRecord]:
        return await self._memory.list_recent(
            owner_id, source=A2A_CHANNEL, kinds=("conversation",), limit=A2A_SCAN_LIMIT
        )

    async def list_threads(
        self,
        owner_id: str,
        direction: MemoryDirection,
        limit: int = DEFAULT_THREAD_LIMIT,
    ) -> list[ThreadSummary]:
        """Inbox (``inbound``) or outbox (``outbound``) threads, latest first."""
        grouped: dict[str, list[MemoryRecord]] = {}
        for record in await self._a2a_memories(owner_id):
            if record.direction != direction or record.thread_id is None:
                continue
            grouped.setdefault(record.thread_id, []).append(record)

        summaries: list[ThreadSummary] = []
        for thread_id, records in grouped.items():
            latest = max(records, key=lambda r: r.created_at)
            peer_id = latest.metadata.get("peer_agent_id")
            peer = await self._directory.get_agent(peer_id) if peer_id else None
            summaries.append(
                ThreadSummary(
                    thread_id=thread_id,
                    last_message_at=latest.created_at,
                    message_count=len(records),
                    peer_agent_id=peer_id,
                    peer_agent_name=peer.name if peer else None,
                    preview=latest.content[: self._config.summary_preview_chars],
                )
            )

        summaries.sort(key=lambda s: s.last_message_at, reverse=True)
        return summaries[:limit]

    async def inbox(self, owner_id: str, limit: int = DEFAULT_THREAD_LIMIT) -> list[ThreadSummary]:
        return await self.list_threads(owner_id, "inbound", limit)

    async def outbox(self, owner_id: str, limit: int = DEFAULT_THREAD_LIMIT) -> list[ThreadSummary]:
        return await self.list_threads(owner_id, "outbound", limit)

    async def thread_messages(
        self, owner_id: str, thread_id: str, limit: int = DEFAULT_MESSAGE_LIMIT
    ) -> list[ThreadMessage]:
        """The last ``limit`` directional messages of a thread, oldest first."""
        records = [
            r
            for r in await self._a2a_memories(owner_id)
            if r.thread_id == thread_id and r.direction is not None
        ]
        records.sort(key=lambda r: r.created_at)
        return [
            ThreadMessage(
                id=r.id,
                created_at=r.created_at,
                content=r.content,
                direction=r.direction,
                agent_id=r.agent_id,
                peer_agent_id=r.metadata.get("peer_agent_id"),
                hop_count=r.metadata.get("hop_count"),
            )
            for r in records[-limit:]
        ]

    async def summarize_thread(
        self, owner_id: str, thread_id: str, agent_id: str | None = None
    ) -> ThreadDigest:
        """Condense a thread into a ``conversation_summary`` memory.

        Raises:
            ThreadNotFoundError: The thread has no messages for this owner
        """
        records = [
            r
            for r in await self._a2a_memories(owner_id)
            if r.thread_id == thread_id and (agent_id is None or r.agent_id == agent_id)
        ]
        if not records:
            raise ThreadNotFoundError(f"No messages found for thread {thread_id}")
        records.sort(key=lambda r: r.created_at)

        preview = self._config.summary_preview_chars
        lines = [
            f"{'Sent' if r.direction == 'outbound' else 'Received'}: {r.content[:preview]}"
            for r in records[-self._config.summary_line_count :]
        ]
        summary = f"A2A thread summary ({len(records)} messages)\n" + "\n".join(lines)

        memory_id = await self._memory.add(
            MemoryRecord(
                owner_id=owner_id,
                agent_id=agent_id or records[-1].agent_id,
                kind="conversation_summary",
                content=summary,
                source=A2A_CHANNEL,
                metadata={"thread_id": thread_id, "message_count": len(records)},
            )
        )
        return ThreadDigest(
            summary_memory_id=memory_id, summary=summary, message_count=len(records)
        )
