"""Message pipeline: the single entry point for every inbound channel.

A run screens the input, resolves the agent's model and credentials,
gathers context, calls the model, parses the reply, dispatches actions
and writes memories and the audit entry. Writes after the model call are
not transactional; a failing write is logged and the run still returns.
"""

import time

from emissary.a2a.errors import DelegationLoopError
from emissary.agents.store import AgentDirectory, CredentialStore
from emissary.audit.models import AuditEntry, SecurityFlagRecord
from emissary.audit.store import AuditStore
from emissary.collaborators.board import TaskBoard
from emissary.config.models.pipeline import PipelineConfig
from emissary.memory.models import MemoryRecord
from emissary.memory.recall import SemanticRecall
from emissary.memory.store import MemoryStore
from emissary.observability.logging import get_logger, run_context
from emissary.observability.metrics import PIPELINE_LATENCY, PIPELINE_RUNS
from emissary.providers.llm.base import ProviderError
from emissary.providers.llm.diagnostics import describe_provider_failure
from emissary.runtime.agent_config import resolve_agent_config
from emissary.runtime.context import ContextAssembler
from emissary.runtime.dispatcher import ActionContext, ActionDispatcher
from emissary.runtime.parser import parse_response
from emissary.runtime.result import PipelineRun, ProcessResult
from emissary.security.models import SecurityFlag
from emissary.security.screener import InputScreener

logger = get_logger(__name__)

CONFIG_NOT_FOUND_MESSAGE = "Agent configuration not found. Please set up your agent."
MISSING_CREDENTIAL_MESSAGE = (
    "No API key configured for {provider}. Please add your API key in Settings."
)
MAX_REFLECTION_LENGTH = 8000
MAX_REFLECTION_CONTEXT = 500
SECURITY_SNIPPET_LENGTH = 200


class MessagePipeline:
    """Runs one inbound message through screening, the model and write-back.

    Example:
        result = await pipeline.process_message(owner_id, agent_id, "Hi", "api")
        print(result.response)
    """

    def __init__(
        self,
        *,
        directory: AgentDirectory,
        credentials: CredentialStore,
        gateway,
        memory_store: MemoryStore,
        semantic_recall: SemanticRecall,
        context: ContextAssembler,
        dispatcher: ActionDispatcher,
        audit_store: AuditStore,
        task_board: TaskBoard,
        screener: InputScreener | None = None,
        config: PipelineConfig | None = None,
    ) -> None:
        self._directory = directory
        self._credentials = credentials
        self._gateway = gateway
        self._memory_store = memory_store
        self._semantic_recall = semantic_recall
        self._context = context
        self._dispatcher = dispatcher
        self._audit_store = audit_store
        self._task_board = task_board
        self._screener = screener or InputScreener()
        self._config = config or PipelineConfig()

    @property
    def dispatcher(self) -> ActionDispatcher:
        return self._dispatcher

    async def process_message(
        self,
        owner_id: str,
        agent_id: str | None,
        message: str,
        channel: str,
        caller_id: str | None = None,
        hop_count: int | None = None,
    ) -> ProcessResult:
        """Process one inbound message.

        Args:
            owner_id: Account the message is addressed to
            agent_id: Agent handling it; None uses the owner's defaults
            message: Raw inbound text
            channel: api, email, phone, a2a, ...
            caller_id: Opaque caller identity for memory and audit
            hop_count: Position in an A2A chain; None outside delegation

        Returns:
            ProcessResult whose ``response`` is never empty

        Raises:
            DelegationLoopError: A delegated hop exceeded its ceiling
        """
        start_time = time.perf_counter()
        outcome = "error"
        try:
            with run_context(owner_id, agent_id, channel, hop_count):
                result = await self._run(
                    owner_id, agent_id, message, channel, caller_id, hop_count
                )
            outcome = "blocked" if result.blocked else "success"
            return result
        finally:
            PIPELINE_RUNS.labels(channel=channel, outcome=outcome).inc()
            PIPELINE_LATENCY.labels(channel=channel).observe(time.perf_counter() - start_time)

    async def _run(
        self,
        owner_id: str,
        agent_id: str | None,
        message: str,
        channel: str,
        caller_id: str | None,
        hop_count: int | None,
    ) -> ProcessResult:
        run = PipelineRun()

        # 1. Screen input
        step_start = run.start()
        scan = self._screener.scan(message)
        if scan.blocked:
            await self._record_blocked(owner_id, channel, message, scan.flags)
            run.record(
                "Security scan", step_start, "failed", "Blocked: " + ", ".join(scan.flag_types)
            )
            logger.info("message_blocked", owner_id=owner_id, channel=channel, flags=scan.flag_types)
            return ProcessResult(
                response=self._config.refusal_message,
                tokens_used=0,
                blocked=True,
                security_flags=scan.flag_types,
            )
        run.record("Security scan", step_start, "completed")
        warn_flags = scan.flag_types if scan.severity == "warn" else []

        # 2. Resolve agent config and credentials
        step_start = run.start()
        config = await resolve_agent_config(
            self._directory, owner_id, agent_id, max_skills=self._config.max_active_skills
        )
        if config is None:
            run.record("Config load", step_start, "failed", "Agent config not found")
            return ProcessResult(response=CONFIG_NOT_FOUND_MESSAGE)

        credential = await self._credentials.get_decrypted_api_key(owner_id, config.provider)
        if credential is None:
            run.record("Config load", step_start, "failed", f"No API key for {config.provider}")
            return ProcessResult(
                response=MISSING_CREDENTIAL_MESSAGE.format(provider=config.provider)
            )
        run.record("Config load", step_start, "completed", f"{config.provider}/{config.model}")

        # 3. Gather context
        step_start = run.start()
        bundle = await self._context.gather(owner_id, agent_id, scan.sanitized_input)
        run.record("Context build", step_start, "completed", bundle.describe())
        messages = self._context.assemble(config.system_prompt, bundle, scan.sanitized_input)

        # 4. Call the model
        step_start = run.start()
        try:
            completion = await self._gateway.invoke(
                config.provider,
                credential.api_key.get_secret_value(),
                config.model,
                messages,
                credential.base_url,
            )
        except ProviderError as e:
            run.record("LLM call", step_start, "failed", str(e)[:200])
            logger.error(
                "llm_call_failed",
                owner_id=owner_id,
                provider=config.provider,
                model=config.model,
                error=str(e),
            )
            return ProcessResult(
                response=describe_provider_failure(
                    config.provider, config.model, e, credential.base_url
                ),
                security_flags=warn_flags,
            )
        run.record("LLM call", step_start, "completed", f"{completion.tokens_used} tokens")

        # 5. Parse
        step_start = run.start()
        parsed = parse_response(completion.content)
        reply = parsed.visible_reply(self._config.empty_reply_placeholder)
        run.record("Parse response", step_start, "completed", f"{len(parsed.actions)} actions")

        # 6. Reflection and actions
        step_start = run.start()
        if parsed.thinking and agent_id:
            await self._save_reflection(owner_id, agent_id, parsed.thinking, message, channel)

        action_ctx = ActionContext(
            owner_id=owner_id,
            agent_id=agent_id,
            channel=channel,
            reply=reply,
            caller_id=caller_id,
            hop_count=hop_count,
        )
        try:
            report = await self._dispatcher.dispatch(parsed.actions, action_ctx)
        except DelegationLoopError as e:
            run.record("Execute actions", step_start, "failed", str(e))
            logger.warning(
                "delegation_loop_stopped",
                owner_id=owner_id,
                agent_id=agent_id,
                hop_count=e.hop_count,
                max_hops=e.max_hops,
            )
            raise
        run.record("Execute actions", step_start, "completed", report.detail)

        # 7. Memories
        step_start = run.start()
        await self._save_memories(
            owner_id,
            agent_id,
            channel,
            caller_id,
            message,
            reply,
            raw_content=completion.content,
            user_embedding=bundle.query_embedding,
        )
        run.record("Save memory", step_start, "completed")

        # 8. Audit and pipeline attachment
        await self._audit(
            AuditEntry(
                owner_id=owner_id,
                agent_id=agent_id,
                action="message_processed",
                resource=channel,
                caller_type="agent",
                caller_identity=caller_id or "anonymous",
                token_count=completion.tokens_used,
                status="success",
            )
        )
        await self._attach_run(run, action_ctx.touched_task_ids)

        logger.info(
            "message_processed",
            owner_id=owner_id,
            agent_id=agent_id,
            channel=channel,
            tokens_used=completion.tokens_used,
            actions=len(parsed.actions),
        )
        return ProcessResult(
            response=reply,
            tokens_used=completion.tokens_used,
            security_flags=warn_flags,
        )

    async def _record_blocked(
        self, owner_id: str, channel: str, message: str, flags: list[SecurityFlag]
    ) -> None:
        for flag in flags:
            try:
                await self._audit_store.save_security_flag(
                    SecurityFlagRecord(
                        owner_id=owner_id,
                        source=channel,
                        flag_type=flag.flag_type,
                        severity=flag.severity,
                        pattern=flag.match,
                        input_snippet=message[:SECURITY_SNIPPET_LENGTH],
                    )
                )
            except Exception as e:
                logger.warning("security_flag_write_failed", owner_id=owner_id, error=str(e))

    async def _save_reflection(
        self, owner_id: str, agent_id: str, thinking: str, message: str, channel: str
    ) -> None:
        try:
            await self._memory_store.add(
                MemoryRecord(
                    owner_id=owner_id,
                    agent_id=agent_id,
                    kind="reflection",
                    content=thinking[:MAX_REFLECTION_LENGTH],
                    source=channel,
                    metadata={"context": message[:MAX_REFLECTION_CONTEXT]},
                )
            )
        except Exception as e:
            logger.warning("reflection_write_failed", owner_id=owner_id, error=str(e))

    async def _save_memories(
        self,
        owner_id: str,
        agent_id: str | None,
        channel: str,
        caller_id: str | None,
        message: str,
        reply: str,
        *,
        raw_content: str,
        user_embedding: list[float] | None,
    ) -> None:
        try:
            await self._memory_store.add(
                MemoryRecord(
                    owner_id=owner_id,
                    agent_id=agent_id,
                    content=message,
                    source=channel,
                    embedding=user_embedding,
                    metadata={"role": "user", "caller_id": caller_id},
                )
            )
            assistant_embedding = await self._semantic_recall.embed(owner_id, raw_content)
            await self._memory_store.add(
                MemoryRecord(
                    owner_id=owner_id,
                    agent_id=agent_id,
                    content=reply,
                    source=channel,
                    embedding=assistant_embedding,
                    metadata={"role": "assistant"},
                )
            )
        except Exception as e:
            logger.warning("memory_write_failed", owner_id=owner_id, error=str(e))

    async def _audit(self, entry: AuditEntry) -> None:
        try:
            await self._audit_store.save_entry(entry)
        except Exception as e:
            logger.warning("audit_write_failed", owner_id=entry.owner_id, error=str(e))

    async def _attach_run(self, run: PipelineRun, task_ids: list[str]) -> None:
        steps = run.snapshot()
        for task_id in task_ids:
            try:
                await self._task_board.set_workflow_steps(task_id, steps)
            except Exception as e:
                logger.warning("workflow_steps_write_failed", task_id=task_id, error=str(e))
