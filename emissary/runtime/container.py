"""Wires stores, collaborators and services into one runtime.

Every collaborator can be swapped through keyword overrides; anything not
given gets its in-memory implementation.
"""

from dataclasses import dataclass, field
from typing import Any

from emissary.a2a.controller import A2AController
from emissary.agents.store import AgentDirectory, CredentialStore
from emissary.agents.stores.inmemory import InMemoryAgentDirectory, InMemoryCredentialStore
from emissary.audit.store import AuditStore
from emissary.audit.stores.inmemory import InMemoryAuditStore
from emissary.collaborators.audio import AudioGenerator, InMemoryAudioGenerator
from emissary.collaborators.board import InMemoryTaskBoard, TaskBoard
from emissary.collaborators.feed import FeedPublisher, InMemoryFeedPublisher
from emissary.collaborators.mail import InMemoryOutboundMailer, OutboundMailer
from emissary.config.settings import Settings
from emissary.conversations.store import ConversationStore
from emissary.conversations.stores.inmemory import InMemoryConversationStore
from emissary.knowledge.graph import KnowledgeGraph
from emissary.knowledge.recall import KnowledgeRecallEngine
from emissary.knowledge.store import KnowledgeStore
from emissary.knowledge.stores.inmemory import InMemoryKnowledgeStore
from emissary.memory.recall import SemanticRecall
from emissary.memory.store import MemoryStore
from emissary.memory.stores.inmemory import InMemoryMemoryStore
from emissary.providers.llm.gateway import ProviderGateway
from emissary.runtime.context import ContextAssembler
from emissary.runtime.dispatcher import ActionDispatcher
from emissary.runtime.engine import MessagePipeline
from emissary.security.screener import InputScreener
from emissary.webhooks.processors.agentmail import AgentMailProcessor
from emissary.webhooks.processors.base import WebhookProcessor
from emissary.webhooks.queue import WebhookRetryQueue
from emissary.webhooks.store import WebhookRetryStore
from emissary.webhooks.stores.inmemory import InMemoryWebhookRetryStore


@dataclass
class Runtime:
    settings: Settings
    directory: AgentDirectory
    credentials: CredentialStore
    gateway: Any
    memory_store: MemoryStore
    knowledge_store: KnowledgeStore
    knowledge_graph: KnowledgeGraph
    audit_store: AuditStore
    conversations: ConversationStore
    task_board: TaskBoard
    feed: FeedPublisher
    audio: AudioGenerator
    mailer: OutboundMailer
    pipeline: MessagePipeline
    a2a: A2AController
    retry_queue: WebhookRetryQueue
    processors: dict[str, WebhookProcessor] = field(default_factory=dict)

    def processor_for(self, provider: str) -> WebhookProcessor | None:
        return self.processors.get(provider)

    async def close(self) -> None:
        close = getattr(self.gateway, "close", None)
        if close is not None:
            await close()


def build_runtime(
    settings: Settings | None = None,
    *,
    directory: AgentDirectory | None = None,
    credentials: CredentialStore | None = None,
    gateway: Any = None,
    memory_store: MemoryStore | None = None,
    knowledge_store: KnowledgeStore | None = None,
    audit_store: AuditStore | None = None,
    conversations: ConversationStore | None = None,
    task_board: TaskBoard | None = None,
    feed: FeedPublisher | None = None,
    audio: AudioGenerator | None = None,
    mailer: OutboundMailer | None = None,
    retry_store: WebhookRetryStore | None = None,
    screener: InputScreener | None = None,
) -> Runtime:
    """Build a fully wired runtime."""
    settings = settings or Settings()
    directory = directory or InMemoryAgentDirectory()
    credentials = credentials or InMemoryCredentialStore()
    gateway = gateway or ProviderGateway(settings.providers)
    memory_store = memory_store or InMemoryMemoryStore()
    knowledge_store = knowledge_store or InMemoryKnowledgeStore()
    audit_store = audit_store or InMemoryAuditStore()
    conversations = conversations or InMemoryConversationStore()
    task_board = task_board or InMemoryTaskBoard()
    feed = feed or InMemoryFeedPublisher()
    audio = audio or InMemoryAudioGenerator()
    mailer = mailer or InMemoryOutboundMailer()
    retry_store = retry_store or InMemoryWebhookRetryStore()

    pipeline_config = settings.pipeline
    semantic_recall = SemanticRecall(
        gateway, credentials, memory_store, settings.providers.embedding
    )
    knowledge_engine = KnowledgeRecallEngine(
        knowledge_store,
        full_content_count=pipeline_config.knowledge_full_content_count,
        moc_candidate_limit=pipeline_config.moc_candidate_limit,
    )
    knowledge_graph = KnowledgeGraph(knowledge_store)
    context = ContextAssembler(memory_store, semantic_recall, knowledge_engine, pipeline_config)
    dispatcher = ActionDispatcher(
        task_board=task_board,
        feed=feed,
        audio=audio,
        directory=directory,
        knowledge_graph=knowledge_graph,
    )
    pipeline = MessagePipeline(
        directory=directory,
        credentials=credentials,
        gateway=gateway,
        memory_store=memory_store,
        semantic_recall=semantic_recall,
        context=context,
        dispatcher=dispatcher,
        audit_store=audit_store,
        task_board=task_board,
        screener=screener,
        config=pipeline_config,
    )
    a2a = A2AController(
        pipeline=pipeline,
        directory=directory,
        memory_store=memory_store,
        conversations=conversations,
        audit_store=audit_store,
        feed=feed,
        config=settings.a2a,
    )
    dispatcher.delegator = a2a

    agentmail = AgentMailProcessor(
        pipeline=pipeline,
        directory=directory,
        conversations=conversations,
        mailer=mailer,
        feed=feed,
    )

    return Runtime(
        settings=settings,
        directory=directory,
        credentials=credentials,
        gateway=gateway,
        memory_store=memory_store,
        knowledge_store=knowledge_store,
        knowledge_graph=knowledge_graph,
        audit_store=audit_store,
        conversations=conversations,
        task_board=task_board,
        feed=feed,
        audio=audio,
        mailer=mailer,
        pipeline=pipeline,
        a2a=a2a,
        retry_queue=WebhookRetryQueue(retry_store, settings.webhooks),
        processors={agentmail.provider: agentmail},
    )
