"""Prometheus metrics for Emissary.

Counters and histograms for pipeline runs, screening, provider calls,
action dispatch, A2A delegation and webhook retries.
"""

from prometheus_client import Counter, Histogram

# Pipeline metrics
PIPELINE_RUNS = Counter(
    "emissary_pipeline_runs_total",
    "Total number of message pipeline runs",
    labelnames=["channel", "outcome"],
)

PIPELINE_LATENCY = Histogram(
    "emissary_pipeline_latency_seconds",
    "End-to-end message pipeline latency",
    labelnames=["channel"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)

PIPELINE_STEP_LATENCY = Histogram(
    "emissary_pipeline_step_latency_seconds",
    "Latency of individual pipeline steps",
    labelnames=["step"],
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 30.0),
)

# Screening metrics
SECURITY_FLAGS = Counter(
    "emissary_security_flags_total",
    "Security flags raised by the input screener",
    labelnames=["flag_type", "severity"],
)

# Provider metrics
PROVIDER_CALLS = Counter(
    "emissary_provider_calls_total",
    "Chat completion calls by provider and result",
    labelnames=["provider", "status"],
)

LLM_TOKENS = Counter(
    "emissary_llm_tokens_total",
    "Total LLM tokens reported by providers",
    labelnames=["provider"],
)

# Action metrics
ACTIONS_EXECUTED = Counter(
    "emissary_actions_executed_total",
    "App actions executed by the dispatcher",
    labelnames=["action_type", "status"],
)

# A2A metrics
A2A_MESSAGES = Counter(
    "emissary_a2a_messages_total",
    "Agent-to-agent messages by result",
    labelnames=["status"],
)

# Webhook metrics
WEBHOOK_RETRIES = Counter(
    "emissary_webhook_retries_total",
    "Webhook retry attempts by outcome",
    labelnames=["provider", "outcome"],
)
