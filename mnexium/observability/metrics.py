"""Prometheus metrics for the Mnexium client and demo server."""

from prometheus_client import Counter, Histogram

# Client request metrics
CLIENT_REQUESTS = Counter(
    "mnexium_client_requests_total",
    "Total number of requests sent to the Memory Service",
    labelnames=["method", "endpoint", "status"],
)

CLIENT_LATENCY = Histogram(
    "mnexium_client_request_latency_seconds",
    "Memory Service request latency in seconds",
    labelnames=["method", "endpoint"],
    buckets=(0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)

USAGE_LIMIT_HITS = Counter(
    "mnexium_usage_limit_hits_total",
    "Requests rejected with usage_limit_exceeded",
    labelnames=["endpoint"],
)

# LLM metrics, fed from the usage block of chat responses
LLM_TOKENS = Counter(
    "mnexium_llm_tokens_total",
    "Total LLM tokens reported by the service",
    labelnames=["provider", "model", "direction"],
)

# Demo server metrics
DEMO_FALLBACKS = Counter(
    "mnexium_demo_fallbacks_total",
    "Demo routes that answered with an empty-shaped fallback body",
    labelnames=["route", "reason"],
)
