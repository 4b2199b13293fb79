"""Prometheus metrics for insight volume, cache efficiency and provider health"""

from prometheus_client import Counter, Histogram

# Insight metrics
insight_request_counter = Counter(
    "insight_requests_total",
    "Insights served",
    ["operation", "source"],  # source: heuristic | gemini | openai
)

cache_hit_counter = Counter(
    "insight_cache_hits_total",
    "Insights served from the result cache",
    ["operation"],
)

rate_limited_counter = Counter(
    "insight_rate_limited_total",
    "Requests rejected by the per-user rate limiter",
    ["operation"],
)

# Provider metrics
provider_latency_histogram = Histogram(
    "provider_latency_seconds",
    "Text-generation provider response time",
    ["provider"],
    buckets=[0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 20.0],
)

provider_fallback_counter = Counter(
    "provider_fallback_total",
    "Refinement attempts discarded in favour of the heuristic",
    ["provider", "reason"],  # provider_error | extraction_error | unexpected_error
)

# Transaction store
store_fetch_failures_counter = Counter(
    "transaction_store_failures_total",
    "Failed transaction store reads",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_insight(operation: str, source: str, cached: bool) -> None:
    """Record an insight served, and whether the cache answered it"""
    insight_request_counter.labels(operation=operation, source=source).inc()
    if cached:
        cache_hit_counter.labels(operation=operation).inc()
