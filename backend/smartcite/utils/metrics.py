"""Prometheus metrics for sessions, citations and external calls."""

from prometheus_client import Counter, Histogram

# External call metrics
tool_latency_ms = Histogram(
    "tool_latency_ms",
    "External call latency in milliseconds",
    ["tool", "outcome"],
    buckets=[50, 100, 250, 500, 1000, 2000, 5000, 10000, 30000, 60000],
)

tool_errors_total = Counter(
    "tool_errors_total",
    "Total external call errors",
    ["tool", "reason"],
)

# Domain metrics
sessions_created_total = Counter(
    "sessions_created_total",
    "Total sessions created from uploaded documents",
)

citation_results_total = Counter(
    "citation_results_total",
    "Total citation results produced",
    ["outcome"],
)


class PrometheusToolMetrics:
    """Prometheus-based tool metrics implementation."""

    def record_latency(self, tool: str, outcome: str, latency_ms: float) -> None:
        """Record tool execution latency."""
        tool_latency_ms.labels(tool=tool, outcome=outcome).observe(latency_ms)

    def inc_error(self, tool: str, reason: str) -> None:
        """Increment error counter."""
        tool_errors_total.labels(tool=tool, reason=reason).inc()
