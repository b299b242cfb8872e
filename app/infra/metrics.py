"""Prometheus metrics export."""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# JSON-RPC metrics
rpc_requests_total = Counter(
    "mcp_rpc_requests_total",
    "Total JSON-RPC requests",
    ["carrier", "method", "status"],
)

# Tool metrics
tool_calls_total = Counter(
    "tool_calls_total",
    "Total tool calls",
    ["tool_name", "status"],
)

tool_call_duration = Histogram(
    "tool_call_duration_seconds",
    "Tool call duration in seconds",
    ["tool_name"],
)

# Backend metrics
upstream_requests_total = Counter(
    "upstream_requests_total",
    "Total backend requests",
    ["endpoint", "status"],  # status: success | transport_error | http_error | app_error
)

upstream_request_duration = Histogram(
    "upstream_request_duration_seconds",
    "Backend request duration in seconds",
    ["endpoint"],
)


def get_metrics_response() -> Response:
    """Get Prometheus metrics response."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
