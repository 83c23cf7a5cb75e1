"""mcplink telemetry - OpenTelemetry metrics."""

from .metrics import METRIC_PREFIX, MCPLinkMetrics, MetricLabels

__all__ = [
    "METRIC_PREFIX",
    "MCPLinkMetrics",
    "MetricLabels",
]
