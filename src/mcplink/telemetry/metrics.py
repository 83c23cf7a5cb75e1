"""mcplink metrics - OpenTelemetry conventions.

Counters:
- mcplink_connect_attempts_total{transport, status}
- mcplink_capability_calls_total{operation, status}

Histograms:
- mcplink_connect_duration_seconds{transport, status}

Observable gauges:
- mcplink_active_connections (read from a callback at collection time)

Without an SDK MeterProvider configured, the OpenTelemetry API hands out
no-op instruments, so recording is always safe.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from opentelemetry import metrics
from opentelemetry.metrics import CallbackOptions, Counter, Histogram, Observation

METRIC_PREFIX = "mcplink"


@dataclass
class MetricLabels:
    """Standard metric labels/attributes."""

    OPERATION = "operation"
    STATUS = "status"
    TRANSPORT = "transport"

    STATUS_SUCCESS = "success"
    STATUS_ERROR = "error"
    STATUS_TIMEOUT = "timeout"


class MCPLinkMetrics:
    """Connection and capability-call instrumentation."""

    def __init__(self, meter: metrics.Meter | None = None):
        """Initialize metrics.

        Args:
            meter: OpenTelemetry Meter (defaults to the global "mcplink" meter)
        """
        self._meter = meter or metrics.get_meter(METRIC_PREFIX)

        self.connect_attempts_total: Counter = self._meter.create_counter(
            name=f"{METRIC_PREFIX}_connect_attempts_total",
            description="Total number of MCP server connect attempts",
            unit="1",
        )
        self.capability_calls_total: Counter = self._meter.create_counter(
            name=f"{METRIC_PREFIX}_capability_calls_total",
            description="Total number of tool, prompt and resource calls",
            unit="1",
        )
        self.connect_duration_seconds: Histogram = self._meter.create_histogram(
            name=f"{METRIC_PREFIX}_connect_duration_seconds",
            description="Time to open a transport and complete the MCP handshake",
            unit="s",
        )

    def record_connect(self, transport: str, status: str, duration_seconds: float) -> None:
        """Record a finished connect attempt."""
        attributes = {MetricLabels.TRANSPORT: transport, MetricLabels.STATUS: status}
        self.connect_attempts_total.add(1, attributes)
        self.connect_duration_seconds.record(duration_seconds, attributes)

    def record_capability_call(self, operation: str, status: str) -> None:
        """Record a tool/prompt/resource pass-through call."""
        self.capability_calls_total.add(
            1, {MetricLabels.OPERATION: operation, MetricLabels.STATUS: status}
        )

    def observe_active_connections(self, count: Callable[[], int]) -> None:
        """Report the number of live connections using ``count`` at collection time."""

        def _observe(options: CallbackOptions) -> Iterable[Observation]:
            return [Observation(count())]

        self._meter.create_observable_gauge(
            name=f"{METRIC_PREFIX}_active_connections",
            callbacks=[_observe],
            description="Number of live MCP server connections",
            unit="1",
        )
