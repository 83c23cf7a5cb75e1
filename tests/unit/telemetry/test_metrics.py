"""Unit tests for mcplink telemetry metrics."""

from typing import Any

import pytest
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import InMemoryMetricReader

from mcplink.telemetry import METRIC_PREFIX, MCPLinkMetrics, MetricLabels


@pytest.fixture
def reader() -> InMemoryMetricReader:
    return InMemoryMetricReader()


@pytest.fixture
def metrics(reader) -> MCPLinkMetrics:
    provider = MeterProvider(metric_readers=[reader])
    return MCPLinkMetrics(provider.get_meter("mcplink-test"))


def _points(reader: InMemoryMetricReader) -> dict[str, list[Any]]:
    """Collected data points keyed by metric name."""
    points: dict[str, list[Any]] = {}
    data = reader.get_metrics_data()
    if data is None:
        return points
    for resource_metrics in data.resource_metrics:
        for scope_metrics in resource_metrics.scope_metrics:
            for metric in scope_metrics.metrics:
                points.setdefault(metric.name, []).extend(metric.data.data_points)
    return points


class TestMCPLinkMetrics:
    """Tests for MCPLinkMetrics."""

    def test_default_meter(self):
        """Test that the API's global meter works without an SDK."""
        metrics = MCPLinkMetrics()
        metrics.record_connect("stdio", MetricLabels.STATUS_SUCCESS, 0.1)
        metrics.record_capability_call("list_tools", MetricLabels.STATUS_SUCCESS)

    def test_record_connect(self, metrics, reader):
        metrics.record_connect("stdio", MetricLabels.STATUS_SUCCESS, 0.25)
        metrics.record_connect("stdio", MetricLabels.STATUS_SUCCESS, 0.75)
        metrics.record_connect("sse", MetricLabels.STATUS_TIMEOUT, 30.0)

        points = _points(reader)
        attempts = {
            (p.attributes["transport"], p.attributes["status"]): p.value
            for p in points[f"{METRIC_PREFIX}_connect_attempts_total"]
        }
        assert attempts == {("stdio", "success"): 2, ("sse", "timeout"): 1}

        durations = points[f"{METRIC_PREFIX}_connect_duration_seconds"]
        stdio = next(p for p in durations if p.attributes["transport"] == "stdio")
        assert stdio.count == 2
        assert stdio.sum == pytest.approx(1.0)

    def test_record_capability_call(self, metrics, reader):
        metrics.record_capability_call("call_tool", MetricLabels.STATUS_SUCCESS)
        metrics.record_capability_call("call_tool", MetricLabels.STATUS_ERROR)

        calls = _points(reader)[f"{METRIC_PREFIX}_capability_calls_total"]
        assert {(p.attributes["operation"], p.attributes["status"]) for p in calls} == {
            ("call_tool", "success"),
            ("call_tool", "error"),
        }

    def test_active_connections_gauge(self, metrics, reader):
        """Test that the gauge reads the callback at collection time."""
        live = {"count": 2}
        metrics.observe_active_connections(lambda: live["count"])

        first = _points(reader)[f"{METRIC_PREFIX}_active_connections"]
        live["count"] = 5
        second = _points(reader)[f"{METRIC_PREFIX}_active_connections"]

        assert [p.value for p in first] == [2]
        assert [p.value for p in second] == [5]


class TestMetricLabels:
    """Tests for MetricLabels constants."""

    def test_labels(self):
        assert MetricLabels.OPERATION == "operation"
        assert MetricLabels.TRANSPORT == "transport"
        assert MetricLabels.STATUS == "status"

    def test_status_values(self):
        assert MetricLabels.STATUS_SUCCESS == "success"
        assert MetricLabels.STATUS_ERROR == "error"
        assert MetricLabels.STATUS_TIMEOUT == "timeout"
