"""Tests for Prometheus metrics."""

from __future__ import annotations

from prometheus_client import REGISTRY

from agent_controlplane_operator.metrics import (
    api_call_duration_seconds,
    api_call_total,
    control_plane_transitions_total,
    error_total,
    rate_limit_hits_total,
    reconcile_duration_seconds,
    reconcile_total,
    resources_created_total,
)


class TestMetricsExist:
    """Test that all expected metrics are defined."""

    def test_names(self):
        # Prometheus counters don't include "_total" in their _name attribute
        assert reconcile_total._name == "agent_controlplane_operator_reconcile"
        assert reconcile_duration_seconds._name == "agent_controlplane_operator_reconcile_duration_seconds"
        assert error_total._name == "agent_controlplane_operator_error"
        assert resources_created_total._name == "agent_controlplane_operator_resources_created"
        assert control_plane_transitions_total._name == "agent_controlplane_operator_control_plane_transitions"
        assert api_call_total._name == "agent_controlplane_operator_api_call"
        assert api_call_duration_seconds._name == "agent_controlplane_operator_api_call_duration_seconds"
        assert rate_limit_hits_total._name == "agent_controlplane_operator_rate_limit_hits"


class TestMetricsRecording:
    """Test that metrics can be recorded and read back."""

    def test_resources_created_increments(self):
        labels = {"kind": "AgentClusterInstall"}
        before = REGISTRY.get_sample_value("agent_controlplane_operator_resources_created_total", labels) or 0.0

        resources_created_total.labels(**labels).inc()

        after = REGISTRY.get_sample_value("agent_controlplane_operator_resources_created_total", labels)
        assert after == before + 1

    def test_reconcile_duration_observed(self):
        labels = {"kind": "TestKind"}
        before = REGISTRY.get_sample_value("agent_controlplane_operator_reconcile_duration_seconds_count", labels) or 0.0

        reconcile_duration_seconds.labels(**labels).observe(0.2)

        after = REGISTRY.get_sample_value("agent_controlplane_operator_reconcile_duration_seconds_count", labels)
        assert after == before + 1
