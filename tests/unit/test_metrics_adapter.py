from prometheus_client import REGISTRY

from threadstacks.models.results import StackBuildSummary
from threadstacks.observability.metrics_adapter import (
    NoopMetricsAdapter,
    PrometheusMetricsAdapter,
)


def _summary(**overrides):  # noqa: ANN003
    values = dict(
        thread_count=5,
        entry_count=3,
        stack_count=1,
        largest_stack=3,
        dangling_parent_count=2,
        cyclic_stack_count=1,
        duration_seconds=0.002,
    )
    values.update(overrides)
    return StackBuildSummary(**values)


def test_noop_metrics_adapter_methods_do_nothing():
    m = NoopMetricsAdapter()
    m.observe_build(_summary())
    m.observe_stack_size(3)


def test_prometheus_adapter_records_build(monkeypatch):
    monkeypatch.setenv("HOSTNAME", "test-worker")
    labels = {"worker": "test-worker"}
    before = REGISTRY.get_sample_value("thread_stack_builds_total", labels) or 0.0
    dangling_before = (
        REGISTRY.get_sample_value("thread_stack_dangling_parent_refs_total", labels)
        or 0.0
    )

    m = PrometheusMetricsAdapter()
    m.observe_build(_summary())
    m.observe_stack_size(3)

    assert REGISTRY.get_sample_value("thread_stack_builds_total", labels) == before + 1
    assert (
        REGISTRY.get_sample_value("thread_stack_dangling_parent_refs_total", labels)
        == dangling_before + 2
    )
    assert (
        REGISTRY.get_sample_value(
            "thread_stack_entries_current", {"kind": "thread", "worker": "test-worker"}
        )
        == 2
    )
