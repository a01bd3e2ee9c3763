import threading

import pytest

from rendezvous.coordinator.resolver import Rendezvous
from rendezvous.errors import NoNodesAvailable
from rendezvous.state.node_registry import NodeRegistry


def test_resolve_metrics(metrics, collector_registry):
    r = Rendezvous(metrics=metrics)
    r.add_weighted_nodes({"s1.test.com": 1, "s2.test.com": 1})
    r.resolve("request")
    r.resolve_many(["a", "b", "c"])

    assert collector_registry.get_sample_value("rendezvous_resolve_total") == 4.0
    assert collector_registry.get_sample_value("rendezvous_resolve_latency_ms_count") == 2.0
    assert collector_registry.get_sample_value("rendezvous_nodes") == 2.0


def test_node_gauge_follows_mutations(metrics, collector_registry):
    r = Rendezvous(metrics=metrics)
    r.add_node("s1.test.com")
    r.add_weighted_node("s2.test.com", 3)
    assert collector_registry.get_sample_value("rendezvous_nodes") == 2.0
    r.remove_node("s1.test.com")
    r.remove_node("missing")
    assert collector_registry.get_sample_value("rendezvous_nodes") == 1.0


def test_no_nodes_metric(metrics, collector_registry):
    r = Rendezvous(metrics=metrics)
    with pytest.raises(NoNodesAvailable):
        r.resolve("request")

    assert collector_registry.get_sample_value("rendezvous_no_nodes_total") == 1.0
    assert collector_registry.get_sample_value("rendezvous_resolve_total") == 0.0


def test_repr(metrics):
    assert repr(metrics) == "ResolverMetrics(namespace='rendezvous')"


def test_node_gauge_reads_shared_registry(metrics, collector_registry):
    registry = NodeRegistry()
    Rendezvous(registry=registry, metrics=metrics)

    registry.add_weighted_nodes({"s1.test.com": 1, "s2.test.com": 2, "s3.test.com": 3})
    assert collector_registry.get_sample_value("rendezvous_nodes") == 3.0
    registry.remove_node("s2.test.com")
    assert collector_registry.get_sample_value("rendezvous_nodes") == 2.0


def test_node_gauge_after_concurrent_mutations(metrics, collector_registry):
    r = Rendezvous(metrics=metrics)

    def add(prefix):
        for i in range(100):
            r.add_node(f"{prefix}-{i}")

    threads = [threading.Thread(target=add, args=(prefix,)) for prefix in ("a", "b", "c")]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert collector_registry.get_sample_value("rendezvous_nodes") == 300.0
