import pytest
from prometheus_client import CollectorRegistry

from rendezvous.coordinator.resolver import Rendezvous, new
from rendezvous.metrics.prometheus import ResolverMetrics


@pytest.fixture
def resolver() -> Rendezvous:
    """Empty resolver with the default FNV-1a hasher."""
    return new()


@pytest.fixture
def collector_registry() -> CollectorRegistry:
    """Isolated Prometheus registry so metrics can be registered per test."""
    return CollectorRegistry()


@pytest.fixture
def metrics(collector_registry) -> ResolverMetrics:
    return ResolverMetrics(registry=collector_registry)


@pytest.fixture
def sample_keys() -> list:
    return [f"key-{i}" for i in range(20000)]
