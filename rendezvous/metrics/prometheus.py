"""Prometheus metrics for the rendezvous resolver."""
from typing import TYPE_CHECKING, Optional

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, Histogram
import structlog

if TYPE_CHECKING:
    from ..state.node_registry import NodeRegistry

logger = structlog.get_logger()


class ResolverMetrics:
    """Prometheus metrics recorded by Rendezvous.

    Exposition is left to the embedding service (e.g. its own /metrics
    endpoint serving the same CollectorRegistry).
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None, namespace: str = "rendezvous"):
        """Create and register the resolver metrics.

        Args:
            registry: Collector registry to register into (default: global REGISTRY)
            namespace: Metric name prefix
        """
        self.registry = registry if registry is not None else REGISTRY
        self.namespace = namespace

        self.resolve_total = Counter(
            'resolve_total',
            'Total keys resolved to a node',
            namespace=namespace,
            registry=self.registry,
        )

        self.no_nodes_total = Counter(
            'no_nodes_total',
            'Resolutions that failed because no node was available',
            namespace=namespace,
            registry=self.registry,
        )

        self.nodes = Gauge(
            'nodes',
            'Number of registered nodes',
            namespace=namespace,
            registry=self.registry,
        )

        self.resolve_latency = Histogram(
            'resolve_latency_ms',
            'Resolution latency in milliseconds',
            namespace=namespace,
            registry=self.registry,
            buckets=[0.01, 0.05, 0.1, 0.5, 1, 5, 10, 50, 100],
        )

        logger.debug("resolver_metrics_registered", namespace=namespace)

    def record_resolve(self, duration_ms: float, count: int = 1) -> None:
        """Record successful resolutions.

        Args:
            duration_ms: Time spent resolving, in milliseconds
            count: Number of keys resolved in that time
        """
        self.resolve_total.inc(count)
        self.resolve_latency.observe(duration_ms)

    def increment_no_nodes(self) -> None:
        """Increment the failed-resolution counter."""
        self.no_nodes_total.inc()

    def track_nodes(self, registry: "NodeRegistry") -> None:
        """Report the node count of registry at collection time.

        Mutations made directly on a shared registry are reflected too.
        """
        self.nodes.set_function(lambda: len(registry))

    def __repr__(self) -> str:
        return f"ResolverMetrics(namespace={self.namespace!r})"
