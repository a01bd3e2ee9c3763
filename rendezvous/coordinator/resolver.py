"""Weighted rendezvous (Highest Random Weight) resolver.

Example:

    r = new()
    r.add_weighted_nodes({
        "s1.test.com": 5,
        "s2.test.com": 1,
        "s3.test.com": 10,
    })

    selected = r.resolve("some-request")

References:
    https://en.wikipedia.org/wiki/Rendezvous_hashing
    https://www.snia.org/sites/default/files/SDC15_presentations/dist_sys/Jason_Resch_New_Consistent_Hashings_Rev.pdf
"""
import time
from typing import Dict, Iterable, Mapping, Optional

from prometheus_client import CollectorRegistry
import structlog

from ..config import RendezvousConfig
from ..errors import NoNodesAvailable
from ..metrics.prometheus import ResolverMetrics
from ..state.node_registry import NodeRegistry, WeightPairs
from .hashers import Hasher, fnv1a_32, get_hasher
from .scoring import score_from_snapshot

logger = structlog.get_logger()


class Rendezvous:
    """Selects one node per key using weighted rendezvous hashing.

    The hasher is fixed for the lifetime of the instance; swapping it would
    remap keys arbitrarily.
    """

    def __init__(
        self,
        hasher: Optional[Hasher] = None,
        registry: Optional[NodeRegistry] = None,
        metrics: Optional[ResolverMetrics] = None,
        reject_non_positive_weights: bool = False
    ):
        """Initialize resolver.

        Args:
            hasher: 32-bit hash function over bytes (default: FNV-1a)
            registry: Node registry to resolve against (default: new empty registry)
            metrics: Optional Prometheus metrics to record into
            reject_non_positive_weights: Strict weight policy for a new registry
        """
        self._hasher = hasher if hasher is not None else fnv1a_32
        if registry is None:
            registry = NodeRegistry(reject_non_positive_weights=reject_non_positive_weights)
        self.registry = registry
        self.metrics = metrics
        if metrics is not None:
            metrics.track_nodes(registry)

        logger.debug(
            "resolver_initialized",
            hasher=getattr(self._hasher, "__name__", repr(self._hasher)),
            nodes=len(registry),
            metrics=metrics is not None
        )

    @classmethod
    def from_config(
        cls,
        config: RendezvousConfig,
        collector_registry: Optional[CollectorRegistry] = None
    ) -> "Rendezvous":
        """Build a resolver from configuration.

        Args:
            config: Resolver configuration
            collector_registry: Registry for metrics when enabled (default: global REGISTRY)

        Raises:
            ValueError: If the configuration is invalid
        """
        config.validate()

        metrics = ResolverMetrics(registry=collector_registry) if config.enable_metrics else None
        resolver = cls(
            hasher=get_hasher(config.hasher),
            metrics=metrics,
            reject_non_positive_weights=config.reject_non_positive_weights
        )
        if config.nodes:
            resolver.add_weighted_nodes(config.nodes)

        logger.info("resolver_configured", hasher=config.hasher, nodes=len(resolver))
        return resolver

    @property
    def hasher(self) -> Hasher:
        return self._hasher

    def add_node(self, node_id: str) -> None:
        """Add a node with weight 1."""
        self.registry.add_node(node_id)

    def add_weighted_node(self, node_id: str, weight: float) -> None:
        """Add a node, or overwrite the weight of an existing one."""
        self.registry.add_weighted_node(node_id, weight)

    def add_weighted_nodes(self, pairs: WeightPairs) -> None:
        """Add or overwrite many nodes atomically."""
        self.registry.add_weighted_nodes(pairs)

    def remove_node(self, node_id: str) -> None:
        """Remove a node if present."""
        self.registry.remove_node(node_id)

    def nodes(self) -> Dict[str, float]:
        """Return a snapshot of node -> weight."""
        return self.registry.snapshot()

    def resolve(self, key: str) -> str:
        """Return the node with the highest score for key.

        Raises:
            NoNodesAvailable: If no node is registered, or none has a positive weight
        """
        start = time.perf_counter()
        node_id = self._select(self.registry.snapshot(), key)
        if self.metrics is not None:
            self.metrics.record_resolve((time.perf_counter() - start) * 1000)
        return node_id

    def resolve_many(self, keys: Iterable[str]) -> Dict[str, str]:
        """Resolve many keys against a single registry snapshot.

        Args:
            keys: Keys to assign

        Returns:
            Dictionary mapping key -> node_id

        Raises:
            NoNodesAvailable: If no node is registered, or none has a positive weight
        """
        start = time.perf_counter()
        snapshot = self.registry.snapshot()
        assignments = {key: self._select(snapshot, key) for key in keys}
        if self.metrics is not None and assignments:
            self.metrics.record_resolve((time.perf_counter() - start) * 1000, count=len(assignments))
        return assignments

    def _select(self, snapshot: Mapping[str, float], key: str) -> str:
        """Arg-max over the snapshot; exact ties go to the smaller node id."""
        winner: Optional[str] = None
        max_score = 0.0

        for node_id in snapshot:
            score = score_from_snapshot(snapshot, node_id, key, self._hasher)
            if score > max_score or (score == max_score and winner is not None and node_id < winner):
                max_score = score
                winner = node_id

        if winner is None:
            if self.metrics is not None:
                self.metrics.increment_no_nodes()
            logger.warning("resolve_no_nodes", key=key, registered=len(snapshot))
            raise NoNodesAvailable(key, registered=len(snapshot))

        return winner

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.registry

    def __len__(self) -> int:
        """Return the number of registered nodes."""
        return len(self.registry)

    def __repr__(self) -> str:
        return f"Rendezvous(nodes={len(self)})"


def new(hasher: Optional[Hasher] = None) -> Rendezvous:
    """Create a resolver with an empty registry (FNV-1a unless hasher is given)."""
    return Rendezvous(hasher=hasher)
