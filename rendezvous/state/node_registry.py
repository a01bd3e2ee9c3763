"""Concurrency-safe node -> weight registry."""
from typing import Dict, Iterable, Mapping, Optional, Tuple, Union

import structlog

from ..errors import InvalidWeight
from .rw_lock import ReadWriteLock

logger = structlog.get_logger()

WeightPairs = Union[Mapping[str, float], Iterable[Tuple[str, float]]]

DEFAULT_WEIGHT = 1.0


class NodeRegistry:
    """Mapping from node identifier to weight guarded by a read/write lock.

    Re-adding an identifier overwrites its weight. Iteration order of the
    underlying dict is never relied upon by the resolver.
    """

    def __init__(self, reject_non_positive_weights: bool = False):
        """Initialize an empty registry.

        Args:
            reject_non_positive_weights: Raise InvalidWeight for weight <= 0
                instead of storing a node that can never be selected
        """
        self.reject_non_positive_weights = reject_non_positive_weights
        self._nodes: Dict[str, float] = {}
        self._lock = ReadWriteLock()

    def _check_weight(self, node_id: str, weight: float) -> float:
        weight = float(weight)
        if self.reject_non_positive_weights and weight <= 0:
            raise InvalidWeight(node_id, weight)
        return weight

    def add_node(self, node_id: str) -> None:
        """Add a node with the default weight of 1."""
        self.add_weighted_node(node_id, DEFAULT_WEIGHT)

    def add_weighted_node(self, node_id: str, weight: float) -> None:
        """Insert a node or overwrite its weight.

        Args:
            node_id: Node identifier
            weight: Relative weight (<= 0 is stored but never selected)
        """
        weight = self._check_weight(node_id, weight)
        with self._lock.write_locked():
            self._nodes[node_id] = weight
            count = len(self._nodes)

        logger.debug("node_added", node_id=node_id, weight=weight, nodes=count)

    def add_weighted_nodes(self, pairs: WeightPairs) -> None:
        """Apply many weight updates inside one write section.

        Readers observe either none or all of the updates.

        Args:
            pairs: Mapping of node_id -> weight, or iterable of (node_id, weight)
        """
        items = pairs.items() if isinstance(pairs, Mapping) else pairs
        # Validate the whole batch up front so a bad weight applies nothing
        checked = [(node_id, self._check_weight(node_id, weight)) for node_id, weight in items]

        with self._lock.write_locked():
            for node_id, weight in checked:
                self._nodes[node_id] = weight
            count = len(self._nodes)

        logger.debug("nodes_bulk_added", updated=len(checked), nodes=count)

    def remove_node(self, node_id: str) -> None:
        """Remove a node; unknown identifiers are ignored."""
        with self._lock.write_locked():
            removed = self._nodes.pop(node_id, None) is not None
            count = len(self._nodes)

        if removed:
            logger.debug("node_removed", node_id=node_id, nodes=count)

    def snapshot(self) -> Dict[str, float]:
        """Return a consistent copy of all node -> weight pairs.

        Taken under a single read acquisition, so concurrent writers can
        never leave it half-updated.
        """
        with self._lock.read_locked():
            return dict(self._nodes)

    def weight(self, node_id: str) -> Optional[float]:
        """Return the weight of a node, or None if it is not registered."""
        with self._lock.read_locked():
            return self._nodes.get(node_id)

    def __contains__(self, node_id: object) -> bool:
        with self._lock.read_locked():
            return node_id in self._nodes

    def __len__(self) -> int:
        """Return the number of registered nodes."""
        with self._lock.read_locked():
            return len(self._nodes)

    def __repr__(self) -> str:
        return f"NodeRegistry(nodes={len(self)})"
