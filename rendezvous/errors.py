"""Exceptions raised by the rendezvous resolver."""


class RendezvousError(Exception):
    """Base class for all resolver errors."""


class NoNodesAvailable(RendezvousError, LookupError):
    """Raised when a key is resolved against a registry with no eligible node.

    This is an expected condition (e.g. every backend drained), callers are
    expected to catch it and degrade.
    """

    def __init__(self, key: str, registered: int = 0):
        self.key = key
        self.registered = registered
        if registered:
            message = f"No node with a positive weight among {registered} registered nodes"
        else:
            message = "No nodes available"
        super().__init__(f"{message} (key={key!r})")


class InternalInconsistency(RendezvousError, RuntimeError):
    """Raised when a node is scored against a snapshot that does not contain it."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"{node_id!r} is not a valid node in the scored snapshot")


class InvalidWeight(RendezvousError, ValueError):
    """Raised for a non-positive weight when strict weight checking is enabled."""

    def __init__(self, node_id: str, weight: float):
        self.node_id = node_id
        self.weight = weight
        super().__init__(f"Weight must be positive, got {weight} for {node_id!r}")
