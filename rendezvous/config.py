"""Configuration management for the rendezvous resolver."""
import math
import os
from dataclasses import asdict, dataclass, field
from typing import Dict, Optional

from dotenv import load_dotenv

from .coordinator.hashers import DEFAULT_HASHER, HASHERS

load_dotenv()

LOG_LEVELS = ("debug", "info", "warn", "warning", "error")


def parse_nodes(value: str) -> Dict[str, float]:
    """Parse a node list of the form ``"s1.test.com=5,s2.test.com,s3.test.com=2.5"``.

    Nodes without ``=weight`` get weight 1.

    Raises:
        ValueError: If a weight is not a number
    """
    nodes: Dict[str, float] = {}
    for entry in value.split(","):
        entry = entry.strip()
        if not entry:
            continue
        node_id, sep, weight = entry.partition("=")
        node_id = node_id.strip()
        if not sep:
            nodes[node_id] = 1.0
            continue
        try:
            nodes[node_id] = float(weight)
        except ValueError:
            raise ValueError(f"Invalid weight for node {node_id!r}: {weight!r}") from None
    return nodes


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes")


@dataclass
class RendezvousConfig:
    """Configuration for a Rendezvous resolver."""

    # Hashing
    hasher: str = DEFAULT_HASHER

    # Registry policy
    reject_non_positive_weights: bool = False

    # Initial node set (node_id -> weight)
    nodes: Dict[str, float] = field(default_factory=dict)

    # Observability
    log_level: str = "info"
    enable_metrics: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "RendezvousConfig":
        """Load configuration from environment variables (and a .env file).

        Args:
            environ: Mapping to read instead of os.environ (for tests)
        """
        getenv = environ.get if environ is not None else os.getenv

        return cls(
            hasher=getenv("RENDEZVOUS_HASHER", DEFAULT_HASHER).strip(),
            reject_non_positive_weights=_as_bool(getenv("RENDEZVOUS_REJECT_NON_POSITIVE_WEIGHTS", "false")),
            nodes=parse_nodes(getenv("RENDEZVOUS_NODES", "")),
            # RENDEZVOUS_LOG_LEVEL with fallback to LOG_LEVEL
            log_level=getenv("RENDEZVOUS_LOG_LEVEL", getenv("LOG_LEVEL", "info")).lower(),
            enable_metrics=_as_bool(getenv("RENDEZVOUS_ENABLE_METRICS", "false")),
        )

    def validate(self) -> None:
        """Validate configuration."""
        if self.hasher not in HASHERS:
            raise ValueError(f"Invalid hasher: {self.hasher} (expected one of {sorted(HASHERS)})")

        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level}")

        for node_id, weight in self.nodes.items():
            if isinstance(weight, bool) or not isinstance(weight, (int, float)) or math.isnan(weight):
                raise ValueError(f"Invalid weight for node {node_id!r}: {weight!r}")

        if self.reject_non_positive_weights:
            for node_id, weight in self.nodes.items():
                if weight <= 0:
                    raise ValueError(f"Weight for node {node_id!r} must be positive, got {weight}")

    def as_dict(self) -> dict:
        """Return the configuration as a plain dictionary."""
        return asdict(self)
