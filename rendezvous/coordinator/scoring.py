"""Weighted Highest Random Weight (HRW) scoring."""
import math
from typing import Mapping

from ..errors import InternalInconsistency
from .hashers import Hasher, UINT32_MASK

# float(2**32 - 1) + 1.0
UINT32_BOUND = float(1 << 32)


def composite_key(node_id: str, key: str) -> bytes:
    """Build the bytes hashed for a node/key pair.

    Produces ``"<node_id>:<key>"``. Backslashes and colons inside the node id
    are escaped, so the first unescaped colon always ends the id and no two
    distinct pairs share the same bytes.

    Args:
        node_id: Node identifier
        key: Request key

    Returns:
        UTF-8 encoded composite key
    """
    if '\\' in node_id or ':' in node_id:
        node_id = node_id.replace('\\', '\\\\').replace(':', '\\:')
    return f"{node_id}:{key}".encode('utf-8')


def normalize(h: int) -> float:
    """Map an unsigned 32-bit hash into the (0, 1] range.

    Adding 1 keeps the result away from 0, which the logarithm in
    compute_weighted_score cannot take. Wider hashes are truncated to their
    low 32 bits.
    """
    return (float(h & UINT32_MASK) + 1.0) / UINT32_BOUND


def compute_weighted_score(node_id: str, weight: float, key: str, hasher: Hasher) -> float:
    """Calculate the weighted HRW score of a node for a key.

    score = weight * (1 / -ln(u)), where u is the normalized hash of the
    composite key. -ln(u) is an exponential variate with rate 1, so across
    many keys a node wins with probability weight / total_weight.

    Args:
        node_id: Node identifier
        weight: Node weight
        key: Request key
        hasher: 32-bit hash function

    Returns:
        Score (higher wins); non-positive whenever weight <= 0
    """
    u = normalize(hasher(composite_key(node_id, key)))
    divisor = -math.log(u)
    if divisor == 0.0:
        # u == 1: the score diverges
        return math.inf if weight > 0 else 0.0
    return weight * (1.0 / divisor)


def score_from_snapshot(snapshot: Mapping[str, float], node_id: str, key: str, hasher: Hasher) -> float:
    """Score a node using the weight recorded in a registry snapshot.

    Raises:
        InternalInconsistency: If node_id is not part of the snapshot
    """
    try:
        weight = snapshot[node_id]
    except KeyError:
        raise InternalInconsistency(node_id) from None
    return compute_weighted_score(node_id, weight, key, hasher)
