"""32-bit hash primitives used to score node/key pairs.

Every hasher is a plain function ``bytes -> int`` with no retained state,
so a single hasher can be shared by any number of concurrent resolvers.
"""
import functools
import hashlib
from typing import Any, Callable, Dict

import mmh3

Hasher = Callable[[bytes], int]

FNV32_OFFSET_BASIS = 0x811C9DC5
FNV32_PRIME = 0x01000193
UINT32_MASK = 0xFFFFFFFF


def fnv1a_32(data: bytes) -> int:
    """Compute the 32-bit FNV-1a hash of data.

    Algorithm: hash = (hash XOR byte) * FNV_PRIME, for every byte.

    Args:
        data: Input bytes

    Returns:
        Unsigned 32-bit hash value
    """
    h = FNV32_OFFSET_BASIS
    for byte in data:
        h ^= byte
        h = (h * FNV32_PRIME) & UINT32_MASK
    return h


def murmur3_32(data: bytes) -> int:
    """Compute the unsigned 32-bit MurmurHash3 of data (seed 0)."""
    return mmh3.hash(data, 0, signed=False)


def hashlib_hasher(factory: Callable[[], Any]) -> Hasher:
    """Adapt a hashlib-style object factory to a stateless hasher.

    A fresh hash object is created for every call, so the mutable digest
    state is never shared between concurrent callers. The first four bytes
    of the digest are read big-endian.

    Args:
        factory: Zero-argument callable returning an object with
            ``update()`` and ``digest()``

    Returns:
        Hasher returning an unsigned 32-bit integer
    """
    def hasher(data: bytes) -> int:
        h = factory()
        h.update(data)
        return int.from_bytes(h.digest()[:4], byteorder='big')

    hasher.__name__ = getattr(factory, '__name__', 'hashlib_hasher')
    return hasher


blake2b_32 = hashlib_hasher(functools.partial(hashlib.blake2b, digest_size=4))
blake2b_32.__name__ = 'blake2b_32'

HASHERS: Dict[str, Hasher] = {
    'fnv1a_32': fnv1a_32,
    'murmur3_32': murmur3_32,
    'blake2b_32': blake2b_32,
}

DEFAULT_HASHER = 'fnv1a_32'


def get_hasher(name: str) -> Hasher:
    """Look up a hasher by name.

    Raises:
        ValueError: If the name is not one of HASHERS
    """
    try:
        return HASHERS[name]
    except KeyError:
        raise ValueError(
            f"Unknown hasher: {name!r} (expected one of {sorted(HASHERS)})"
        ) from None
