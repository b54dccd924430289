"""
Core cryptographic utilities.

Domain-separated leaf/node hashing and hash encoding helpers.
"""
from .hashing import (
    TreeHasher,
    SHA256_HASHER,
    get_default_hasher,
    leaf_hash,
    node_hash,
    to_hex,
    from_hex,
    to_b64,
    from_b64,
)

__all__ = [
    "TreeHasher",
    "SHA256_HASHER",
    "get_default_hasher",
    "leaf_hash",
    "node_hash",
    "to_hex",
    "from_hex",
    "to_b64",
    "from_b64",
]
