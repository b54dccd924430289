"""
Hashing Primitives
Domain-separated leaf and node hashing for RFC 6962 Merkle trees.

This module provides:
- TreeHasher: leaf/node/empty-tree hashing over any hashlib digest
- leaf_hash / node_hash: SHA-256 shortcuts
- Hex (0x prefixed) and base64 encoding helpers

Hashing Rules (Hard Contracts):
1. Leaf hash: digest(0x00 || leaf_input)
2. Node hash: digest(0x01 || left || right)
3. Empty tree: digest(b"")

The one-byte prefixes keep leaf hashes and node hashes in disjoint
domains, so a leaf can never be passed off as an internal node.
"""
from __future__ import annotations

import base64
import binascii
import hashlib

from tlog_core.config.runtime import get_default_config
from tlog_core.schemas.errors import (
    EncodingException,
    HashPrimitiveUnavailableException,
)


LEAF_PREFIX: bytes = b"\x00"
NODE_PREFIX: bytes = b"\x01"

DEFAULT_ALGORITHM = "sha256"


class TreeHasher:
    """
    Merkle tree hasher bound to one digest algorithm.

    Example:
        >>> hasher = TreeHasher("sha256")
        >>> hasher.digest_size
        32
        >>> hasher.hash_leaf(b"a") == leaf_hash(b"a")
        True
    """

    def __init__(self, algorithm: str = DEFAULT_ALGORITHM) -> None:
        try:
            probe = hashlib.new(algorithm)
        except (ValueError, TypeError) as e:
            raise HashPrimitiveUnavailableException(
                f"Digest algorithm not available: {algorithm}",
                algorithm=str(algorithm),
            ) from e

        if probe.digest_size == 0:
            # Variable-length digests (shake_*) have no fixed output size
            raise HashPrimitiveUnavailableException(
                f"Digest algorithm has no fixed output size: {algorithm}",
                algorithm=algorithm,
            )

        self.algorithm = probe.name
        self.digest_size = probe.digest_size

    def digest(self, data: bytes) -> bytes:
        """Hash raw bytes with the bound algorithm."""
        return hashlib.new(self.algorithm, data).digest()

    def hash_leaf(self, leaf_input: bytes) -> bytes:
        """
        Hash a leaf per RFC 6962: digest(0x00 || leaf_input).

        Args:
            leaf_input: Raw leaf payload bytes

        Returns:
            Leaf hash (digest_size bytes)
        """
        return self.digest(LEAF_PREFIX + leaf_input)

    def hash_node(self, left: bytes, right: bytes) -> bytes:
        """
        Hash an internal node per RFC 6962: digest(0x01 || left || right).

        Argument order is significant; node(a, b) != node(b, a).

        Args:
            left: Left child hash
            right: Right child hash

        Returns:
            Node hash (digest_size bytes)
        """
        return self.digest(NODE_PREFIX + left + right)

    def hash_empty(self) -> bytes:
        """Root hash of a tree with no leaves: digest(b"")."""
        return self.digest(b"")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TreeHasher):
            return NotImplemented
        return self.algorithm == other.algorithm

    def __hash__(self) -> int:
        return hash(self.algorithm)

    def __repr__(self) -> str:
        return f"TreeHasher(algorithm={self.algorithm!r})"


SHA256_HASHER = TreeHasher(DEFAULT_ALGORITHM)


def get_default_hasher() -> TreeHasher:
    """Return a hasher for the configured default algorithm."""
    algorithm = get_default_config().hash.algorithm
    if algorithm == SHA256_HASHER.algorithm:
        return SHA256_HASHER
    return TreeHasher(algorithm)


def leaf_hash(leaf_input: bytes) -> bytes:
    """
    Compute the SHA-256 leaf hash of a raw leaf input.

    Example:
        >>> leaf_hash(b"").hex()
        '6e340b9cffb37a989ca544e6bb780a2c78901d3fb33738768511a30617afa01d'
    """
    return SHA256_HASHER.hash_leaf(leaf_input)


def node_hash(left: bytes, right: bytes) -> bytes:
    """Compute the SHA-256 node hash of two child hashes."""
    return SHA256_HASHER.hash_node(left, right)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        EncodingException: If string doesn't start with 0x, has odd length,
                           or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise EncodingException(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise EncodingException(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise EncodingException(f"Invalid hex characters in string: {e}") from e


def to_b64(data: bytes) -> str:
    """Encode bytes as standard (padded) base64, the log API's hash format."""
    return base64.b64encode(data).decode("ascii")


def from_b64(b64_string: str) -> bytes:
    """
    Decode standard base64, rejecting characters outside the alphabet.

    Raises:
        EncodingException: If the string is not valid base64
    """
    try:
        return base64.b64decode(b64_string, validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncodingException(f"Invalid base64 string: {e}") from e


__all__ = [
    "LEAF_PREFIX",
    "NODE_PREFIX",
    "DEFAULT_ALGORITHM",
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
