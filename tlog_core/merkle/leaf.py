"""
Leaf Codec
RFC 6962 MerkleTreeLeaf encoding for object-hash log entries.

Layout (46 bytes, big-endian):
    version          1 byte   0x00 (v1)
    leaf_type        1 byte   0x00 (timestamped_entry)
    timestamp        8 bytes  milliseconds since the epoch
    entry_type       2 bytes  0x8001 (object hash)
    object_hash     32 bytes
    extensions       2 bytes  0x0000 (empty)

The encoded bytes are the leaf input; its leaf hash is what a log's
get-proof-by-hash endpoint is queried with.
"""
from __future__ import annotations

import struct
from dataclasses import dataclass

from tlog_core.crypto.hashing import TreeHasher, get_default_hasher
from tlog_core.schemas.errors import EncodingException


LEAF_VERSION_V1 = 0x00
LEAF_TYPE_TIMESTAMPED_ENTRY = 0x00
ENTRY_TYPE_OBJECT_HASH = 0x8001
OBJECT_HASH_SIZE = 32

_LEAF_STRUCT = struct.Struct(">BBQH32sH")
LEAF_SIZE = _LEAF_STRUCT.size


@dataclass(frozen=True)
class ObjectHashLeaf:
    """
    A timestamped object-hash entry.

    Attributes:
        timestamp: Milliseconds since the epoch, as issued by the log
        object_hash: 32-byte hash of the logged object
    """
    timestamp: int
    object_hash: bytes

    def __post_init__(self) -> None:
        if not 0 <= self.timestamp < 2 ** 64:
            raise EncodingException(
                f"Timestamp must fit in 64 unsigned bits, got {self.timestamp}"
            )
        if len(self.object_hash) != OBJECT_HASH_SIZE:
            raise EncodingException(
                f"Object hash must be {OBJECT_HASH_SIZE} bytes, got {len(self.object_hash)}"
            )

    def to_bytes(self) -> bytes:
        """Encode as a MerkleTreeLeaf leaf input."""
        return _LEAF_STRUCT.pack(
            LEAF_VERSION_V1,
            LEAF_TYPE_TIMESTAMPED_ENTRY,
            self.timestamp,
            ENTRY_TYPE_OBJECT_HASH,
            self.object_hash,
            0,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "ObjectHashLeaf":
        """
        Decode a MerkleTreeLeaf carrying an object-hash entry.

        Raises:
            EncodingException: On wrong length, unknown version, leaf type
                or entry type, or non-empty extensions
        """
        if len(data) != LEAF_SIZE:
            raise EncodingException(
                f"Object hash leaf must be {LEAF_SIZE} bytes, got {len(data)}"
            )

        version, leaf_type, timestamp, entry_type, object_hash, extensions = (
            _LEAF_STRUCT.unpack(data)
        )
        if version != LEAF_VERSION_V1:
            raise EncodingException(f"Unsupported leaf version: {version}")
        if leaf_type != LEAF_TYPE_TIMESTAMPED_ENTRY:
            raise EncodingException(f"Unsupported leaf type: {leaf_type}")
        if entry_type != ENTRY_TYPE_OBJECT_HASH:
            raise EncodingException(
                f"Log entry is not an object hash entry (type 0x{entry_type:04x})"
            )
        if extensions != 0:
            raise EncodingException("Object hash leaf must have empty extensions")

        return cls(timestamp=timestamp, object_hash=object_hash)

    def leaf_hash(self, hasher: TreeHasher | None = None) -> bytes:
        """Leaf hash of the encoded entry."""
        hasher = hasher or get_default_hasher()
        return hasher.hash_leaf(self.to_bytes())


__all__ = [
    "LEAF_VERSION_V1",
    "LEAF_TYPE_TIMESTAMPED_ENTRY",
    "ENTRY_TYPE_OBJECT_HASH",
    "OBJECT_HASH_SIZE",
    "LEAF_SIZE",
    "ObjectHashLeaf",
]
