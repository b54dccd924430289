"""
Schemas - Log API Payloads
File: log_api.py

Purpose: Typed views of the JSON bodies returned by a Certificate
Transparency style log (get-sth, get-sth-consistency, get-proof-by-hash,
get-entries). Fetching them is the caller's business; these models only
decode what has already been received, turning base64 fields into raw
bytes for the Merkle core.

Signatures are carried through as opaque base64 strings and never parsed.
"""

import base64
import binascii
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _decode_b64(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if not isinstance(value, str):
        return value
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"invalid base64: {e}") from e


class _LogPayload(BaseModel):
    """Shared config: tolerate fields newer log versions may add."""

    model_config = ConfigDict(extra="ignore", frozen=True)


class SignedTreeHead(_LogPayload):
    """Body of get-sth."""

    tree_size: int = Field(
        ...,
        ge=0,
        description="Number of entries committed to by this tree head",
    )
    timestamp: int | None = Field(
        default=None,
        ge=0,
        description="Milliseconds since the epoch when the head was issued",
    )
    sha256_root_hash: bytes = Field(
        ...,
        description="Root hash of the tree (base64 on the wire)",
    )
    tree_head_signature: str | None = Field(
        default=None,
        description="Opaque base64 signature, not interpreted",
    )

    @field_validator("sha256_root_hash", mode="before")
    @classmethod
    def decode_root_hash(cls, v: Any) -> Any:
        """Decode the base64 root hash."""
        return _decode_b64(v)


class ConsistencyProofResponse(_LogPayload):
    """Body of get-sth-consistency."""

    consistency: list[bytes] = Field(
        default_factory=list,
        description="Consistency proof hashes, deepest first",
    )

    @field_validator("consistency", mode="before")
    @classmethod
    def decode_consistency(cls, v: Any) -> Any:
        """Decode each base64 proof hash."""
        if isinstance(v, list):
            return [_decode_b64(item) for item in v]
        return v


class InclusionProofResponse(_LogPayload):
    """Body of get-proof-by-hash."""

    leaf_index: int = Field(
        ...,
        ge=0,
        description="Index of the leaf the proof is for",
    )
    audit_path: list[bytes] = Field(
        default_factory=list,
        description="Sibling hashes from the leaf up",
    )

    @field_validator("audit_path", mode="before")
    @classmethod
    def decode_audit_path(cls, v: Any) -> Any:
        """Decode each base64 sibling hash."""
        if isinstance(v, list):
            return [_decode_b64(item) for item in v]
        return v


class LeafEntry(_LogPayload):
    """One entry of get-entries."""

    leaf_input: bytes = Field(
        ...,
        description="MerkleTreeLeaf bytes the leaf hash is computed over",
    )
    extra_data: bytes = Field(
        default=b"",
        description="Out-of-tree data stored alongside the leaf",
    )

    @field_validator("leaf_input", "extra_data", mode="before")
    @classmethod
    def decode_fields(cls, v: Any) -> Any:
        """Decode base64 entry fields."""
        return _decode_b64(v)


class EntriesResponse(_LogPayload):
    """Body of get-entries."""

    entries: list[LeafEntry] = Field(default_factory=list)

    @property
    def leaf_inputs(self) -> list[bytes]:
        """Raw leaf inputs in log order."""
        return [entry.leaf_input for entry in self.entries]


__all__ = [
    "SignedTreeHead",
    "ConsistencyProofResponse",
    "InclusionProofResponse",
    "LeafEntry",
    "EntriesResponse",
]
