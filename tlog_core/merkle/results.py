"""
Verification Results
Typed outcomes of consistency and inclusion verification.

Verification never raises on a bad proof. The outcome, the reconstructed
hashes and the per-element layout metadata come back in these models;
callers that prefer exceptions use raise_for_error().
"""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from tlog_core.merkle.ranges import Range
from tlog_core.schemas.errors import TlogError


# Which root(s) a consistency proof element feeds into:
# "first" (earlier root only), "both", "second" (later root only)
ConsistencyRole = Literal["first", "both", "second"]

# Where an audit path sibling sits relative to the running node
InclusionRole = Literal["left", "right"]


class ProofStep(BaseModel):
    """One proof element paired with the subtree range it stands for."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    range: Range = Field(
        ...,
        description="Leaf range [start, end) of the subtree this hash covers",
    )
    hash: bytes = Field(
        ...,
        description="Hash value supplied for the subtree",
    )
    role: ConsistencyRole | InclusionRole = Field(
        ...,
        description="How the element combines during verification",
    )

    @property
    def is_leaf(self) -> bool:
        """Check if the step stands for a single leaf."""
        return self.range.size == 1


class ConsistencyResult(BaseModel):
    """
    Outcome of verifying a consistency proof between two tree sizes.

    reconstructed_first / reconstructed_second are the roots the proof
    produced; they are None when the proof was rejected before hashing.
    """

    model_config = ConfigDict(extra="forbid")

    valid: bool = Field(..., description="Whether both roots were reproduced")
    first_size: int = Field(..., ge=0)
    second_size: int = Field(..., ge=0)
    reconstructed_first: bytes | None = Field(default=None)
    reconstructed_second: bytes | None = Field(default=None)
    steps: list[ProofStep] = Field(
        default_factory=list,
        description="Effective proof elements in the order they were consumed",
    )
    first_height: int = Field(
        default=0,
        description="Node hashes computed while rebuilding the first root",
    )
    second_height: int = Field(
        default=0,
        description="Node hashes computed while rebuilding the second root",
    )
    error: TlogError | None = Field(default=None)

    def raise_for_error(self) -> None:
        """Raise the typed exception for this result if it is invalid."""
        if self.error is not None:
            raise self.error.to_exception()


class InclusionResult(BaseModel):
    """Outcome of verifying an audit path for a single leaf."""

    model_config = ConfigDict(extra="forbid")

    valid: bool = Field(..., description="Whether the root was reproduced")
    leaf_index: int = Field(..., ge=0)
    tree_size: int = Field(..., ge=1)
    reconstructed_root: bytes | None = Field(default=None)
    steps: list[ProofStep] = Field(
        default_factory=list,
        description="Audit path siblings from the leaf up",
    )
    error: TlogError | None = Field(default=None)

    def raise_for_error(self) -> None:
        """Raise the typed exception for this result if it is invalid."""
        if self.error is not None:
            raise self.error.to_exception()


__all__ = [
    "ConsistencyRole",
    "InclusionRole",
    "ProofStep",
    "ConsistencyResult",
    "InclusionResult",
]
