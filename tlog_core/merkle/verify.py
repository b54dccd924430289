"""
Proof Verifier
Rebuilds claimed roots from consistency proofs and audit paths.

This module provides:
- verify_consistency: check that a later tree extends an earlier one
- reconstruct_consistency_roots: the raw two-root walk
- verify_inclusion / verify_leaf_inclusion: check an audit path

Verification Rules (Hard Contracts):
1. Proof length and element sizes are checked against the planner before
   any hashing; a mismatch is reported as MALFORMED_PROOF.
2. In the consistency walk the first root always takes a new element on
   the left, node(h, fr). The second root takes it on the left in the
   shared branch and on the right, node(sr, h), otherwise.
3. A failed proof is returned as an invalid result, never raised.
   Precondition violations on sizes and indices raise
   InvalidRangeException.
"""
from __future__ import annotations

import logging
from typing import Sequence

from tlog_core.crypto.hashing import TreeHasher, get_default_hasher
from tlog_core.merkle.paths import (
    consistency_path,
    effective_consistency_path,
    inclusion_path,
)
from tlog_core.merkle.ranges import Range, is_odd, is_power_of_two
from tlog_core.merkle.results import (
    ConsistencyResult,
    ConsistencyRole,
    InclusionResult,
    InclusionRole,
    ProofStep,
)
from tlog_core.schemas.errors import (
    ConsistencyCheckFailedException,
    InclusionCheckFailedException,
    InvalidRangeException,
    MalformedProofException,
    TlogError,
)


logger = logging.getLogger(__name__)


def _shape_error(
    proof: Sequence[bytes],
    expected_length: int,
    digest_size: int,
    **named_hashes: bytes,
) -> TlogError | None:
    """Return a MALFORMED_PROOF error if the proof cannot be walked."""
    if len(proof) != expected_length:
        return MalformedProofException(
            f"Proof has {len(proof)} elements, expected {expected_length}",
            expected_length=expected_length,
            actual_length=len(proof),
        ).to_error_model()

    for i, element in enumerate(proof):
        if len(element) != digest_size:
            return MalformedProofException(
                f"Proof element {i} is {len(element)} bytes, expected {digest_size}",
                details={"element_index": i},
            ).to_error_model()

    for name, value in named_hashes.items():
        if len(value) != digest_size:
            return MalformedProofException(
                f"{name} is {len(value)} bytes, expected {digest_size}",
                details={"field": name},
            ).to_error_model()

    return None


# =============================================================================
# Consistency
# =============================================================================

def _walk_consistency(
    first_size: int,
    second_size: int,
    effective_proof: Sequence[bytes],
    hasher: TreeHasher,
) -> tuple[bytes, bytes, list[ConsistencyRole]]:
    fn = first_size - 1
    sn = second_size - 1
    while is_odd(fn):
        fn >>= 1
        sn >>= 1

    fr = effective_proof[0]
    sr = effective_proof[0]
    roles: list[ConsistencyRole] = ["both"]

    for h in effective_proof[1:]:
        if fn == sn or is_odd(fn):
            fr = hasher.hash_node(h, fr)
            sr = hasher.hash_node(h, sr)
            roles.append("both")
            while fn != 0 and not is_odd(fn):
                fn >>= 1
                sn >>= 1
        else:
            sr = hasher.hash_node(sr, h)
            roles.append("second")
        fn >>= 1
        sn >>= 1

    return fr, sr, roles


def reconstruct_consistency_roots(
    first_size: int,
    second_size: int,
    effective_proof: Sequence[bytes],
    hasher: TreeHasher | None = None,
) -> tuple[bytes, bytes]:
    """
    Run the two-root walk over an effective proof.

    No length check is made and the trimmed earlier root is not restored:
    effective_proof must already start with first_hash when first_size is
    a power of two.

    Returns:
        (reconstructed_first, reconstructed_second)

    Raises:
        MalformedProofException: If effective_proof is empty
    """
    if not effective_proof:
        raise MalformedProofException(
            "Effective consistency proof is empty",
            expected_length=1,
            actual_length=0,
        )
    hasher = hasher or get_default_hasher()
    fr, sr, _ = _walk_consistency(first_size, second_size, effective_proof, hasher)
    return fr, sr


def verify_consistency(
    first_size: int,
    first_hash: bytes,
    second_size: int,
    second_hash: bytes,
    proof: Sequence[bytes],
    hasher: TreeHasher | None = None,
) -> ConsistencyResult:
    """
    Verify that the tree (second_size, second_hash) extends (first_size, first_hash).

    Args:
        first_size: Size of the earlier tree (>= 1)
        first_hash: Root hash of the earlier tree
        second_size: Size of the later tree (>= first_size)
        second_hash: Root hash of the later tree
        proof: Consistency proof as served by the log
        hasher: Tree hasher (defaults to the configured algorithm)

    Returns:
        ConsistencyResult with the reconstructed roots and proof steps

    Raises:
        InvalidRangeException: If the sizes are out of order or non-positive
    """
    if first_size < 1 or second_size < first_size:
        raise InvalidRangeException(
            f"Invalid consistency sizes: first={first_size}, second={second_size}; "
            f"require 1 <= first <= second",
            details={"first_size": first_size, "second_size": second_size},
        )

    hasher = hasher or get_default_hasher()
    proof = list(proof)

    expected = consistency_path(first_size, 0, second_size, True)
    error = _shape_error(
        proof,
        len(expected),
        hasher.digest_size,
        first_hash=first_hash,
        second_hash=second_hash,
    )
    if error is not None:
        logger.debug("Rejected consistency proof %d -> %d: %s", first_size, second_size, error.message)
        return ConsistencyResult(
            valid=False,
            first_size=first_size,
            second_size=second_size,
            error=error,
        )

    if first_size == second_size:
        valid = first_hash == second_hash
        return ConsistencyResult(
            valid=valid,
            first_size=first_size,
            second_size=second_size,
            reconstructed_first=first_hash,
            reconstructed_second=first_hash,
            error=None if valid else ConsistencyCheckFailedException(
                "Trees of equal size have different root hashes",
                first_size=first_size,
                second_size=second_size,
            ).to_error_model(),
        )

    ranges = effective_consistency_path(first_size, second_size)
    effective = [first_hash] + proof if is_power_of_two(first_size) else proof

    fr, sr, roles = _walk_consistency(first_size, second_size, effective, hasher)
    steps = [
        ProofStep(range=r, hash=h, role=role)
        for r, h, role in zip(ranges, effective, roles)
    ]

    valid = fr == first_hash and sr == second_hash
    error = None
    if not valid:
        mismatched = [
            name for name, matched in (("first", fr == first_hash), ("second", sr == second_hash))
            if not matched
        ]
        error = ConsistencyCheckFailedException(
            f"Consistency proof does not reproduce the {' and '.join(mismatched)} root hash",
            first_size=first_size,
            second_size=second_size,
            details={"mismatched": mismatched},
        ).to_error_model()
        logger.debug("Consistency check failed %d -> %d", first_size, second_size)

    return ConsistencyResult(
        valid=valid,
        first_size=first_size,
        second_size=second_size,
        reconstructed_first=fr,
        reconstructed_second=sr,
        steps=steps,
        first_height=sum(1 for role in roles[1:] if role == "both"),
        second_height=len(roles) - 1,
        error=error,
    )


# =============================================================================
# Inclusion
# =============================================================================

def _walk_inclusion(
    leaf_index: int,
    tree_size: int,
    leaf_hash: bytes,
    audit_path: Sequence[bytes],
    hasher: TreeHasher,
) -> tuple[bytes, list[InclusionRole]]:
    fn = leaf_index
    sn = tree_size - 1
    acc = leaf_hash
    sides: list[InclusionRole] = []

    for sibling in audit_path:
        if is_odd(fn) or fn == sn:
            acc = hasher.hash_node(sibling, acc)
            sides.append("left")
            # Right-edge node with no sibling at these levels is promoted
            while fn != 0 and not is_odd(fn):
                fn >>= 1
                sn >>= 1
        else:
            acc = hasher.hash_node(acc, sibling)
            sides.append("right")
        fn >>= 1
        sn >>= 1

    return acc, sides


def verify_inclusion(
    leaf_index: int,
    leaf_hash: bytes,
    tree_size: int,
    audit_path: Sequence[bytes],
    root_hash: bytes,
    hasher: TreeHasher | None = None,
) -> InclusionResult:
    """
    Verify that leaf_hash sits at leaf_index in the tree with root_hash.

    Args:
        leaf_index: 0-based index of the leaf
        leaf_hash: Leaf hash (not the raw leaf input)
        tree_size: Size of the tree the path was generated for
        audit_path: Sibling hashes from the leaf up
        root_hash: Expected root hash
        hasher: Tree hasher (defaults to the configured algorithm)

    Returns:
        InclusionResult with the reconstructed root and proof steps

    Raises:
        InvalidRangeException: If leaf_index is not within [0, tree_size)
    """
    if tree_size < 1 or leaf_index < 0 or leaf_index >= tree_size:
        raise InvalidRangeException(
            f"Leaf index {leaf_index} out of range for tree of size {tree_size}",
            details={"leaf_index": leaf_index, "tree_size": tree_size},
        )

    hasher = hasher or get_default_hasher()
    audit_path = list(audit_path)

    ranges: list[Range] = inclusion_path(leaf_index, 0, tree_size)
    error = _shape_error(
        audit_path,
        len(ranges),
        hasher.digest_size,
        leaf_hash=leaf_hash,
        root_hash=root_hash,
    )
    if error is not None:
        logger.debug("Rejected audit path for leaf %d of %d: %s", leaf_index, tree_size, error.message)
        return InclusionResult(
            valid=False,
            leaf_index=leaf_index,
            tree_size=tree_size,
            error=error,
        )

    acc, sides = _walk_inclusion(leaf_index, tree_size, leaf_hash, audit_path, hasher)
    steps = [
        ProofStep(range=r, hash=h, role=side)
        for r, h, side in zip(ranges, audit_path, sides)
    ]

    valid = acc == root_hash
    error = None
    if not valid:
        error = InclusionCheckFailedException(
            "Audit path does not reproduce the root hash",
            leaf_index=leaf_index,
            details={"tree_size": tree_size},
        ).to_error_model()
        logger.debug("Inclusion check failed for leaf %d of %d", leaf_index, tree_size)

    return InclusionResult(
        valid=valid,
        leaf_index=leaf_index,
        tree_size=tree_size,
        reconstructed_root=acc,
        steps=steps,
        error=error,
    )


def verify_leaf_inclusion(
    leaf_index: int,
    leaf_input: bytes,
    tree_size: int,
    audit_path: Sequence[bytes],
    root_hash: bytes,
    hasher: TreeHasher | None = None,
) -> InclusionResult:
    """Hash a raw leaf input, then verify its audit path."""
    hasher = hasher or get_default_hasher()
    return verify_inclusion(
        leaf_index,
        hasher.hash_leaf(leaf_input),
        tree_size,
        audit_path,
        root_hash,
        hasher=hasher,
    )


__all__ = [
    "verify_consistency",
    "reconstruct_consistency_roots",
    "verify_inclusion",
    "verify_leaf_inclusion",
]
