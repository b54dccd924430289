"""
RFC 6962 Merkle tree proofs.

This package provides:
- Range arithmetic for splitting trees into perfect subtrees
- Inclusion and consistency path planning
- Consistency and inclusion verification with typed results
- Tree construction and proof generation from raw leaf inputs
- Object-hash MerkleTreeLeaf encoding

Usage:
    from tlog_core.merkle import Range, build_tree, consistency_proof, verify_consistency

    leaves = [b"a", b"b", b"c", b"d", b"e"]
    old_root = build_tree(leaves[:3])[Range(0, 3)]
    new_root = build_tree(leaves)[Range(0, 5)]

    proof = consistency_proof(leaves, 3, 5)
    result = verify_consistency(3, old_root, 5, new_root, proof)
    assert result.valid
"""
from .ranges import (
    Range,
    make_range,
    is_power_of_two,
    largest_power_of_two_less_than,
    is_odd,
)

from .paths import (
    inclusion_path,
    consistency_path,
    effective_consistency_path,
    tree_height,
)

from .results import (
    ProofStep,
    ConsistencyResult,
    InclusionResult,
)

from .verify import (
    verify_consistency,
    reconstruct_consistency_roots,
    verify_inclusion,
    verify_leaf_inclusion,
)

from .tree import (
    build_tree,
    tree_root,
    inclusion_proof,
    consistency_proof,
)

from .leaf import ObjectHashLeaf


__all__ = [
    # Ranges
    "Range",
    "make_range",
    "is_power_of_two",
    "largest_power_of_two_less_than",
    "is_odd",
    # Planner
    "inclusion_path",
    "consistency_path",
    "effective_consistency_path",
    "tree_height",
    # Results
    "ProofStep",
    "ConsistencyResult",
    "InclusionResult",
    # Verification
    "verify_consistency",
    "reconstruct_consistency_roots",
    "verify_inclusion",
    "verify_leaf_inclusion",
    # Tree building
    "build_tree",
    "tree_root",
    "inclusion_proof",
    "consistency_proof",
    # Leaf encoding
    "ObjectHashLeaf",
]
