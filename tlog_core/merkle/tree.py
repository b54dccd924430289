"""
Tree Builder
Rebuilds RFC 6962 Merkle trees from raw leaf inputs.

This module provides:
- build_tree: hash of every subtree, keyed by leaf Range
- tree_root: streaming root computation (no intermediate map)
- inclusion_proof / consistency_proof: proofs generated from known leaves

Construction Rules:
1. Leaf [i, i+1) = hash_leaf(leaf_inputs[i])
2. Level widths double from 2 upward. At width w, the node at j covers
   [j, min(j + w, n)) and combines [j, j + w/2) with [j + w/2, min(j + w, n))
   when both halves already exist.
3. A node whose right half would start at or beyond n is not created at
   that level; its left half is carried up and combined at a later level.

Unlike duplicate-last padding schemes, an unpaired node is never hashed
with itself.
"""
from __future__ import annotations

import logging
from typing import Sequence

from tlog_core.crypto.hashing import TreeHasher, get_default_hasher
from tlog_core.merkle.paths import consistency_path, inclusion_path
from tlog_core.merkle.ranges import Range
from tlog_core.schemas.errors import InvalidRangeException


logger = logging.getLogger(__name__)


def build_tree(
    leaf_inputs: Sequence[bytes],
    hasher: TreeHasher | None = None,
) -> dict[Range, bytes]:
    """
    Compute the hash of every subtree of the tree over leaf_inputs.

    Args:
        leaf_inputs: Raw leaf inputs in log order
        hasher: Tree hasher (defaults to the configured algorithm)

    Returns:
        Mapping from subtree Range to hash. The root is at Range(0, n).
        An empty input yields an empty mapping.

    Example:
        >>> tree = build_tree([b"a", b"b", b"c"])
        >>> tree[Range(0, 3)] == tree_root([b"a", b"b", b"c"])
        True
    """
    hasher = hasher or get_default_hasher()
    n = len(leaf_inputs)

    hashes: dict[Range, bytes] = {
        Range(i, i + 1): hasher.hash_leaf(leaf)
        for i, leaf in enumerate(leaf_inputs)
    }
    if n < 2:
        return hashes

    levels = len(inclusion_path(0, 0, n))
    width = 2
    for _ in range(levels):
        half = width // 2
        for j in range(0, n, width):
            end = min(j + width, n)
            if j + half >= end:
                continue
            left = Range(j, j + half)
            right = Range(j + half, end)
            if left in hashes and right in hashes:
                hashes[Range(j, end)] = hasher.hash_node(hashes[left], hashes[right])
        width *= 2

    logger.debug("Built tree over %d leaves (%d subtree hashes)", n, len(hashes))
    return hashes


def tree_root(
    leaf_inputs: Sequence[bytes],
    hasher: TreeHasher | None = None,
) -> bytes:
    """
    Compute the root hash with a stack, one leaf at a time.

    After appending leaf i, a pair is merged for every trailing one bit
    of i; whatever remains on the stack is folded right to left at the end.

    Returns:
        Root hash; hash_empty() for no leaves
    """
    hasher = hasher or get_default_hasher()
    stack: list[bytes] = []

    for idx, leaf in enumerate(leaf_inputs):
        stack.append(hasher.hash_leaf(leaf))
        i = idx
        while i & 1:
            right = stack.pop()
            left = stack.pop()
            stack.append(hasher.hash_node(left, right))
            i >>= 1

    if not stack:
        return hasher.hash_empty()

    while len(stack) > 1:
        right = stack.pop()
        left = stack.pop()
        stack.append(hasher.hash_node(left, right))

    return stack[0]


def _tree_for_size(
    leaf_inputs: Sequence[bytes],
    tree_size: int,
    hasher: TreeHasher | None,
) -> dict[Range, bytes]:
    if tree_size < 1 or tree_size > len(leaf_inputs):
        raise InvalidRangeException(
            f"Tree size {tree_size} out of range for {len(leaf_inputs)} leaves",
            details={"tree_size": tree_size, "leaf_count": len(leaf_inputs)},
        )
    return build_tree(leaf_inputs[:tree_size], hasher=hasher)


def inclusion_proof(
    leaf_inputs: Sequence[bytes],
    leaf_index: int,
    tree_size: int | None = None,
    hasher: TreeHasher | None = None,
) -> list[bytes]:
    """
    Generate the audit path for leaf_index in the tree of tree_size leaves.

    Args:
        leaf_inputs: Raw leaf inputs; at least tree_size of them
        leaf_index: 0-based index of the leaf to prove
        tree_size: Size of the tree (defaults to len(leaf_inputs))
        hasher: Tree hasher (defaults to the configured algorithm)

    Returns:
        Sibling hashes from the leaf up, as a log would serve them

    Raises:
        InvalidRangeException: If tree_size or leaf_index is out of range
    """
    if tree_size is None:
        tree_size = len(leaf_inputs)
    tree = _tree_for_size(leaf_inputs, tree_size, hasher)
    return [tree[r] for r in inclusion_path(leaf_index, 0, tree_size)]


def consistency_proof(
    leaf_inputs: Sequence[bytes],
    first_size: int,
    second_size: int | None = None,
    hasher: TreeHasher | None = None,
) -> list[bytes]:
    """
    Generate the consistency proof from first_size to second_size.

    The proof is trimmed the way a log serves it: when first_size is a
    power of two the earlier root is not included.

    Raises:
        InvalidRangeException: If the sizes are out of range
    """
    if second_size is None:
        second_size = len(leaf_inputs)
    tree = _tree_for_size(leaf_inputs, second_size, hasher)
    return [tree[r] for r in consistency_path(first_size, 0, second_size, True)]


__all__ = [
    "build_tree",
    "tree_root",
    "inclusion_proof",
    "consistency_proof",
]
