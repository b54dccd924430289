"""
Proof Path Planner
Computes which subtree ranges the hashes of an audit path stand for.

This module provides:
- inclusion_path: sibling ranges from a leaf up to the root
- consistency_path: ranges of a consistency sub-proof between two sizes
- effective_consistency_path: the range list a verifier walks
- tree_height: number of levels in a tree diagram

Ordering Rules (Hard Contracts):
- Both recursions append the "other half" only after the recursive call
  returns, so results are innermost-first: the deepest range comes first
  and the range adjacent to the root comes last.
- Verifiers consume proofs in exactly this order.

Recursion depth is bounded by log2 of the tree size.
"""
from __future__ import annotations

from tlog_core.merkle.ranges import (
    Range,
    is_power_of_two,
    largest_power_of_two_less_than,
)
from tlog_core.schemas.errors import InvalidRangeException


def _check_span(start_n: int, end_n: int) -> int:
    if start_n < 0 or end_n <= start_n:
        raise InvalidRangeException(
            f"Invalid tree span [{start_n}, {end_n}): require 0 <= start < end",
            details={"start_n": start_n, "end_n": end_n},
        )
    return end_n - start_n


def inclusion_path(m: int, start_n: int, end_n: int) -> list[Range]:
    """
    Ranges of the audit path for leaf m of the tree spanning [start_n, end_n).

    m is relative to start_n. The result lists the sibling subtree at each
    level, starting next to the leaf and ending next to the root (the root
    itself is never included).

    Example:
        >>> [tuple(r) for r in inclusion_path(2, 0, 7)]
        [(3, 4), (0, 2), (4, 7)]

    Raises:
        InvalidRangeException: If the span is empty or m is outside it
    """
    n = _check_span(start_n, end_n)
    if m < 0 or m >= n:
        raise InvalidRangeException(
            f"Leaf index {m} out of range for tree of size {n}",
            details={"m": m, "start_n": start_n, "end_n": end_n},
        )
    return _inclusion_path(m, start_n, end_n)


def _inclusion_path(m: int, start_n: int, end_n: int) -> list[Range]:
    n = end_n - start_n
    if n == 1:
        return []

    k = largest_power_of_two_less_than(n)
    if m < k:
        path = _inclusion_path(m, start_n, start_n + k)
        path.append(Range(start_n + k, end_n))
    else:
        path = _inclusion_path(m - k, start_n + k, end_n)
        path.append(Range(start_n, start_n + k))
    return path


def consistency_path(m: int, start_n: int, end_n: int, trim_top: bool) -> list[Range]:
    """
    Ranges of the consistency sub-proof for an earlier tree of size m.

    The later tree spans [start_n, end_n). With trim_top set, a subtree
    that the earlier tree covers exactly at the top level is omitted,
    because the verifier already holds the earlier root.

    Example:
        >>> [tuple(r) for r in consistency_path(3, 0, 7, True)]
        [(2, 3), (3, 4), (0, 2), (4, 7)]
        >>> [tuple(r) for r in consistency_path(4, 0, 7, True)]
        [(4, 7)]

    Raises:
        InvalidRangeException: If the span is empty, m > span size, or
            m < 1 while the span still needs splitting
    """
    n = _check_span(start_n, end_n)
    if m < 1 or m > n:
        raise InvalidRangeException(
            f"Earlier tree size {m} out of range for tree of size {n}",
            details={"m": m, "start_n": start_n, "end_n": end_n},
        )
    return _consistency_path(m, start_n, end_n, trim_top)


def _consistency_path(m: int, start_n: int, end_n: int, trim_top: bool) -> list[Range]:
    n = end_n - start_n
    if m == n:
        if trim_top:
            return []
        return [Range(start_n, end_n)]

    k = largest_power_of_two_less_than(n)
    if m <= k:
        path = _consistency_path(m, start_n, start_n + k, trim_top)
        path.append(Range(start_n + k, end_n))
    else:
        # Below the split point the earlier tree's top is no longer known
        path = _consistency_path(m - k, start_n + k, end_n, False)
        path.append(Range(start_n, start_n + k))
    return path


def effective_consistency_path(first_size: int, second_size: int) -> list[Range]:
    """
    Range list matching the proof a consistency verifier actually walks.

    When first_size is a power of two the earlier root is a subtree of the
    later tree and is trimmed from the served proof; the verifier puts it
    back in front, so the range [0, first_size) leads the list.
    """
    path = consistency_path(first_size, 0, second_size, True)
    if is_power_of_two(first_size):
        path.insert(0, Range(0, first_size))
    return path


def tree_height(tree_size: int) -> int:
    """
    Number of levels in a tree of the given size, leaves included.

    Example:
        >>> [tree_height(n) for n in (0, 1, 2, 3, 4, 5, 8, 9)]
        [0, 1, 2, 3, 3, 4, 4, 5]
    """
    if tree_size < 0:
        raise InvalidRangeException(
            f"Tree size must be non-negative, got {tree_size}",
            details={"tree_size": tree_size},
        )
    if tree_size == 0:
        return 0
    return 1 + len(_inclusion_path(0, 0, tree_size))


__all__ = [
    "inclusion_path",
    "consistency_path",
    "effective_consistency_path",
    "tree_height",
]
