"""
Range Arithmetic
Half-open leaf ranges and the power-of-two arithmetic that splits them.

Every subtree of an RFC 6962 tree covers a contiguous half-open range
of leaf indices [start, end). A range of size n > 1 splits into a left
perfect subtree of size k (the largest power of two below n) and a
right remainder of size n - k. Two ranges produced this way are either
disjoint, nested or identical.
"""
from __future__ import annotations

from typing import NamedTuple

from tlog_core.schemas.errors import InvalidRangeException


class Range(NamedTuple):
    """
    Half-open interval [start, end) of leaf indices.

    Value-typed, so it can key a mapping from subtree to hash.
    """
    start: int
    end: int

    @property
    def size(self) -> int:
        """Number of leaves covered."""
        return self.end - self.start

    @property
    def is_leaf(self) -> bool:
        """True when the range covers exactly one leaf."""
        return self.size == 1

    def split(self) -> tuple["Range", "Range"]:
        """
        Split into the left perfect subtree and the right remainder.

        Raises:
            InvalidRangeException: If the range covers a single leaf
        """
        k = largest_power_of_two_less_than(self.size)
        mid = self.start + k
        return Range(self.start, mid), Range(mid, self.end)

    def contains(self, other: "Range") -> bool:
        """True when other lies entirely within this range."""
        return self.start <= other.start and other.end <= self.end

    def __str__(self) -> str:
        return f"[{self.start}, {self.end})"


def make_range(start: int, end: int) -> Range:
    """
    Build a Range, enforcing 0 <= start < end.

    Raises:
        InvalidRangeException: If the bounds are out of order or negative
    """
    if start < 0 or end <= start:
        raise InvalidRangeException(
            f"Invalid range [{start}, {end}): require 0 <= start < end",
            details={"start": start, "end": end},
        )
    return Range(start, end)


def is_power_of_two(k: int) -> bool:
    """
    True iff k has exactly one set bit. Zero is not a power of two.

    Example:
        >>> [n for n in range(10) if is_power_of_two(n)]
        [1, 2, 4, 8]
    """
    return k >= 1 and (k & (k - 1)) == 0


def largest_power_of_two_less_than(n: int) -> int:
    """
    Greatest power of two strictly less than n, for n >= 2.

    Example:
        >>> [largest_power_of_two_less_than(n) for n in (2, 3, 4, 5, 8, 9)]
        [1, 2, 2, 4, 4, 8]

    Raises:
        InvalidRangeException: If n < 2
    """
    if n < 2:
        raise InvalidRangeException(
            f"No power of two below {n}: require n >= 2",
            details={"n": n},
        )
    return 1 << ((n - 1).bit_length() - 1)


def is_odd(x: int) -> bool:
    """Least-significant-bit test."""
    return (x & 1) == 1


__all__ = [
    "Range",
    "make_range",
    "is_power_of_two",
    "largest_power_of_two_less_than",
    "is_odd",
]
