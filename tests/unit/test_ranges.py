"""
Range Arithmetic Unit Tests
Tests for tlog_core/merkle/ranges.py
"""
import pytest

from tlog_core.merkle.ranges import (
    Range,
    is_odd,
    is_power_of_two,
    largest_power_of_two_less_than,
    make_range,
)
from tlog_core.schemas.errors import ErrorCodes, InvalidRangeException


class TestRange:
    """Tests for the Range value type."""

    def test_size_and_leaf(self):
        assert Range(3, 7).size == 4
        assert Range(5, 6).is_leaf
        assert not Range(0, 2).is_leaf

    def test_value_equality_and_hashing(self):
        mapping = {Range(0, 4): b"x"}
        assert mapping[Range(0, 4)] == b"x"
        assert Range(0, 4) == (0, 4)

    def test_split_at_largest_power_of_two(self):
        assert Range(0, 7).split() == (Range(0, 4), Range(4, 7))
        assert Range(4, 7).split() == (Range(4, 6), Range(6, 7))
        assert Range(0, 8).split() == (Range(0, 4), Range(4, 8))

    def test_split_leaf_raises(self):
        with pytest.raises(InvalidRangeException):
            Range(2, 3).split()

    def test_contains(self):
        outer = Range(0, 8)
        assert outer.contains(Range(4, 6))
        assert outer.contains(outer)
        assert not Range(4, 8).contains(Range(3, 5))

    def test_str(self):
        assert str(Range(2, 5)) == "[2, 5)"

    def test_split_ranges_never_partially_overlap(self):
        """Recursive splits produce ranges that are disjoint, nested or identical."""
        collected = []

        def walk(r):
            collected.append(r)
            if not r.is_leaf:
                for half in r.split():
                    walk(half)

        walk(Range(0, 13))
        for a in collected:
            for b in collected:
                disjoint = a.end <= b.start or b.end <= a.start
                assert disjoint or a.contains(b) or b.contains(a)


class TestMakeRange:
    """Tests for make_range() validation."""

    def test_valid(self):
        assert make_range(0, 1) == Range(0, 1)

    @pytest.mark.parametrize("start,end", [(0, 0), (3, 2), (-1, 4)])
    def test_invalid(self, start, end):
        with pytest.raises(InvalidRangeException) as exc_info:
            make_range(start, end)

        assert exc_info.value.code == ErrorCodes.INVALID_RANGE
        assert exc_info.value.details == {"start": start, "end": end}


class TestPowerOfTwo:
    """Tests for is_power_of_two() and largest_power_of_two_less_than()."""

    def test_zero_is_not_power_of_two(self):
        assert not is_power_of_two(0)

    def test_agrees_with_bit_count(self):
        for n in range(1, 1025):
            assert is_power_of_two(n) == (bin(n).count("1") == 1)

    def test_largest_power_below(self):
        for n in range(2, 1025):
            k = largest_power_of_two_less_than(n)
            assert k < n
            assert is_power_of_two(k)
            assert k * 2 >= n

    def test_known_values(self):
        assert [largest_power_of_two_less_than(n) for n in (2, 3, 4, 5, 8, 9)] == [1, 2, 2, 4, 4, 8]

    @pytest.mark.parametrize("n", [-1, 0, 1])
    def test_below_two_raises(self, n):
        with pytest.raises(InvalidRangeException):
            largest_power_of_two_less_than(n)

    def test_large_value(self):
        assert largest_power_of_two_less_than(2 ** 40 + 1) == 2 ** 40


class TestIsOdd:
    """Tests for is_odd()."""

    def test_values(self):
        assert is_odd(1)
        assert is_odd(7)
        assert not is_odd(0)
        assert not is_odd(6)
