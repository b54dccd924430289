"""
Tree Builder Unit Tests
Tests for tlog_core/merkle/tree.py

Required tests:
1. Concrete vector - ["a", "b", "c"] root is node(node(a, b), c)
2. build_tree, tree_root and the recursive MTH agree for every size
3. Empty leaves - tree_root([]) returns sha256(b"")
4. Single leaf - root equals the leaf hash
5. No unpaired node is hashed with itself
"""
import hashlib

import pytest

from fixtures import reference
from tlog_core.crypto.hashing import SHA256_HASHER, TreeHasher, leaf_hash, node_hash
from tlog_core.merkle.ranges import Range
from tlog_core.merkle.tree import (
    build_tree,
    consistency_proof,
    inclusion_proof,
    tree_root,
)
from tlog_core.schemas.errors import InvalidRangeException


class TestConcreteVector:
    """The three-leaf tree hashes to known values."""

    def test_abc_root(self, abc_leaves):
        hash0 = leaf_hash(b"a")
        hash01 = node_hash(hash0, leaf_hash(b"b"))
        expected = node_hash(hash01, leaf_hash(b"c"))

        tree = build_tree(abc_leaves)

        assert tree[Range(0, 3)] == expected
        assert tree[Range(0, 2)] == hash01
        assert tree_root(abc_leaves) == expected

    def test_abc_node_set(self, abc_leaves):
        """Leaf c is carried up, not paired at the first level."""
        tree = build_tree(abc_leaves)
        assert set(tree) == {Range(0, 1), Range(1, 2), Range(2, 3), Range(0, 2), Range(0, 3)}


class TestEmptyAndSingle:
    """Degenerate tree sizes."""

    def test_empty_tree_root(self):
        assert tree_root([]) == hashlib.sha256(b"").digest()

    def test_empty_build_tree(self):
        assert build_tree([]) == {}

    def test_single_leaf(self):
        tree = build_tree([b"only"])
        assert tree == {Range(0, 1): leaf_hash(b"only")}
        assert tree_root([b"only"]) == leaf_hash(b"only")


class TestAgreement:
    """The two builders and the recursive definition agree."""

    def test_all_sizes(self):
        leaves = [f"leaf {i}".encode() for i in range(70)]
        for n in range(0, len(leaves) + 1):
            expected = reference.mth(leaves[:n])
            assert tree_root(leaves[:n]) == expected, n
            if n:
                assert build_tree(leaves[:n])[Range(0, n)] == expected, n

    def test_every_subtree_hash(self, leaf_inputs):
        """Each stored range holds the MTH of exactly the leaves it covers."""
        tree = build_tree(leaf_inputs)
        for r, h in tree.items():
            assert h == reference.mth(leaf_inputs[r.start:r.end])

    def test_node_count(self, leaf_inputs):
        """A tree of n leaves has 2n - 1 subtrees."""
        for n in range(1, len(leaf_inputs) + 1):
            assert len(build_tree(leaf_inputs[:n])) == 2 * n - 1

    def test_ranges_follow_splits(self, leaf_inputs):
        """Stored ranges are exactly the recursive splits of [0, n)."""
        expected = set()

        def walk(r):
            expected.add(r)
            if not r.is_leaf:
                for half in r.split():
                    walk(half)

        walk(Range(0, len(leaf_inputs)))
        assert set(build_tree(leaf_inputs)) == expected

    def test_no_self_pairing(self):
        """Odd sizes differ from duplicate-last padding."""
        leaves = [b"x", b"y", b"z"]
        padded = node_hash(
            node_hash(leaf_hash(b"x"), leaf_hash(b"y")),
            node_hash(leaf_hash(b"z"), leaf_hash(b"z")),
        )
        assert tree_root(leaves) != padded

    def test_other_digest(self, leaf_inputs):
        hasher = TreeHasher("sha512")
        root = tree_root(leaf_inputs, hasher=hasher)
        assert len(root) == 64
        assert build_tree(leaf_inputs, hasher=hasher)[Range(0, 11)] == root
        assert root != tree_root(leaf_inputs, hasher=SHA256_HASHER)

    def test_root_depends_on_order(self, leaf_inputs):
        assert tree_root(leaf_inputs) != tree_root(list(reversed(leaf_inputs)))


class TestProofGeneration:
    """inclusion_proof() and consistency_proof()."""

    def test_inclusion_defaults_to_full_tree(self, leaf_inputs):
        assert inclusion_proof(leaf_inputs, 3) == reference.path(3, leaf_inputs)

    def test_consistency_defaults_to_full_tree(self, leaf_inputs):
        assert consistency_proof(leaf_inputs, 3) == reference.proof(3, leaf_inputs)

    def test_tree_size_beyond_leaves_raises(self, leaf_inputs):
        with pytest.raises(InvalidRangeException):
            inclusion_proof(leaf_inputs, 0, tree_size=12)

    def test_leaf_index_beyond_tree_raises(self, leaf_inputs):
        with pytest.raises(InvalidRangeException):
            inclusion_proof(leaf_inputs, 6, tree_size=6)

    def test_first_size_beyond_second_raises(self, leaf_inputs):
        with pytest.raises(InvalidRangeException):
            consistency_proof(leaf_inputs, 8, 7)

    def test_empty_leaves_raise(self):
        with pytest.raises(InvalidRangeException):
            consistency_proof([], 0, 0)
