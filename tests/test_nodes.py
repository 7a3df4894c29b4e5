"""
Tests for node types and smart constructors
"""

import dataclasses

import pytest
import numpy as np

from patricia_map.bits import DEFAULT_WORD_CONFIG
from patricia_map.nodes import EMPTY, Branch, Empty, Leaf, branch, join

word = DEFAULT_WORD_CONFIG.to_word


class TestBranch:
    def test_empty_left_collapses(self):
        leaf = Leaf(1, "a")
        assert branch(np.uint64(0), np.uint64(2), EMPTY, leaf) is leaf

    def test_empty_right_collapses(self):
        leaf = Leaf(1, "a")
        assert branch(np.uint64(0), np.uint64(2), leaf, EMPTY) is leaf

    def test_both_empty(self):
        assert isinstance(branch(np.uint64(0), np.uint64(1), EMPTY, EMPTY), Empty)

    def test_builds_branch(self):
        l0, l1 = Leaf(0, "a"), Leaf(1, "b")
        node = branch(np.uint64(0), np.uint64(1), l0, l1)
        assert isinstance(node, Branch)
        assert node.left is l0
        assert node.right is l1


class TestJoin:
    def test_orientation(self):
        l1, l3 = Leaf(1, "a"), Leaf(3, "b")
        expected = Branch(np.uint64(1), np.uint64(2), l1, l3)
        assert join(word(1), l1, word(3), l3) == expected
        assert join(word(3), l3, word(1), l1) == expected

    def test_join_with_branch(self):
        inner = join(word(0), Leaf(0, "a"), word(4), Leaf(4, "b"))
        node = join(word(1), Leaf(1, "c"), inner.prefix, inner)
        assert node.mask == np.uint64(1)
        assert node.prefix == np.uint64(0)
        assert node.left is inner
        assert node.right == Leaf(1, "c")

    def test_join_on_sign_bit(self):
        low = Leaf(0, "a")
        high = Leaf(DEFAULT_WORD_CONFIG.min_key, "b")
        node = join(word(high.key), high, word(low.key), low)
        assert node.mask == DEFAULT_WORD_CONFIG.sign_bit
        assert node.left is low
        assert node.right is high


class TestImmutability:
    def test_leaf_is_frozen(self):
        leaf = Leaf(1, "a")
        with pytest.raises(dataclasses.FrozenInstanceError):
            leaf.value = "b"

    def test_structural_equality(self):
        assert Leaf(1, "a") == Leaf(1, "a")
        assert Leaf(1, "a") != Leaf(2, "a")
        assert Empty() == EMPTY
        assert repr(EMPTY) == "Empty"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
