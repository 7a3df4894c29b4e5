"""
Shared test helpers: structural invariant checks for Patricia trees.
"""

import pytest

from patricia_map.bits import DEFAULT_WORD_CONFIG, get_prefix, match_prefix, zero
from patricia_map.nodes import Branch, Empty, Leaf


def collect_violations(tree, config=DEFAULT_WORD_CONFIG):
    """Walk a tree and return a list of invariant violations (empty if well formed)."""
    problems = []
    seen = set()

    def walk(node, ancestors):
        if isinstance(node, Empty):
            if ancestors:
                problems.append("Empty node below a Branch")
            return
        if isinstance(node, Leaf):
            if node.key in seen:
                problems.append(f"Duplicate key {node.key}")
            seen.add(node.key)
            word = config.to_word(node.key)
            for anc, side in ancestors:
                if not match_prefix(word, anc.prefix, anc.mask):
                    problems.append(f"Key {node.key} does not match prefix of mask {anc.mask}")
                if zero(word, anc.mask) != (side == "left"):
                    problems.append(f"Key {node.key} on wrong side of mask {anc.mask}")
            return
        assert isinstance(node, Branch)
        if not isinstance(node.mask, config.dtype) or not isinstance(node.prefix, config.dtype):
            problems.append("Prefix/mask not stored as unsigned words")
        mask = int(node.mask)
        if mask == 0 or mask & (mask - 1):
            problems.append(f"Mask {mask:#x} is not a single bit")
        if get_prefix(node.prefix, node.mask) != node.prefix:
            problems.append(f"Prefix {int(node.prefix):#x} has bits at or above mask {mask:#x}")
        if isinstance(node.left, Empty) or isinstance(node.right, Empty):
            problems.append("Branch with Empty child")
        walk(node.left, ancestors + [(node, "left")])
        walk(node.right, ancestors + [(node, "right")])

    walk(tree, [])
    return problems


@pytest.fixture
def well_formed():
    def check(tree, config=DEFAULT_WORD_CONFIG):
        problems = collect_violations(tree, config)
        assert not problems, problems
        return True
    return check
