"""
Patricia Tree Nodes

Three immutable node shapes:
- Empty: no keys
- Leaf(key, value): exactly one key
- Branch(prefix, mask, left, right): a fork on the single bit in ``mask``

Invariants (hold for every tree reachable from the public API):
1. ``mask`` has exactly one bit set.
2. ``prefix`` holds the bits common to every key below the branch
   (those strictly below the branching bit); all other bits are clear.
3. Keys in ``left`` have the branching bit clear, keys in ``right`` set.
4. No Branch has an Empty child. Only ``branch`` and ``join`` below,
   and the algorithms in ``trie``, build Branch nodes.
5. Keys are pairwise distinct.

Nodes are never mutated, so subtrees are freely shared between trees.
"""

from __future__ import annotations
from typing import Any, Generic, TypeVar, Union
from dataclasses import dataclass

from .bits import Word, gen_mask, get_prefix, zero

T = TypeVar("T")


@dataclass(frozen=True)
class Empty:
    """The tree with no keys."""

    def __repr__(self) -> str:
        return "Empty"


EMPTY = Empty()


@dataclass(frozen=True)
class Leaf(Generic[T]):
    """A single key and its value. ``key`` is a signed Python int."""
    key: int
    value: T


@dataclass(frozen=True)
class Branch(Generic[T]):
    """
    Fork on the branching bit ``mask``.

    ``prefix`` and ``mask`` are unsigned words (see ``bits.WordConfig``).
    """
    prefix: Word
    mask: Word
    left: Any
    right: Any


PatriciaTree = Union[Empty, Leaf, Branch]


# =============================================================================
# SMART CONSTRUCTORS
# =============================================================================

def branch(prefix: Word, mask: Word, left: PatriciaTree, right: PatriciaTree) -> PatriciaTree:
    """Build a Branch, collapsing to the other child when one side is Empty."""
    if isinstance(left, Empty):
        return right
    if isinstance(right, Empty):
        return left
    return Branch(prefix, mask, left, right)


def join(p0: Word, t0: PatriciaTree, p1: Word, t1: PatriciaTree) -> PatriciaTree:
    """
    Fuse two non-empty trees whose prefixes diverge.

    ``p0``/``p1`` are any word consistent with each tree (its prefix, or
    the key of a leaf). The new branch splits on their lowest differing
    bit; neither tree is inspected.

    Args:
        p0: Word identifying t0
        t0: First tree
        p1: Word identifying t1
        t1: Second tree

    Returns:
        Branch with t0 and t1 oriented by the branching bit of p0
    """
    mask = gen_mask(p0, p1)
    prefix = get_prefix(p0, mask)
    if zero(p0, mask):
        return Branch(prefix, mask, t0, t1)
    return Branch(prefix, mask, t1, t0)


__all__ = [
    'Empty',
    'EMPTY',
    'Leaf',
    'Branch',
    'PatriciaTree',
    'branch',
    'join',
]
