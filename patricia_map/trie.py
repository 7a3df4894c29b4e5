"""
Patricia Tree Algorithms

Pure functions over tree roots. Every update returns a new root and
reuses untouched subtrees of its inputs; no node is ever modified.

Combine Functions:
    Collisions are resolved by a caller-supplied two-argument function.

        insert_with(t, k, v, combine)      # combine(new, old)
        union_with(combine, t1, t2)        # combine(v_from_t1, v_from_t2)

    Exceptions raised by ``combine`` propagate unchanged.

Union cost is proportional to the structural difference between the two
inputs: branches with equal (prefix, mask) are merged pairwise, and a
tree whose prefix falls wholly inside one half of the other is merged
into that half only.

Reference: Okasaki & Gill, "Fast Mergeable Integer Maps" (1998).
"""

from __future__ import annotations
from typing import Any, Callable, Iterable, Iterator, Optional, Tuple

from .bits import DEFAULT_WORD_CONFIG, Word, WordConfig, match_prefix, zero
from .nodes import EMPTY, Branch, Empty, Leaf, PatriciaTree, branch, join

Combine = Callable[[Any, Any], Any]


def _keep_new(new, old):
    return new


def _flipped(combine: Combine) -> Combine:
    def flipped(new, old):
        return combine(old, new)
    return flipped


# =============================================================================
# LOOKUP
# =============================================================================

def _find(tree: PatriciaTree, key: int, word: Word) -> Optional[Leaf]:
    while isinstance(tree, Branch):
        if not match_prefix(word, tree.prefix, tree.mask):
            return None
        tree = tree.left if zero(word, tree.mask) else tree.right
    if isinstance(tree, Leaf) and tree.key == key:
        return tree
    return None


def find(tree: PatriciaTree, key: int, config: WordConfig = DEFAULT_WORD_CONFIG) -> Optional[Leaf]:
    """Return the Leaf holding ``key``, or None."""
    key = config.check_key(key)
    return _find(tree, key, config.to_word(key))


def lookup(tree: PatriciaTree, key: int, default: Any = None,
           config: WordConfig = DEFAULT_WORD_CONFIG) -> Any:
    """
    Value stored at ``key``, or ``default`` when absent.

    Walks at most one branch per key bit, independent of the map size.
    """
    leaf = find(tree, key, config)
    return default if leaf is None else leaf.value


def contains(tree: PatriciaTree, key: int, config: WordConfig = DEFAULT_WORD_CONFIG) -> bool:
    return find(tree, key, config) is not None


# =============================================================================
# INSERT / DELETE
# =============================================================================

def singleton(key: int, value: Any, config: WordConfig = DEFAULT_WORD_CONFIG) -> PatriciaTree:
    return Leaf(config.check_key(key), value)


def _insert_with(tree: PatriciaTree, key: int, word: Word, value: Any,
                 combine: Combine, config: WordConfig) -> PatriciaTree:
    if isinstance(tree, Empty):
        return Leaf(key, value)
    if isinstance(tree, Leaf):
        if tree.key == key:
            return Leaf(key, combine(value, tree.value))
        return join(word, Leaf(key, value), config.to_word(tree.key), tree)
    if match_prefix(word, tree.prefix, tree.mask):
        # The updated child is never Empty, so Branch is safe here.
        if zero(word, tree.mask):
            left = _insert_with(tree.left, key, word, value, combine, config)
            return Branch(tree.prefix, tree.mask, left, tree.right)
        right = _insert_with(tree.right, key, word, value, combine, config)
        return Branch(tree.prefix, tree.mask, tree.left, right)
    return join(word, Leaf(key, value), tree.prefix, tree)


def insert_with(tree: PatriciaTree, key: int, value: Any, combine: Combine,
                config: WordConfig = DEFAULT_WORD_CONFIG) -> PatriciaTree:
    """
    Insert ``key -> value``; an existing value ``old`` becomes
    ``combine(value, old)``.

    Args:
        tree: Root to insert into (left unchanged)
        key: Signed integer key
        value: Value to store
        combine: Collision function, called as combine(new, old)
        config: Key width

    Returns:
        New root
    """
    key = config.check_key(key)
    return _insert_with(tree, key, config.to_word(key), value, combine, config)


def insert(tree: PatriciaTree, key: int, value: Any,
           config: WordConfig = DEFAULT_WORD_CONFIG) -> PatriciaTree:
    """Insert ``key -> value``, replacing any existing value."""
    return insert_with(tree, key, value, _keep_new, config)


def _delete(tree: PatriciaTree, key: int, word: Word) -> PatriciaTree:
    if isinstance(tree, Leaf):
        return EMPTY if tree.key == key else tree
    if isinstance(tree, Branch) and match_prefix(word, tree.prefix, tree.mask):
        if zero(word, tree.mask):
            left = _delete(tree.left, key, word)
            if left is tree.left:
                return tree
            return branch(tree.prefix, tree.mask, left, tree.right)
        right = _delete(tree.right, key, word)
        if right is tree.right:
            return tree
        return branch(tree.prefix, tree.mask, tree.left, right)
    return tree


def delete(tree: PatriciaTree, key: int, config: WordConfig = DEFAULT_WORD_CONFIG) -> PatriciaTree:
    """Remove ``key``. Returns ``tree`` itself when the key is absent."""
    key = config.check_key(key)
    return _delete(tree, key, config.to_word(key))


# =============================================================================
# MERGE
# =============================================================================

def union_with(combine: Combine, t1: PatriciaTree, t2: PatriciaTree,
               config: WordConfig = DEFAULT_WORD_CONFIG) -> PatriciaTree:
    """
    Merge two trees; a key present in both gets ``combine(v1, v2)``.

    Case order for two branches matters:
        1. same mask and prefix  -> merge halves pairwise
        2. t1 splits first and t2 fits in one of its halves -> descend t1
        3. t2 splits first and t1 fits in one of its halves -> descend t2
        4. otherwise the prefixes diverge -> join

    Masks are unsigned words; ``m < n`` must stay an unsigned comparison
    or trees split on the sign bit come out malformed.
    """
    if isinstance(t1, Empty):
        return t2
    if isinstance(t2, Empty):
        return t1
    if isinstance(t1, Leaf):
        return _insert_with(t2, t1.key, config.to_word(t1.key), t1.value, combine, config)
    if isinstance(t2, Leaf):
        return _insert_with(t1, t2.key, config.to_word(t2.key), t2.value, _flipped(combine), config)

    p, m = t1.prefix, t1.mask
    q, n = t2.prefix, t2.mask
    if m == n and p == q:
        return Branch(p, m,
                      union_with(combine, t1.left, t2.left, config),
                      union_with(combine, t1.right, t2.right, config))
    if m < n and match_prefix(q, p, m):
        if zero(q, m):
            return Branch(p, m, union_with(combine, t1.left, t2, config), t1.right)
        return Branch(p, m, t1.left, union_with(combine, t1.right, t2, config))
    if m > n and match_prefix(p, q, n):
        if zero(p, n):
            return Branch(q, n, union_with(combine, t1, t2.left, config), t2.right)
        return Branch(q, n, t2.left, union_with(combine, t1, t2.right, config))
    return join(p, t1, q, t2)


def union(t1: PatriciaTree, t2: PatriciaTree, config: WordConfig = DEFAULT_WORD_CONFIG) -> PatriciaTree:
    """Left-biased union: values from ``t1`` win on collision."""
    return union_with(_keep_new, t1, t2, config)


def intersection_with(combine: Combine, t1: PatriciaTree, t2: PatriciaTree,
                      config: WordConfig = DEFAULT_WORD_CONFIG) -> PatriciaTree:
    """Keys present in both trees, valued ``combine(v1, v2)``."""
    if isinstance(t1, Empty) or isinstance(t2, Empty):
        return EMPTY
    if isinstance(t1, Leaf):
        other = _find(t2, t1.key, config.to_word(t1.key))
        if other is None:
            return EMPTY
        return Leaf(t1.key, combine(t1.value, other.value))
    if isinstance(t2, Leaf):
        other = _find(t1, t2.key, config.to_word(t2.key))
        if other is None:
            return EMPTY
        return Leaf(t2.key, combine(other.value, t2.value))

    p, m = t1.prefix, t1.mask
    q, n = t2.prefix, t2.mask
    if m == n and p == q:
        return branch(p, m,
                      intersection_with(combine, t1.left, t2.left, config),
                      intersection_with(combine, t1.right, t2.right, config))
    if m < n and match_prefix(q, p, m):
        half = t1.left if zero(q, m) else t1.right
        return intersection_with(combine, half, t2, config)
    if m > n and match_prefix(p, q, n):
        half = t2.left if zero(p, n) else t2.right
        return intersection_with(combine, t1, half, config)
    return EMPTY


def difference(t1: PatriciaTree, t2: PatriciaTree,
               config: WordConfig = DEFAULT_WORD_CONFIG) -> PatriciaTree:
    """Entries of ``t1`` whose keys do not occur in ``t2``."""
    if isinstance(t1, Empty) or isinstance(t2, Empty):
        return t1
    if isinstance(t1, Leaf):
        if _find(t2, t1.key, config.to_word(t1.key)) is None:
            return t1
        return EMPTY
    if isinstance(t2, Leaf):
        return _delete(t1, t2.key, config.to_word(t2.key))

    p, m = t1.prefix, t1.mask
    q, n = t2.prefix, t2.mask
    if m == n and p == q:
        return branch(p, m,
                      difference(t1.left, t2.left, config),
                      difference(t1.right, t2.right, config))
    if m < n and match_prefix(q, p, m):
        if zero(q, m):
            return branch(p, m, difference(t1.left, t2, config), t1.right)
        return branch(p, m, t1.left, difference(t1.right, t2, config))
    if m > n and match_prefix(p, q, n):
        half = t2.left if zero(p, n) else t2.right
        return difference(t1, half, config)
    return t1


# =============================================================================
# TRAVERSAL / BULK
# =============================================================================

def size(tree: PatriciaTree) -> int:
    if isinstance(tree, Empty):
        return 0
    if isinstance(tree, Leaf):
        return 1
    return size(tree.left) + size(tree.right)


def items(tree: PatriciaTree) -> Iterator[Tuple[int, Any]]:
    """
    Yield ``(key, value)`` pairs, left subtree before right.

    This is tree order, not key order.
    """
    stack = [tree]
    while stack:
        node = stack.pop()
        if isinstance(node, Branch):
            stack.append(node.right)
            stack.append(node.left)
        elif isinstance(node, Leaf):
            yield node.key, node.value


def from_items(pairs: Iterable[Tuple[int, Any]], combine: Optional[Combine] = None,
               config: WordConfig = DEFAULT_WORD_CONFIG) -> PatriciaTree:
    """
    Build a tree from ``(key, value)`` pairs.

    Later pairs replace earlier ones unless ``combine`` is given, in which
    case it is called as combine(new, old).
    """
    combine = combine or _keep_new
    tree = EMPTY
    for key, value in pairs:
        tree = insert_with(tree, key, value, combine, config)
    return tree


__all__ = [
    'Combine',
    'find',
    'lookup',
    'contains',
    'singleton',
    'insert',
    'insert_with',
    'delete',
    'union',
    'union_with',
    'intersection_with',
    'difference',
    'size',
    'items',
    'from_items',
]
