"""
Patricia Map - Mergeable Persistent Integer Maps

An immutable map keyed by machine integers, stored as a compressed
binary radix trie (a Patricia tree). Two maps merge in time proportional
to the structural difference between them rather than their total size.

Layers:
- bits: key width configuration and branching-bit arithmetic
- nodes: Empty / Leaf / Branch and the smart constructors
- trie: lookup, insert, union and friends over raw roots
- intmap: the IntMap facade most callers should use
"""

__version__ = "0.1.0"

from .bits import WordConfig, DEFAULT_WORD_CONFIG
from .intmap import IntMap
from .trie import (
    singleton,
    lookup,
    insert,
    insert_with,
    delete,
    union,
    union_with,
    intersection_with,
    difference,
    from_items,
)
from .nodes import EMPTY

__all__ = [
    "IntMap",
    "WordConfig",
    "DEFAULT_WORD_CONFIG",
    "EMPTY",
    "singleton",
    "lookup",
    "insert",
    "insert_with",
    "delete",
    "union",
    "union_with",
    "intersection_with",
    "difference",
    "from_items",
]
