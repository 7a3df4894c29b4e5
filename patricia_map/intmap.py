"""
IntMap - Immutable Integer Map over a Patricia Tree

Design principles:
- IntMap instances are fully immutable
- All operations return new instances
- Unchanged subtrees are shared between versions
- Merging costs time proportional to where two maps differ

Usage:
    a = IntMap.from_items([(1, 10), (2, 20)])
    b = IntMap.from_items([(2, 5), (3, 30)])
    c = a.union_with(operator.add, b)   # {1: 10, 2: 25, 3: 30}
    a.lookup(2)                         # 20, a is unchanged

Bulk Pattern:
    keys = np.array([5, -3, 12], dtype=np.int64)
    m = IntMap.from_arrays(keys, ['x', 'y', 'z'])
    m.keys_array()                      # np.ndarray of int64

Key Width:
    Every IntMap carries a WordConfig. Maps built with different key
    widths cannot be combined.
"""

from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple
import logging
import numpy as np

from .bits import DEFAULT_WORD_CONFIG, WordConfig
from .nodes import EMPTY, Empty, PatriciaTree
from . import trie

logger = logging.getLogger(__name__)

_MISSING = object()


class IntMap:
    """
    Persistent map from signed integers to arbitrary values.

    Treat instances as immutable. Methods return new instances.
    """

    # Class-level default configuration
    _default_config: WordConfig = DEFAULT_WORD_CONFIG

    def __init__(self, _root: PatriciaTree = EMPTY, _config: Optional[WordConfig] = None):
        """
        Wrap an existing root (internal use).

        Use the classmethod constructors instead of calling this directly.
        """
        self._root = _root
        self._config = _config if _config is not None else self._default_config

    @property
    def config(self) -> WordConfig:
        """Key width configuration for this map."""
        return self._config

    @property
    def root(self) -> PatriciaTree:
        """Underlying tree root, for inspection."""
        return self._root

    def _wrap(self, root: PatriciaTree) -> IntMap:
        if root is self._root:
            return self
        return IntMap(root, self._config)

    def _check_compatible(self, other: IntMap, operation: str):
        if self._config != other._config:
            raise ValueError(f"Cannot {operation} IntMaps with different key widths "
                             f"({self._config.bits} vs {other._config.bits})")

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    @classmethod
    def get_default_config(cls) -> WordConfig:
        return cls._default_config

    @classmethod
    def set_default_config(cls, config: WordConfig):
        """
        Set the default key width for new maps.

        WARNING: This affects every IntMap created without an explicit config.
        """
        logger.info("IntMap default key width set to %d bits", config.bits)
        cls._default_config = config

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def empty(cls, config: Optional[WordConfig] = None) -> IntMap:
        return cls(EMPTY, config)

    @classmethod
    def singleton(cls, key: int, value: Any, config: Optional[WordConfig] = None) -> IntMap:
        cfg = config or cls._default_config
        return cls(trie.singleton(key, value, cfg), cfg)

    @classmethod
    def from_items(cls, pairs: Iterable[Tuple[int, Any]],
                   combine: Optional[Callable[[Any, Any], Any]] = None,
                   config: Optional[WordConfig] = None) -> IntMap:
        """
        Build a map from ``(key, value)`` pairs.

        Args:
            pairs: Iterable of (key, value)
            combine: Collision function called as combine(new, old);
                later pairs replace earlier ones when omitted
            config: Key width (uses default if not provided)

        Returns:
            New IntMap
        """
        cfg = config or cls._default_config
        root = trie.from_items(pairs, combine, cfg)
        result = cls(root, cfg)
        logger.debug("Built IntMap with %d keys from items", len(result))
        return result

    @classmethod
    def from_dict(cls, mapping: Dict[int, Any], config: Optional[WordConfig] = None) -> IntMap:
        return cls.from_items(mapping.items(), config=config)

    @classmethod
    def from_arrays(cls, keys: np.ndarray, values: Iterable[Any],
                    combine: Optional[Callable[[Any, Any], Any]] = None,
                    config: Optional[WordConfig] = None) -> IntMap:
        """
        Build a map from a 1-D integer key array and matching values.

        numpy values are stored as Python scalars.

        Raises:
            ValueError: keys not 1-D or not integer, or length mismatch
        """
        keys = np.asarray(keys)
        if keys.ndim != 1:
            raise ValueError(f"Expected 1D key array, got {keys.ndim}D")
        if keys.size and not np.issubdtype(keys.dtype, np.integer):
            raise ValueError(f"Expected integer keys, got dtype {keys.dtype}")

        if isinstance(values, np.ndarray):
            values = values.tolist()
        else:
            values = list(values)
        if len(values) != len(keys):
            raise ValueError(f"Length mismatch: {len(keys)} keys vs {len(values)} values")

        cfg = config or cls._default_config
        root = trie.from_items(zip(keys.tolist(), values), combine, cfg)
        logger.debug("Built IntMap from arrays of %d keys", len(keys))
        return cls(root, cfg)

    @classmethod
    def merge(cls, maps: List[IntMap],
              combine: Optional[Callable[[Any, Any], Any]] = None) -> IntMap:
        """
        Union of many maps, folded left to right.

        Args:
            maps: IntMaps with the same key width
            combine: Collision function combine(v_left, v_right);
                the leftmost value wins when omitted

        Returns:
            New IntMap containing every key of every input
        """
        if not maps:
            return cls.empty()

        result = maps[0]
        for other in maps[1:]:
            result = result.union(other) if combine is None else result.union_with(combine, other)
        logger.debug("Merged %d IntMaps into %d keys", len(maps), len(result))
        return result

    # -------------------------------------------------------------------------
    # Instance Methods - Return new instances
    # -------------------------------------------------------------------------

    def insert(self, key: int, value: Any) -> IntMap:
        """Insert, replacing any existing value."""
        return IntMap(trie.insert(self._root, key, value, self._config), self._config)

    def insert_with(self, key: int, value: Any, combine: Callable[[Any, Any], Any]) -> IntMap:
        """Insert; an existing value ``old`` becomes ``combine(value, old)``."""
        return IntMap(trie.insert_with(self._root, key, value, combine, self._config), self._config)

    def delete(self, key: int) -> IntMap:
        return self._wrap(trie.delete(self._root, key, self._config))

    def union_with(self, combine: Callable[[Any, Any], Any], other: IntMap) -> IntMap:
        """Union; keys in both maps get ``combine(self_value, other_value)``."""
        self._check_compatible(other, "union")
        return self._wrap(trie.union_with(combine, self._root, other._root, self._config))

    def union(self, other: IntMap) -> IntMap:
        """Left-biased union (values from self win)."""
        self._check_compatible(other, "union")
        return self._wrap(trie.union(self._root, other._root, self._config))

    def intersection_with(self, combine: Callable[[Any, Any], Any], other: IntMap) -> IntMap:
        """Keys in both maps, valued ``combine(self_value, other_value)``."""
        self._check_compatible(other, "intersect")
        return self._wrap(trie.intersection_with(combine, self._root, other._root, self._config))

    def difference(self, other: IntMap) -> IntMap:
        """Entries of self whose keys are not in ``other``."""
        self._check_compatible(other, "diff")
        return self._wrap(trie.difference(self._root, other._root, self._config))

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def lookup(self, key: int, default: Any = None) -> Any:
        """Value at ``key``, or ``default`` if absent."""
        return trie.lookup(self._root, key, default, self._config)

    get = lookup

    def keys_array(self) -> np.ndarray:
        """Keys as a numpy array of the signed key dtype (tree order)."""
        return np.fromiter(iter(self), dtype=self._config.key_dtype, count=len(self))

    def items(self) -> Iterator[Tuple[int, Any]]:
        return trie.items(self._root)

    def values(self) -> Iterator[Any]:
        return (value for _, value in trie.items(self._root))

    def to_dict(self) -> Dict[int, Any]:
        return dict(trie.items(self._root))

    # -------------------------------------------------------------------------
    # Python Protocols
    # -------------------------------------------------------------------------

    def __contains__(self, key) -> bool:
        return trie.contains(self._root, key, self._config)

    def __getitem__(self, key: int) -> Any:
        value = trie.lookup(self._root, key, _MISSING, self._config)
        if value is _MISSING:
            raise KeyError(key)
        return value

    def __iter__(self) -> Iterator[int]:
        return (key for key, _ in trie.items(self._root))

    def __len__(self) -> int:
        return trie.size(self._root)

    def __bool__(self) -> bool:
        return not isinstance(self._root, Empty)

    def __or__(self, other: IntMap) -> IntMap:
        if not isinstance(other, IntMap):
            return NotImplemented
        return self.union(other)

    def __eq__(self, other) -> bool:
        if not isinstance(other, IntMap):
            return False
        return self._config == other._config and self._root == other._root

    def __repr__(self) -> str:
        return f"IntMap({self.to_dict()!r}, bits={self._config.bits})"


# Export
__all__ = [
    'IntMap',
]
