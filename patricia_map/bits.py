"""
Bit/Mask Arithmetic for Patricia Trees

Pure functions locating branching points between integer keys:
- get_prefix: bits shared by every key below a branching bit
- match_prefix: does a key belong under a given (prefix, mask)?
- zero: left/right side of a branching bit
- gen_mask: lowest bit at which two words differ

Word Configuration:
    WordConfig is the SINGLE SOURCE OF TRUTH for the key width.
    Keys are signed integers; prefixes and masks are stored as numpy
    UNSIGNED scalars of the configured width:

        config = WordConfig(bits=64)
        word = config.to_word(-1)        # np.uint64(0xFFFFFFFFFFFFFFFF)
        config.from_word(word)           # -1

Branching is low-bit-first: a branch splits on the lowest bit at which
its two halves differ, and its prefix holds the bits strictly BELOW
that bit. A numerically smaller mask therefore sits closer to the root.
"""

from __future__ import annotations
from typing import Dict, Union
from dataclasses import dataclass
import operator
import numpy as np


# =============================================================================
# WORD TYPES
# =============================================================================
# Every prefix and mask is an unsigned numpy scalar. Mask ordering is an
# unsigned comparison: a mask with the top bit set is the LARGEST mask,
# never a negative one.
# =============================================================================

_UNSIGNED_DTYPES: Dict[int, type] = {
    8: np.uint8,
    16: np.uint16,
    32: np.uint32,
    64: np.uint64,
}

_SIGNED_DTYPES: Dict[int, type] = {
    8: np.int8,
    16: np.int16,
    32: np.int32,
    64: np.int64,
}

Word = Union[np.unsignedinteger, int]


@dataclass(frozen=True)
class WordConfig:
    """
    Key width configuration.

    Attributes:
        bits: Width of a key in bits (8, 16, 32 or 64)

    Example:
        >>> config = WordConfig(bits=32)
        >>> config.dtype
        <class 'numpy.uint32'>
        >>> config.to_word(-2)
        np.uint32(4294967294)
    """
    bits: int = 64

    def __post_init__(self):
        if self.bits not in _UNSIGNED_DTYPES:
            raise ValueError(
                f"Unsupported key width: {self.bits} "
                f"(expected one of {sorted(_UNSIGNED_DTYPES)})"
            )

    @property
    def dtype(self) -> type:
        """Unsigned numpy type for prefixes and masks."""
        return _UNSIGNED_DTYPES[self.bits]

    @property
    def key_dtype(self) -> type:
        """Signed numpy type for bulk key arrays."""
        return _SIGNED_DTYPES[self.bits]

    @property
    def word_mask(self) -> int:
        return (1 << self.bits) - 1

    @property
    def min_key(self) -> int:
        return -(1 << (self.bits - 1))

    @property
    def max_key(self) -> int:
        return (1 << (self.bits - 1)) - 1

    @property
    def sign_bit(self) -> np.unsignedinteger:
        """The highest bit of the word, as an unsigned mask."""
        return self.dtype(1 << (self.bits - 1))

    def check_key(self, key) -> int:
        """
        Validate a key and return it as a plain Python int.

        Raises:
            TypeError: key is not integer-like
            ValueError: key does not fit in a signed word of this width
        """
        key = operator.index(key)
        if not self.min_key <= key <= self.max_key:
            raise ValueError(
                f"Key {key} out of range [{self.min_key}, {self.max_key}] "
                f"for {self.bits}-bit keys"
            )
        return key

    def to_word(self, key: int) -> np.unsignedinteger:
        """Reinterpret a checked signed key as an unsigned word."""
        return self.dtype(key & self.word_mask)

    def from_word(self, word: Word) -> int:
        """Reinterpret an unsigned word as a signed key."""
        w = int(word)
        if w >> (self.bits - 1):
            return w - (1 << self.bits)
        return w


DEFAULT_WORD_CONFIG = WordConfig(bits=64)


# =============================================================================
# MASK ARITHMETIC
# =============================================================================

def get_prefix(key: Word, mask: Word) -> Word:
    """
    Bits of ``key`` strictly below the single set bit of ``mask``.

    Every key stored under a branch agrees with the branch prefix on
    these bits.
    """
    return key & (mask - type(mask)(1))


def match_prefix(key: Word, prefix: Word, mask: Word) -> bool:
    """True iff ``key`` may live under the branch ``(prefix, mask)``."""
    return bool(get_prefix(key, mask) == prefix)


def zero(key: Word, mask: Word) -> bool:
    """True iff the branching bit is clear in ``key`` (left side)."""
    return not (key & mask)


def gen_mask(p0: Word, p1: Word) -> Word:
    """
    Lowest bit at which ``p0`` and ``p1`` differ, as a one-bit mask.

    Computes ``x & -x`` for ``x = p0 ^ p1`` in two's complement. The
    negation is spelled ``~x + 1`` so unsigned numpy words wrap instead
    of changing type. Only defined for ``p0 != p1``.
    """
    x = p0 ^ p1
    return x & (~x + type(x)(1))


__all__ = [
    'WordConfig',
    'DEFAULT_WORD_CONFIG',
    'get_prefix',
    'match_prefix',
    'zero',
    'gen_mask',
]
