"""Vector handle - the two representations of a vector's state.

A handle is either:

- ``InlineHandle``: an empty, never-allocated vector. It carries nothing
  but the element size and has ``length == capacity == 0``. Its scalar
  form packs the element size above a set tag bit, ``(size << 1) | 1``.
- ``AllocatedBlock``: header fields (capacity, length, element size)
  plus the owned element storage, ``capacity * element_size`` bytes of
  which the first ``length * element_size`` are live.

Growing a vector replaces its ``AllocatedBlock`` with a new one, so the
identity of the block changes on every reallocation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

WORD_BITS = 64
TAG_BIT = 1

# The shifted size must still fit in the word next to the tag bit
MAX_INLINE_ELEMENT_SIZE = (1 << (WORD_BITS - 1)) - 1


@dataclass(frozen=True, slots=True)
class InlineHandle:
    """Zero-capacity vector that owns no storage."""

    element_size: int

    @property
    def length(self) -> int:
        return 0

    @property
    def capacity(self) -> int:
        return 0

    @property
    def bits(self) -> int:
        """Tagged scalar encoding of this handle."""
        return (self.element_size << 1) | TAG_BIT

    @classmethod
    def from_bits(cls, bits: int) -> InlineHandle:
        """Decode a tagged scalar produced by ``bits``.

        Raises:
            ValueError: If the tag bit is clear or the value exceeds a word
        """
        if not is_inline_bits(bits):
            raise ValueError(f"0x{bits:x} is not an inline vector handle")
        if bits >> WORD_BITS:
            raise ValueError(f"0x{bits:x} does not fit in a {WORD_BITS}-bit handle")
        return cls(element_size=bits >> 1)


@dataclass(slots=True)
class AllocatedBlock:
    """Header plus owned element storage."""

    capacity: int
    element_size: int
    length: int = 0
    storage: bytearray = field(default_factory=bytearray, repr=False)

    @property
    def used_bytes(self) -> int:
        return self.length * self.element_size

    def offset(self, index: int) -> int:
        """Byte offset of element ``index`` in ``storage`` (unchecked)."""
        return index * self.element_size


Handle = Union[InlineHandle, AllocatedBlock]


def is_inline_bits(bits: int) -> bool:
    """True if a tagged scalar denotes the inline form."""
    return bits >= 0 and (bits & TAG_BIT) == TAG_BIT


def fits_inline(initial_capacity: int, element_size: int) -> bool:
    """Whether ``new`` can return the allocation-free inline form."""
    return initial_capacity == 0 and 0 <= element_size <= MAX_INLINE_ELEMENT_SIZE


__all__ = [
    "WORD_BITS",
    "MAX_INLINE_ELEMENT_SIZE",
    "InlineHandle",
    "AllocatedBlock",
    "Handle",
    "is_inline_bits",
    "fits_inline",
]
