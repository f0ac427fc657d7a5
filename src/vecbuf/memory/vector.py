"""Vector - a contiguous growable array of fixed-size elements.

Vectors keep their elements in one contiguous buffer and support O(1)
indexing, amortized O(1) pushing, and O(n) insertion and removal at
arbitrary positions.

The length of a vector is the number of elements it currently holds.
The capacity is the number of elements it can hold before reallocating.
A vector created with zero capacity owns no storage at all until it is
first grown.

Invalidation rules:
- Growing capacity replaces the backing storage. Every ``ElementRef``
  and every ``view()`` obtained before that point is invalidated.
- Inserting before the end, removing and clearing shift or drop elements
  and invalidate every outstanding ``ElementRef``.
- Using an invalidated ``ElementRef`` is a fatal ``StaleReference``.

Vectors are not internally synchronized. If several threads access and
modify the same vector, they must serialize those operations themselves,
for example with a lock held across the whole sequence.

Contract violations (out-of-range mutations, mismatched element sizes,
use after delete) and allocation failures are fatal; see
``vecbuf.runtime.errors``. Read accessors never fail: an out-of-range
read returns ``None``.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, Optional, Sequence, TypeVar

from ..runtime.config import VectorConfig, get_config
from ..runtime.errors import (
    AllocationFailure,
    ElementSizeMismatch,
    InvalidArgument,
    OutOfBounds,
    StaleReference,
    UseAfterDelete,
    fatal,
)
from .codec import CodecSpec, ElementCodec, as_codec
from .handle import AllocatedBlock, Handle, InlineHandle, fits_inline

logger = logging.getLogger(__name__)

T = TypeVar("T")


def grown_capacity(old_capacity: int, extra_capacity: int) -> int:
    """Capacity chosen when ``reserve`` must reallocate.

    Grows by 2.5x plus the requested slack, so repeated pushes are
    amortized O(1) and a zero-capacity vector still makes progress.
    """
    return old_capacity + old_capacity * 3 // 2 + extra_capacity


class ElementRef(Generic[T]):
    """Mutable borrow of one element, valid until the next invalidating mutation."""

    __slots__ = ("_vector", "_index", "_generation")

    def __init__(self, vector: Vector[T], index: int):
        self._vector = vector
        self._index = index
        self._generation = vector._generation

    @property
    def index(self) -> int:
        return self._index

    @property
    def is_valid(self) -> bool:
        return (
            not self._vector._deleted
            and self._vector._generation == self._generation
        )

    def get(self) -> T:
        """Read the referenced element."""
        block = self._checked_block("ElementRef.get")
        start = block.offset(self._index)
        return self._vector._codec.decode(
            memoryview(block.storage)[start:start + block.element_size]
        )

    def set(self, value: T) -> None:
        """Overwrite the referenced element in place."""
        data = self._vector._codec.encode(value)
        block = self._checked_block("ElementRef.set")
        start = block.offset(self._index)
        block.storage[start:start + block.element_size] = data

    def _checked_block(self, operation: str) -> AllocatedBlock:
        if not self.is_valid:
            fatal(
                StaleReference(
                    operation,
                    f"reference to element {self._index} was invalidated by a mutation",
                ),
                self._vector._config,
            )
        return self._vector._handle

    def __repr__(self) -> str:
        state = "valid" if self.is_valid else "stale"
        return f"ElementRef(index={self._index}, {state})"


class Vector(Generic[T]):
    """Contiguous growable array of ``T`` encoded by an ``ElementCodec``.

    Example:
        from vecbuf import INT32, Vector

        vec = Vector.new(10, INT32)
        vec.push([1, 2, 3, 4, 5, 6, 7, 8, 9])
        vec.remove(4, 3)            # [1, 2, 3, 4, 8, 9]
        vec.insert(4, [5, 6, 7])    # [1, 2, 3, 4, 5, 6, 7, 8, 9]
        vec.slice(2, 3)             # [3, 4, 5]
        vec.delete()
    """

    __slots__ = ("_handle", "_codec", "_config", "_generation", "_deleted")

    def __init__(
        self,
        codec: ElementCodec[T] | int,
        initial_capacity: int = 0,
        *,
        config: VectorConfig | None = None,
    ):
        """Create a new, empty vector.

        Args:
            codec: Element codec, or a bare element size for raw bytes elements
            initial_capacity: Elements the vector can hold before reallocating.
                If zero, the vector won't allocate until it's modified.
            config: Configuration to use (None = active global config)
        """
        self._codec: ElementCodec[T] = as_codec(codec)
        self._config = config or get_config()
        self._generation = 0
        self._deleted = False

        element_size = self._codec.size
        if initial_capacity < 0:
            fatal(
                InvalidArgument("new", f"negative initial capacity {initial_capacity}"),
                self._config,
            )

        if fits_inline(initial_capacity, element_size):
            self._handle: Handle = InlineHandle(element_size)
        else:
            self._handle = AllocatedBlock(
                capacity=initial_capacity,
                element_size=element_size,
                storage=self._allocate("new", initial_capacity * element_size),
            )

    @classmethod
    def new(
        cls,
        initial_capacity: int,
        codec: CodecSpec,
        *,
        config: VectorConfig | None = None,
    ) -> Vector[Any]:
        """Create a new, empty vector (argument order of the classic API)."""
        return cls(codec, initial_capacity, config=config)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def handle(self) -> Handle:
        """Current handle; replaced whenever the vector reallocates."""
        self._check_live("handle")
        return self._handle

    @property
    def codec(self) -> ElementCodec[T]:
        return self._codec

    @property
    def config(self) -> VectorConfig:
        return self._config

    @property
    def capacity(self) -> int:
        self._check_live("capacity")
        return self._handle.capacity

    @property
    def element_size(self) -> int:
        self._check_live("element_size")
        return self._handle.element_size

    @property
    def is_inline(self) -> bool:
        """True while the vector owns no storage."""
        self._check_live("is_inline")
        return isinstance(self._handle, InlineHandle)

    @property
    def is_deleted(self) -> bool:
        return self._deleted

    def len(self) -> int:
        self._check_live("len")
        return self._handle.length

    def __len__(self) -> int:
        return self.len()

    def is_empty(self) -> bool:
        return self.len() == 0

    def at(self, index: int) -> Optional[T]:
        """Return the element at ``index``, or None if out of bounds. O(1)."""
        self._check_live("at")
        if not 0 <= index < self._handle.length:
            return None
        block = self._handle
        start = block.offset(index)
        return self._codec.decode(
            memoryview(block.storage)[start:start + block.element_size]
        )

    def first(self) -> Optional[T]:
        """Return the first element, or None if the vector is empty."""
        return self.at(0)

    def last(self) -> Optional[T]:
        """Return the last element, or None if the vector is empty."""
        return self.at(self.len() - 1)

    def at_mut(self, index: int) -> Optional[ElementRef[T]]:
        """Borrow the element at ``index`` for modification, or None if out of bounds.

        The reference stays usable until the next mutation that shifts,
        drops or reallocates elements.
        """
        self._check_live("at_mut")
        if not 0 <= index < self._handle.length:
            return None
        return ElementRef(self, index)

    def view(self) -> memoryview:
        """Read-only view of the live element bytes.

        The view refers to the current storage; after the vector
        reallocates it no longer reflects the vector's contents.
        """
        self._check_live("view")
        if isinstance(self._handle, InlineHandle):
            return memoryview(b"")
        block = self._handle
        return memoryview(block.storage)[:block.used_bytes].toreadonly()

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def reserve(self, extra_capacity: int) -> None:
        """Reserve room so ``len() + extra_capacity`` elements fit without reallocating.

        Reserving is O(capacity) when the vector needs to reallocate.
        Reallocation invalidates every outstanding ``ElementRef`` and view.
        """
        self._check_live("reserve")
        if extra_capacity < 0:
            fatal(
                InvalidArgument("reserve", f"negative extra capacity {extra_capacity}"),
                self._config,
            )

        handle = self._handle
        length = handle.length
        old_capacity = handle.capacity
        if length + extra_capacity <= old_capacity:
            return

        element_size = handle.element_size
        new_capacity = grown_capacity(old_capacity, extra_capacity)
        storage = self._allocate("reserve", new_capacity * element_size)
        if isinstance(handle, AllocatedBlock):
            used = handle.used_bytes
            storage[:used] = handle.storage[:used]

        self._handle = AllocatedBlock(
            capacity=new_capacity,
            element_size=element_size,
            length=length,
            storage=storage,
        )
        self._generation += 1
        logger.debug(
            f"Vector reallocated: capacity {old_capacity} -> {new_capacity} "
            f"({element_size}-byte elements, length {length})"
        )

    def insert(
        self,
        index: int,
        elements: Sequence[T] | None,
        count: int | None = None,
    ) -> None:
        """Insert elements at ``index``, shifting all following elements right.

        Worst case (``index == 0``) is O(n).

        Args:
            index: Zero-based position of the first new element (0..len)
            elements: Values to insert; may be None when inserting nothing
            count: Number of values to take from ``elements`` (None = all)
        """
        self._check_live("insert")
        count = self._element_count("insert", elements, count)
        data = self._codec.encode_many(elements[:count]) if count else b""
        self._insert_bytes("insert", index, data, count)

    def push(self, elements: Sequence[T] | None, count: int | None = None) -> None:
        """Append elements. Amortized O(1) per element."""
        self.insert(self.len(), elements, count)

    def insert_raw(self, index: int, data: Any, count: int) -> None:
        """Insert ``count`` elements from a flat bytes-like buffer.

        ``data`` must hold at least ``count * element_size`` bytes; it may
        be None when ``count`` is zero.
        """
        self._check_live("insert_raw")
        payload = self._raw_payload("insert_raw", data, count)
        self._insert_bytes("insert_raw", index, payload, count)

    def push_raw(self, data: Any, count: int) -> None:
        """Append ``count`` elements from a flat bytes-like buffer."""
        self.insert_raw(self.len(), data, count)

    def extend(self, other: Vector[Any]) -> None:
        """Append all of ``other``'s elements. ``other`` is left untouched.

        Extending is O(len(other)), and O(capacity + len(other)) if this
        vector needs to reallocate.
        """
        self._check_live("extend")
        other._check_live("extend")
        element_size = self._handle.element_size
        other_size = other._handle.element_size
        if element_size != other_size:
            fatal(ElementSizeMismatch("extend", element_size, other_size), self._config)

        source = other._handle
        if isinstance(source, InlineHandle):
            return
        # other may be self
        data = bytes(source.storage[:source.used_bytes])
        self._insert_bytes("extend", self._handle.length, data, source.length)

    def remove(self, index: int, count: int = 1) -> None:
        """Remove ``count`` elements starting at ``index``, shifting the rest left.

        Capacity is never reduced. Removing from the front is O(n).
        """
        self._check_live("remove")
        handle = self._handle
        length = handle.length
        self._check_range("remove", index, count, length)
        if count == 0:
            return

        block = handle
        start = block.offset(index)
        gap = block.offset(count)
        end = block.used_bytes
        block.storage[start:end - gap] = block.storage[start + gap:end]
        block.length -= count
        self._generation += 1

    def slice(self, index: int, count: int) -> list[T]:
        """Copy ``count`` elements starting at ``index`` out of the vector."""
        self._check_live("slice")
        handle = self._handle
        self._check_range("slice", index, count, handle.length)
        if count == 0:
            return []
        start = handle.offset(index)
        end = start + handle.offset(count)
        return self._codec.decode_many(memoryview(handle.storage)[start:end], count)

    def slice_into(self, index: int, destination: Any, count: int) -> None:
        """Copy the raw bytes of ``count`` elements into a writable buffer.

        ``destination`` may be None when ``count`` is zero.
        """
        self._check_live("slice_into")
        handle = self._handle
        self._check_range("slice_into", index, count, handle.length)
        if count == 0:
            return

        nbytes = handle.offset(count)
        try:
            target = memoryview(destination).cast("B")
        except TypeError as e:
            fatal(InvalidArgument("slice_into", f"destination is not a buffer: {e}"), self._config)
        if target.readonly:
            fatal(InvalidArgument("slice_into", "destination buffer is read-only"), self._config)
        if len(target) < nbytes:
            fatal(
                InvalidArgument(
                    "slice_into",
                    f"destination holds {len(target)} bytes, {nbytes} required",
                ),
                self._config,
            )
        start = handle.offset(index)
        target[:nbytes] = memoryview(handle.storage)[start:start + nbytes]

    def clear(self) -> None:
        """Remove all elements. Capacity is kept; O(1)."""
        self._check_live("clear")
        if isinstance(self._handle, AllocatedBlock):
            self._handle.length = 0
        self._generation += 1

    def delete(self) -> None:
        """Release the vector's storage. The vector must not be used afterwards."""
        self._check_live("delete")
        if isinstance(self._handle, AllocatedBlock):
            logger.debug(
                f"Vector released: {self._handle.capacity * self._handle.element_size} bytes"
            )
        self._handle = InlineHandle(self._handle.element_size)
        self._deleted = True
        self._generation += 1

    def __enter__(self) -> Vector[T]:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self._deleted:
            self.delete()

    def __repr__(self) -> str:
        if self._deleted:
            return f"Vector({self._codec!r}, deleted)"
        return (
            f"Vector({self._codec!r}, len={self._handle.length}, "
            f"capacity={self._handle.capacity})"
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _insert_bytes(
        self,
        operation: str,
        index: int,
        data: bytes | memoryview,
        count: int,
    ) -> None:
        self.reserve(count)
        handle = self._handle
        length = handle.length
        if not 0 <= index <= length:
            fatal(OutOfBounds(operation, index, 0, length), self._config)
        if count == 0:
            return

        block = handle
        start = block.offset(index)
        gap = block.offset(count)
        end = block.used_bytes
        if index < length:
            block.storage[start + gap:end + gap] = block.storage[start:end]
            self._generation += 1
        block.storage[start:start + gap] = data
        block.length += count

    def _element_count(
        self,
        operation: str,
        elements: Sequence[T] | None,
        count: int | None,
    ) -> int:
        available = 0 if elements is None else len(elements)
        if count is None:
            return available
        if count < 0:
            fatal(InvalidArgument(operation, f"negative count {count}"), self._config)
        if count > available:
            fatal(
                InvalidArgument(operation, f"count {count} exceeds the {available} elements given"),
                self._config,
            )
        return count

    def _raw_payload(self, operation: str, data: Any, count: int) -> memoryview:
        if count < 0:
            fatal(InvalidArgument(operation, f"negative count {count}"), self._config)
        if count == 0:
            return memoryview(b"")
        nbytes = count * self._handle.element_size
        try:
            payload = memoryview(data).cast("B")
        except TypeError as e:
            fatal(InvalidArgument(operation, f"data is not a buffer: {e}"), self._config)
        if len(payload) < nbytes:
            fatal(
                InvalidArgument(operation, f"data holds {len(payload)} bytes, {nbytes} required"),
                self._config,
            )
        # Detach from the caller's buffer before any reallocation
        return memoryview(payload[:nbytes].tobytes())

    def _check_range(self, operation: str, index: int, count: int, length: int) -> None:
        if count < 0:
            fatal(InvalidArgument(operation, f"negative count {count}"), self._config)
        if index < 0 or index + count > length:
            fatal(OutOfBounds(operation, index, count, length), self._config)

    def _check_live(self, operation: str) -> None:
        if self._deleted:
            fatal(UseAfterDelete(operation), self._config)

    def _allocate(self, operation: str, nbytes: int) -> bytearray:
        limit = self._config.max_allocation_bytes
        if limit is not None and nbytes > limit:
            fatal(
                AllocationFailure(operation, nbytes, f"exceeds the {limit}-byte allocation limit"),
                self._config,
            )
        try:
            storage = bytearray(nbytes)
        except (MemoryError, OverflowError) as e:
            fatal(AllocationFailure(operation, nbytes, type(e).__name__), self._config)
        logger.debug(f"Allocated {nbytes} bytes of vector storage for {operation}")
        return storage


__all__ = [
    "Vector",
    "ElementRef",
    "grown_capacity",
]
