"""Element codecs - how typed values map to fixed-size element bytes.

A ``Vector[T]`` stores raw bytes; the codec it is created with fixes the
element size and converts between ``T`` and those bytes. ``StructCodec``
covers the numeric and record types ``struct`` can describe, and
``RawCodec`` is the type-erased form where an element is simply a
``bytes`` object of the element size.
"""

from __future__ import annotations

import struct
from abc import ABC, abstractmethod
from typing import Any, Generic, Iterable, TypeVar, Union

from ..runtime.errors import EncodingError

T = TypeVar("T")


class ElementCodec(ABC, Generic[T]):
    """Converts between element values and their fixed-size byte form."""

    @property
    @abstractmethod
    def size(self) -> int:
        """Bytes per element."""

    @abstractmethod
    def encode(self, value: T) -> bytes:
        """Encode one value into exactly ``size`` bytes.

        Raises:
            EncodingError: If the value cannot be represented
        """

    @abstractmethod
    def decode(self, data: bytes | memoryview) -> T:
        """Decode exactly ``size`` bytes into a value."""

    def encode_many(self, values: Iterable[T]) -> bytes:
        return b"".join(self.encode(value) for value in values)

    def decode_many(self, data: bytes | memoryview, count: int | None = None) -> list[T]:
        """Decode consecutive elements.

        ``count`` is required to recover zero-size elements, which occupy no bytes.
        """
        size = self.size
        if size == 0:
            return [self.decode(b"") for _ in range(count or 0)]
        view = memoryview(data)
        return [self.decode(view[start:start + size]) for start in range(0, len(view), size)]


class StructCodec(ElementCodec[Any]):
    """Codec backed by a ``struct`` format string.

    Single-field formats decode to the bare value; multi-field formats
    decode to a tuple and expect a tuple when encoding.
    """

    def __init__(self, fmt: str):
        try:
            self._struct = struct.Struct(fmt)
        except struct.error as e:
            raise EncodingError(f"Invalid struct format '{fmt}': {e}")
        self._fields = len(self._struct.unpack(bytes(self._struct.size)))

    @property
    def format(self) -> str:
        return self._struct.format

    @property
    def size(self) -> int:
        return self._struct.size

    def encode(self, value: Any) -> bytes:
        try:
            if self._fields == 1:
                return self._struct.pack(value)
            return self._struct.pack(*value)
        except (struct.error, TypeError) as e:
            raise EncodingError(f"Cannot encode {value!r} as '{self.format}': {e}")

    def decode(self, data: bytes | memoryview) -> Any:
        fields = self._struct.unpack(data)
        return fields[0] if self._fields == 1 else fields

    def decode_many(self, data: bytes | memoryview, count: int | None = None) -> list[Any]:
        if self.size == 0:
            return [self.decode(b"") for _ in range(count or 0)]
        if self._fields == 1:
            return [fields[0] for fields in self._struct.iter_unpack(data)]
        return list(self._struct.iter_unpack(data))

    def __eq__(self, other: object) -> bool:
        return isinstance(other, StructCodec) and other.format == self.format

    def __hash__(self) -> int:
        return hash(("struct", self.format))

    def __repr__(self) -> str:
        return f"StructCodec({self.format!r})"


class RawCodec(ElementCodec[bytes]):
    """Type-erased codec: each element is ``size`` opaque bytes."""

    def __init__(self, size: int):
        if size < 0:
            raise EncodingError(f"Element size must be non-negative, got {size}")
        self._size = size

    @property
    def size(self) -> int:
        return self._size

    def encode(self, value: bytes) -> bytes:
        try:
            data = bytes(value)
        except TypeError as e:
            raise EncodingError(f"Raw element must be bytes-like: {e}")
        if len(data) != self._size:
            raise EncodingError(
                f"Raw element must be exactly {self._size} bytes, got {len(data)}"
            )
        return data

    def decode(self, data: bytes | memoryview) -> bytes:
        return bytes(data)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, RawCodec) and other.size == self.size

    def __hash__(self) -> int:
        return hash(("raw", self._size))

    def __repr__(self) -> str:
        return f"RawCodec({self._size})"


# Standard sizes, native byte order
INT8 = StructCodec("=b")
UINT8 = StructCodec("=B")
INT16 = StructCodec("=h")
UINT16 = StructCodec("=H")
INT32 = StructCodec("=i")
UINT32 = StructCodec("=I")
INT64 = StructCodec("=q")
UINT64 = StructCodec("=Q")
FLOAT32 = StructCodec("=f")
FLOAT64 = StructCodec("=d")

CodecSpec = Union[ElementCodec[Any], int]


def as_codec(spec: CodecSpec) -> ElementCodec[Any]:
    """Normalize a codec or a bare element size into a codec."""
    if isinstance(spec, ElementCodec):
        return spec
    if isinstance(spec, int) and not isinstance(spec, bool):
        return RawCodec(spec)
    raise TypeError(f"Expected an ElementCodec or an element size, got {type(spec).__name__}")


__all__ = [
    "ElementCodec",
    "StructCodec",
    "RawCodec",
    "CodecSpec",
    "as_codec",
    "INT8",
    "UINT8",
    "INT16",
    "UINT16",
    "INT32",
    "UINT32",
    "INT64",
    "UINT64",
    "FLOAT32",
    "FLOAT64",
]
