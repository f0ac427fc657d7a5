"""Memory layer - handles, element codecs and the growable vector."""

from .codec import (
    FLOAT32,
    FLOAT64,
    INT8,
    INT16,
    INT32,
    INT64,
    UINT8,
    UINT16,
    UINT32,
    UINT64,
    ElementCodec,
    RawCodec,
    StructCodec,
    as_codec,
)
from .handle import MAX_INLINE_ELEMENT_SIZE, AllocatedBlock, InlineHandle
from .vector import ElementRef, Vector, grown_capacity

__all__ = [
    "Vector",
    "ElementRef",
    "grown_capacity",
    "InlineHandle",
    "AllocatedBlock",
    "MAX_INLINE_ELEMENT_SIZE",
    "ElementCodec",
    "StructCodec",
    "RawCodec",
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
