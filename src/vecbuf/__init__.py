"""
vecbuf - contiguous growable arrays of fixed-size elements.

A ``Vector`` stores its elements back to back in a single buffer, with
O(1) indexing, amortized O(1) appends and linear-time insertion and
removal. Empty vectors created with zero capacity own no storage.
"""

__version__ = "0.1.0"

from .memory import (
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
    ElementRef,
    RawCodec,
    StructCodec,
    Vector,
)
from .runtime import (
    AllocationFailure,
    ContractViolation,
    FatalError,
    FatalMode,
    VectorConfig,
    VectorError,
    get_config,
    set_config,
)

__all__ = [
    "Vector",
    "ElementRef",
    "ElementCodec",
    "StructCodec",
    "RawCodec",
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
    "FatalError",
    "ContractViolation",
    "AllocationFailure",
    "VectorError",
    "FatalMode",
    "VectorConfig",
    "get_config",
    "set_config",
    "__version__",
]
