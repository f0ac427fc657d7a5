"""Failure policy for vector operations.

Two classes of failure exist. Contract violations and allocation
failures are fatal: continuing would leave the container (or the
caller's view of it) corrupt, so they either raise a ``FatalError`` or
abort the process, depending on ``VectorConfig.fatal_mode``. Everything
else (bad element values, bad configuration) is recoverable and raises a
regular ``VectorError``.

``FatalError`` derives from ``BaseException`` so that a broad
``except Exception`` cannot swallow it.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, NoReturn

if TYPE_CHECKING:
    from .config import VectorConfig

logger = logging.getLogger(__name__)


class FatalError(BaseException):
    """Non-recoverable failure raised by a vector operation."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(f"{operation}: {message}")


class ContractViolation(FatalError):
    """The caller broke the documented contract of an operation."""


class OutOfBounds(ContractViolation):
    """An index or ``[index, index + count)`` range exceeds the length."""

    def __init__(self, operation: str, index: int, count: int, length: int):
        self.index = index
        self.count = count
        self.length = length
        super().__init__(
            operation,
            f"range [{index}, {index + count}) out of bounds for length {length}",
        )


class InvalidArgument(ContractViolation):
    """A count, capacity or buffer argument is unusable."""


class ElementSizeMismatch(ContractViolation):
    """Two vectors with different element sizes were combined."""

    def __init__(self, operation: str, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            operation,
            f"element size mismatch: expected {expected} bytes, got {actual}",
        )


class UseAfterDelete(ContractViolation):
    """The vector was used (or deleted again) after ``delete``."""

    def __init__(self, operation: str):
        super().__init__(operation, "vector has already been deleted")


class StaleReference(ContractViolation):
    """An element reference outlived a mutation that invalidated it."""


class AllocationFailure(FatalError):
    """Backing storage could not be allocated."""

    def __init__(self, operation: str, requested_bytes: int, reason: str):
        self.requested_bytes = requested_bytes
        super().__init__(
            operation,
            f"cannot allocate {requested_bytes} bytes ({reason})",
        )


class VectorError(Exception):
    """Base class for recoverable vecbuf errors."""


class EncodingError(VectorError, ValueError):
    """An element value could not be encoded by the vector's codec."""


class ConfigError(VectorError, ValueError):
    """Invalid configuration value."""


def fatal(error: FatalError, config: VectorConfig | None = None) -> NoReturn:
    """Report a fatal error and stop the current operation.

    Logs the violation, then raises ``error`` or, in abort mode,
    terminates the process with ``SIGABRT``.

    Args:
        error: The fatal error describing the violation
        config: ``VectorConfig`` to consult (None = active global config)
    """
    from .config import FatalMode, get_config

    config = config or get_config()
    logger.error(f"Fatal vector error in {error.operation}: {error.message}")

    if config.fatal_mode is FatalMode.ABORT:
        for name in (None, "vecbuf"):
            for handler in logging.getLogger(name).handlers:
                handler.flush()
        os.abort()

    raise error


__all__ = [
    "FatalError",
    "ContractViolation",
    "OutOfBounds",
    "InvalidArgument",
    "ElementSizeMismatch",
    "UseAfterDelete",
    "StaleReference",
    "AllocationFailure",
    "VectorError",
    "EncodingError",
    "ConfigError",
    "fatal",
]
