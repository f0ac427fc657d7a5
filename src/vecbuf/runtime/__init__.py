"""Runtime layer - configuration, logging and the fatal-error policy."""

from .config import FatalMode, VectorConfig, get_config, reset_config, set_config
from .errors import (
    AllocationFailure,
    ConfigError,
    ContractViolation,
    ElementSizeMismatch,
    EncodingError,
    FatalError,
    InvalidArgument,
    OutOfBounds,
    StaleReference,
    UseAfterDelete,
    VectorError,
    fatal,
)

__all__ = [
    "FatalMode",
    "VectorConfig",
    "get_config",
    "set_config",
    "reset_config",
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
