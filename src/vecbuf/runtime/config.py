"""Configuration primitives for vecbuf."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from enum import Enum

from .errors import ConfigError


class FatalMode(str, Enum):
    """What happens when a fatal error is reported."""

    RAISE = "raise"  # Raise a FatalError (BaseException)
    ABORT = "abort"  # Terminate the process with os.abort()


_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(slots=True)
class VectorConfig:
    """Runtime configuration for vectors.

    Configuration Sources (priority order):
    1. Direct constructor arguments
    2. Environment variables (VECBUF_*)
    3. Default values

    Attributes:
        fatal_mode: Raise or abort on fatal errors (default: raise)
        max_allocation_bytes: Ceiling for a single storage allocation;
            larger requests fail like an exhausted allocator (default: None)
        log_level: Log level used by the CLI (default: WARNING)
        json_logs: Force JSON log output; None auto-detects
    """

    fatal_mode: FatalMode = FatalMode.RAISE
    max_allocation_bytes: int | None = None
    log_level: str = "WARNING"
    json_logs: bool | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.fatal_mode, FatalMode):
            self.fatal_mode = _parse_fatal_mode(self.fatal_mode)
        if self.max_allocation_bytes is not None and self.max_allocation_bytes < 0:
            raise ConfigError(
                f"max_allocation_bytes must be non-negative, got {self.max_allocation_bytes}"
            )
        level = self.log_level.upper()
        if level not in _LOG_LEVELS:
            raise ConfigError(
                f"Invalid log level '{self.log_level}'. "
                f"Must be one of: {', '.join(_LOG_LEVELS)}"
            )
        self.log_level = level

    @classmethod
    def from_env(cls, **overrides) -> VectorConfig:
        """Create configuration from environment variables.

        Optional:
            VECBUF_FATAL_MODE: 'raise' or 'abort'
            VECBUF_MAX_ALLOCATION_BYTES: Allocation ceiling in bytes
            VECBUF_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL
            VECBUF_LOG_JSON: '1' to force JSON logs, '0' to disable them
        """
        max_bytes = os.environ.get("VECBUF_MAX_ALLOCATION_BYTES", "").strip()
        json_logs = os.environ.get("VECBUF_LOG_JSON", "").strip()

        values = {
            "fatal_mode": _parse_fatal_mode(
                os.environ.get("VECBUF_FATAL_MODE", FatalMode.RAISE.value)
            ),
            "max_allocation_bytes": _parse_int(
                "VECBUF_MAX_ALLOCATION_BYTES", max_bytes
            ) if max_bytes else None,
            "log_level": os.environ.get("VECBUF_LOG_LEVEL", "WARNING"),
            "json_logs": json_logs == "1" if json_logs else None,
        }
        values.update(overrides)
        return cls(**values)

    def with_fatal_mode(self, mode: FatalMode | str) -> VectorConfig:
        """Return a copy using a different fatal mode."""
        return replace(self, fatal_mode=_parse_fatal_mode(mode))


def _parse_fatal_mode(value: FatalMode | str) -> FatalMode:
    if isinstance(value, FatalMode):
        return value
    try:
        return FatalMode(str(value).strip().lower())
    except ValueError:
        valid = ", ".join(mode.value for mode in FatalMode)
        raise ConfigError(f"Invalid fatal mode '{value}'. Must be one of: {valid}")


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got '{value}'")


# Module-level config storage
_CONFIG_SLOT: dict[str, VectorConfig | None] = {"config": None}


def get_config() -> VectorConfig:
    """Get the active configuration, loading it from the environment once."""
    if _CONFIG_SLOT["config"] is None:
        _CONFIG_SLOT["config"] = VectorConfig.from_env()
    return _CONFIG_SLOT["config"]


def set_config(config: VectorConfig) -> VectorConfig:
    """Install ``config`` as the active configuration and return it."""
    _CONFIG_SLOT["config"] = config
    return config


def reset_config() -> None:
    """Forget the active configuration; the next lookup re-reads the environment."""
    _CONFIG_SLOT["config"] = None


__all__ = [
    "FatalMode",
    "VectorConfig",
    "get_config",
    "set_config",
    "reset_config",
]
