"""Structured log output for vecbuf.

Library modules log through plain ``logging.getLogger(__name__)``
loggers under the ``vecbuf`` namespace. ``configure_logging`` renders
those records with structlog, as JSON lines or as console output,
following the active ``VectorConfig``.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Any

import structlog

from .config import VectorConfig, get_config

PACKAGE_LOGGER = "vecbuf"

# Handler installed by the last configure_logging() call
_HANDLER_SLOT: dict[str, logging.Handler | None] = {"handler": None}


def build_formatter(json_output: bool, colors: bool = False) -> logging.Formatter:
    """Build a formatter that renders stdlib records through structlog.

    Args:
        json_output: Render one JSON object per record
        colors: Colorize console output (ignored for JSON)
    """
    pre_chain: list[Any] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if json_output:
        pre_chain.append(structlog.processors.format_exc_info)
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors)

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def configure_logging(
    config: VectorConfig | None = None,
    stream: IO[str] | None = None,
) -> logging.Handler:
    """Send vecbuf's log records to ``stream`` using the config's settings.

    Uses ``config.log_level`` and ``config.json_logs``; when ``json_logs``
    is None, JSON is chosen unless the stream is a terminal. Calling it
    again replaces the previously installed handler.

    Args:
        config: Configuration to read (None = active global config)
        stream: Output stream (default: sys.stderr)

    Returns:
        The installed handler
    """
    config = config or get_config()
    stream = stream or sys.stderr
    is_tty = hasattr(stream, "isatty") and stream.isatty()
    json_output = config.json_logs if config.json_logs is not None else not is_tty

    handler = logging.StreamHandler(stream)
    handler.setFormatter(build_formatter(json_output, colors=is_tty))

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    previous = _HANDLER_SLOT["handler"]
    if previous is not None:
        package_logger.removeHandler(previous)
    package_logger.addHandler(handler)
    package_logger.setLevel(config.log_level)
    package_logger.propagate = False
    _HANDLER_SLOT["handler"] = handler
    return handler


__all__ = [
    "PACKAGE_LOGGER",
    "build_formatter",
    "configure_logging",
]
