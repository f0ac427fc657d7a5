"""Test configuration for pytest."""

import logging

import pytest

from vecbuf.runtime.config import VectorConfig, reset_config, set_config
from vecbuf.runtime.logging import _HANDLER_SLOT, PACKAGE_LOGGER


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "conformance: Container contract conformance tests")
    config.addinivalue_line("markers", "slow: Slow running tests")


@pytest.fixture(autouse=True)
def raising_config():
    """Run every test with fatal errors raised, independent of VECBUF_* variables."""
    config = set_config(VectorConfig())
    yield config
    reset_config()


@pytest.fixture(autouse=True)
def restore_package_logging():
    """Undo logging configuration done by tests and CLI entry points."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    handlers = package_logger.handlers[:]
    level = package_logger.level
    propagate = package_logger.propagate
    yield
    package_logger.handlers[:] = handlers
    package_logger.setLevel(level)
    package_logger.propagate = propagate
    _HANDLER_SLOT["handler"] = None
