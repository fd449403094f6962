"""Pytest configuration and fixtures for Indra tests."""
import logging

import pytest

from indra import TaskManager


@pytest.fixture
def manager() -> TaskManager:
    """Empty task manager with default configuration."""
    return TaskManager()


@pytest.fixture
def restore_root_logging():
    """Put root logger handlers and level back after a test reconfigures them."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
    logging.captureWarnings(False)
