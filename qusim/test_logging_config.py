"""Importing qusim must not configure the host application's logging."""

import logging

import qusim  # noqa: F401
from qusim.logging_config import get_logger


def test_import_installs_only_a_null_handler():
    root = logging.getLogger("qusim")
    assert any(isinstance(h, logging.NullHandler) for h in root.handlers)
    assert not any(type(h) is logging.StreamHandler for h in root.handlers)
    assert root.propagate


def test_child_loggers_propagate_to_host():
    logger = get_logger("core.circuit")
    assert logger.name == "qusim.core.circuit"
    assert logger.propagate
    assert get_logger("qusim.stats").name == "qusim.stats"
    assert get_logger() is logging.getLogger("qusim")
