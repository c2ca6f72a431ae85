"""
Tests for logging helpers.
"""

import io
import logging

import pytest

from spectral_partition.utils.logging_config import get_logger, setup_logging


def _package_handlers():
    logger = logging.getLogger("spectral_partition")
    return [h for h in logger.handlers if getattr(h, "_spectral_partition", False)]


def test_get_logger_namespaces_under_package():
    assert get_logger("spectral_partition.algorithms.eigen").name == "spectral_partition.algorithms.eigen"
    assert get_logger("tools").name == "spectral_partition.tools"


def test_setup_logging_replaces_handler():
    stream = io.StringIO()
    setup_logging("INFO", stream=stream)
    setup_logging("DEBUG", stream=stream)

    assert len(_package_handlers()) == 1
    assert logging.getLogger("spectral_partition").level == logging.DEBUG

    get_logger("tests").debug("hello from the test")
    assert "hello from the test" in stream.getvalue()


def test_setup_logging_unknown_level():
    with pytest.raises(ValueError, match="Unknown log level"):
        setup_logging("CHATTY")
