"""
Tests for logging setup.
"""

import logging

import pytest
from rich.logging import RichHandler

from module_scorecard.logger import LOGGER_NAME, configure_logging


@pytest.fixture(autouse=True)
def _restore_logger():
    logger = logging.getLogger(LOGGER_NAME)
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate


def test_console_logging_uses_rich():
    logger = configure_logging("debug")
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], RichHandler)


def test_file_logging(tmp_path):
    log_file = tmp_path / "logs" / "scorecard.log"
    logger = configure_logging("info", log_file)
    logging.getLogger("module_scorecard.core").info("Scored %s", "octocat/Hello-World")
    for handler in logger.handlers:
        handler.flush()
    assert "Scored octocat/Hello-World" in log_file.read_text(encoding="utf-8")


def test_silent_disables_output():
    logger = configure_logging("silent")
    assert not logger.isEnabledFor(logging.CRITICAL)


def test_reconfiguring_replaces_handlers():
    configure_logging("info")
    logger = configure_logging("error")
    assert len(logger.handlers) == 1
    assert logger.level == logging.ERROR
