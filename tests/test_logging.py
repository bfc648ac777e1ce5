"""
Tests for logging setup.
"""

import logging

import pytest

from terrasphere.logging_config import setup_logging


@pytest.fixture
def package_logger():
    logger = logging.getLogger("terrasphere")
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_console_only(self, package_logger):
        logger = setup_logging(logging.WARNING)

        assert logger is package_logger
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.StreamHandler)

    def test_writes_log_file(self, package_logger, tmp_path):
        log_file = tmp_path / "run.log"

        setup_logging(logging.DEBUG, str(log_file))
        logging.getLogger("terrasphere.simulation").info("step done")
        for handler in package_logger.handlers:
            handler.flush()

        assert len(package_logger.handlers) == 2
        text = log_file.read_text(encoding="utf-8")
        assert "terrasphere.simulation: step done" in text

    def test_repeat_call_replaces_handlers(self, package_logger, tmp_path):
        setup_logging(logging.INFO, str(tmp_path / "a.log"))
        setup_logging(logging.INFO)

        assert len(package_logger.handlers) == 1
