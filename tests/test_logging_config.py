"""Tests for logging setup."""

import json
import logging

from locktree.logging_config import LOGGER_NAME, JsonFormatter, setup_logging


class TestSetupLogging:
    """Handler configuration."""

    def test_level_and_single_handler(self):
        logger = setup_logging("DEBUG")
        assert logger.name == LOGGER_NAME
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

        setup_logging("error")
        assert len(logger.handlers) == 1
        assert logger.level == logging.ERROR

    def test_formatter_switches_on_repeat_call(self):
        logger = setup_logging("INFO")
        assert not isinstance(logger.handlers[0].formatter, JsonFormatter)

        setup_logging("INFO", structured=True)
        assert isinstance(logger.handlers[0].formatter, JsonFormatter)

    def test_child_loggers_write_to_stderr(self, capsys):
        setup_logging("INFO")
        logging.getLogger("locktree.core").info("hello")
        captured = capsys.readouterr()
        assert "INFO locktree.core: hello" in captured.err
        assert captured.out == ""

    def test_below_level_suppressed(self, capsys):
        setup_logging("WARNING")
        logging.getLogger("locktree.tree_builder").debug("quiet")
        assert "quiet" not in capsys.readouterr().err


class TestJsonFormatter:
    """JSON log records."""

    def test_format(self):
        record = logging.LogRecord(
            name="locktree.tree_builder",
            level=logging.WARNING,
            pathname=__file__,
            lineno=1,
            msg="Skipping %s",
            args=("x",),
            exc_info=None,
        )

        entry = json.loads(JsonFormatter().format(record))

        assert entry == {
            "level": "WARNING",
            "logger": "locktree.tree_builder",
            "message": "Skipping x",
        }
