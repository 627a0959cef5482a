"""Tests for logging setup."""

import pytest

from reverse_sql.core.logging import get_logger, setup_logging


@pytest.mark.unit
class TestSetupLogging:
    def test_setup_without_errors(self):
        setup_logging()

    def test_setup_verbose(self):
        setup_logging(verbose=True)


@pytest.mark.unit
class TestGetLogger:
    def test_get_logger_without_name(self):
        setup_logging()
        assert get_logger() is not None

    def test_get_logger_with_name(self):
        setup_logging()
        assert get_logger("reverse_sql.builder") is not None


@pytest.mark.unit
class TestLogOutput:
    def test_log_to_stderr(self, capsys):
        """Log output goes to stderr, not stdout."""
        setup_logging(verbose=True)
        get_logger().info("test message")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "test message" in captured.err

    def test_debug_hidden_without_verbose(self, capsys):
        setup_logging(verbose=False)
        get_logger().debug("hidden message")

        assert "hidden message" not in capsys.readouterr().err

    def test_logger_name_is_bound(self, capsys):
        setup_logging()
        get_logger("reverse_sql.builder").warning("no tables")

        assert "reverse_sql.builder" in capsys.readouterr().err
