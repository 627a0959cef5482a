"""Tests for the exception hierarchy and exit codes."""

import pytest

from reverse_sql.core.exceptions import (
    ConfigError,
    InputError,
    NetworkError,
    ReverseSqlError,
    TimeoutError,
)
from reverse_sql.core.exit_codes import ExitCode


@pytest.mark.unit
class TestExitCodes:
    def test_exit_code_values(self):
        assert ExitCode.SUCCESS == 0
        assert ExitCode.GENERAL_ERROR == 1
        assert ExitCode.USAGE_ERROR == 2
        assert ExitCode.INPUT_ERROR == 3
        assert ExitCode.OUTPUT_ERROR == 4
        assert ExitCode.NETWORK_ERROR == 5
        assert ExitCode.TIMEOUT == 6
        assert ExitCode.CONFIG_ERROR == 7


@pytest.mark.unit
class TestReverseSqlError:
    def test_base_exception(self):
        err = ReverseSqlError("catalog unavailable")
        assert str(err) == "catalog unavailable"
        assert err.message == "catalog unavailable"
        assert err.exit_code == ExitCode.GENERAL_ERROR


@pytest.mark.unit
@pytest.mark.parametrize(
    ("exc_class", "exit_code"),
    [
        (NetworkError, ExitCode.NETWORK_ERROR),
        (TimeoutError, ExitCode.TIMEOUT),
        (InputError, ExitCode.INPUT_ERROR),
        (ConfigError, ExitCode.CONFIG_ERROR),
    ],
)
def test_subclass_exit_codes(exc_class, exit_code):
    err = exc_class("boom")
    assert err.exit_code == exit_code
    assert isinstance(err, ReverseSqlError)


@pytest.mark.unit
def test_timeout_is_a_network_error():
    """Connection timeouts abort a build like any other connection failure."""
    with pytest.raises(NetworkError):
        raise TimeoutError("login timeout expired")

