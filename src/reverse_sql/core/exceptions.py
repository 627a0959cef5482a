"""Exception hierarchy for reverse-sql.

All exceptions carry an exit_code for CLI return value mapping.
Only NetworkError raised while connecting aborts a model build; other
errors raised by individual catalog queries are absorbed by the builder.
"""

from reverse_sql.core.exit_codes import ExitCode


class ReverseSqlError(Exception):
    """Base exception for all reverse-sql errors."""

    exit_code: int = ExitCode.GENERAL_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NetworkError(ReverseSqlError):
    """Connection failures, unreachable server."""

    exit_code: int = ExitCode.NETWORK_ERROR


class TimeoutError(NetworkError):
    """Query timeout, connection timeout."""

    exit_code: int = ExitCode.TIMEOUT


class InputError(ReverseSqlError):
    """Invalid parameters or object names."""

    exit_code: int = ExitCode.INPUT_ERROR


class ConfigError(ReverseSqlError):
    """Malformed config, missing profile."""

    exit_code: int = ExitCode.CONFIG_ERROR
