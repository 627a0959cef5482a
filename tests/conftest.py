"""Shared test fixtures for reverse-sql."""

from pathlib import Path
from tempfile import TemporaryDirectory

import pytest
from typer.testing import CliRunner

from reverse_sql.cli.main import app
from tests.fakes import FakeCatalog


@pytest.fixture
def runner():
    """Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_runner(runner):
    """Invoke the CLI app with the given arguments."""

    def invoke(*args: str, **kwargs):
        return runner.invoke(app, list(args), **kwargs)

    return invoke


@pytest.fixture
def temp_dir():
    """Temporary directory for test files."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def catalog():
    """Empty in-memory catalog; tests register record sets on it."""
    return FakeCatalog()


@pytest.fixture(autouse=True)
def _clean_mssql_env(request, monkeypatch):
    """Keep a developer's MSSQL_* settings out of unit tests."""
    if request.node.get_closest_marker("integration"):
        return
    for var in (
        "MSSQL_SERVER",
        "MSSQL_PORT",
        "MSSQL_DATABASE",
        "MSSQL_USER",
        "MSSQL_PASSWORD",
        "REVERSE_SQL_PROFILE",
        "REVERSE_SQL_SENTRY_DSN",
    ):
        monkeypatch.delenv(var, raising=False)
