"""Output format selection for the summary commands."""

from __future__ import annotations

import sys
from enum import StrEnum
from typing import TYPE_CHECKING, Any

# Imported for their registry side effect.
from reverse_sql.formatters import csv, json, table  # noqa: F401
from reverse_sql.formatters.base import registry

if TYPE_CHECKING:
    from reverse_sql.core.models import QueryResult
    from reverse_sql.formatters.base import Formatter


class OutputFormat(StrEnum):
    TABLE = "table"
    JSON = "json"
    CSV = "csv"


def detect_tty() -> bool:
    return sys.stdout.isatty()


def resolve_format(format_flag: str | None) -> str:
    """An explicit format wins; otherwise table on a terminal, csv in a pipe."""
    if format_flag is not None:
        return format_flag
    return OutputFormat.TABLE.value if detect_tty() else OutputFormat.CSV.value


def get_formatter(
    format_flag: str | None = None,
    *,
    compact: bool = False,
    width: int = 40,
    no_header: bool = False,
) -> Formatter:
    name = resolve_format(format_flag)
    options: dict[str, dict[str, Any]] = {
        OutputFormat.TABLE.value: {"width": width},
        OutputFormat.JSON.value: {"compact": compact},
        OutputFormat.CSV.value: {"no_header": no_header},
    }
    return registry.get(name, **options.get(name, {}))


def write_output(formatter: Formatter, result: QueryResult) -> None:
    sys.stdout.writelines(f"{line}\n" for line in formatter.format(result))
