"""Rich table output for object summaries."""

from __future__ import annotations

import shutil
import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from reverse_sql.formatters.base import registry

if TYPE_CHECKING:
    from collections.abc import Iterator

    from reverse_sql.core.models import QueryResult


class TableFormatter:
    """Boxed table; cells wider than width are cut with an ellipsis."""

    empty_message = "No objects found"

    def __init__(self, width: int = 40) -> None:
        self.width = width

    def format(self, result: QueryResult) -> Iterator[str]:
        if not result.rows:
            yield self.empty_message
            return

        table = Table()
        for column in result.columns:
            table.add_column(
                column.name,
                justify="right" if column.type_name == "int" else "left",
                max_width=self.width,
                overflow="ellipsis",
                no_wrap=True,
            )
        for row in result.rows:
            table.add_row(*("" if v is None else str(v) for v in row))

        console = Console(
            width=shutil.get_terminal_size((120, 24)).columns,
            force_terminal=sys.stdout.isatty(),
        )
        with console.capture() as capture:
            console.print(table)
        yield capture.get().rstrip("\n")


registry.register("table", TableFormatter)
