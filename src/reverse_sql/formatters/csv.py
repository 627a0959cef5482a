"""CSV output for object summaries."""

from __future__ import annotations

import csv
from io import StringIO
from typing import TYPE_CHECKING, Any

from reverse_sql.formatters.base import registry

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from reverse_sql.core.models import QueryResult


class CSVFormatter:
    def __init__(self, no_header: bool = False) -> None:
        self.no_header = no_header
        self._buffer = StringIO()
        self._writer = csv.writer(self._buffer, lineterminator="")

    def _line(self, values: Sequence[Any]) -> str:
        self._buffer.seek(0)
        self._buffer.truncate()
        self._writer.writerow(["" if v is None else v for v in values])
        return self._buffer.getvalue()

    def format(self, result: QueryResult) -> Iterator[str]:
        if not self.no_header:
            yield self._line([c.name for c in result.columns])
        for row in result.rows:
            yield self._line(row)


registry.register("csv", CSVFormatter)
