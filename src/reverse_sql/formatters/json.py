"""JSON output for object summaries: one array of row objects."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from reverse_sql.formatters.base import registry

if TYPE_CHECKING:
    from collections.abc import Iterator

    from reverse_sql.core.models import QueryResult


class JSONFormatter:
    def __init__(self, compact: bool = False) -> None:
        self.compact = compact

    def format(self, result: QueryResult) -> Iterator[str]:
        yield json.dumps(result.records(), indent=None if self.compact else 2, default=str)


registry.register("json", JSONFormatter)
