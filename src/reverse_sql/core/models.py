"""Query result models for reverse-sql.

Pydantic models for representing query results and column metadata
returned by CatalogClient.fetch().
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class ColumnMeta(BaseModel):
    """Metadata for a single result column."""

    name: str
    type_name: str


class QueryResult(BaseModel):
    """Result of a SQL query execution."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    columns: list[ColumnMeta]
    rows: list[tuple[Any, ...]]
    row_count: int

    def records(self) -> list[dict[str, Any]]:
        """Return rows as dicts keyed by column name."""
        names = [col.name for col in self.columns]
        return [dict(zip(names, row, strict=True)) for row in self.rows]
