"""Reverse-engineering operations behind the CLI commands.

Framework-agnostic: cli/commands/inspect.py provides the typer interface.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from reverse_sql.builder.database import build_database
from reverse_sql.builder.options import BuilderOptions, ObjectTypes, schema_filter
from reverse_sql.core.client import CatalogClient
from reverse_sql.core.models import ColumnMeta, QueryResult

if TYPE_CHECKING:
    from reverse_sql.core.config import ResolvedConfig
    from reverse_sql.model.database import Database

SUMMARY_COLUMNS = [
    ColumnMeta(name="kind", type_name="str"),
    ColumnMeta(name="schema", type_name="str"),
    ColumnMeta(name="name", type_name="str"),
    ColumnMeta(name="members", type_name="int"),
    ColumnMeta(name="keys", type_name="int"),
    ColumnMeta(name="result_columns", type_name="int"),
]


def options_from_config(config: ResolvedConfig) -> BuilderOptions:
    """Builder options for the schemas and object types in a resolved config."""
    object_filter = None
    if config.include_schemas or config.exclude_schemas:
        object_filter = schema_filter(config.include_schemas, config.exclude_schemas)
    return BuilderOptions(
        object_types=ObjectTypes.from_names(config.object_types),
        table_filter=object_filter,
        table_type_filter=object_filter,
        stored_procedure_filter=object_filter,
    )


async def reverse_engineer(
    config: ResolvedConfig, options: BuilderOptions | None = None
) -> Database:
    """Connect with the resolved settings and build the database model."""
    async with CatalogClient(config) as client:
        return await build_database(client, options or options_from_config(config))


def summarize(database: Database) -> QueryResult:
    """One row per object: kind, schema, name, member/key/result column counts.

    Members are columns for tables and table types, parameters for
    stored procedures. result_columns is None for objects without one.
    """
    rows: list[tuple[Any, ...]] = []
    for table in database.tables:
        keys = sum(1 for c in table.columns if c.is_primary_key or c.is_foreign_key)
        rows.append(("table", table.schema, table.name, len(table.columns), keys, None))
    for table_type in database.table_types:
        rows.append(
            ("table type", table_type.schema, table_type.name, len(table_type.columns), 0, None)
        )
    for procedure in database.stored_procedures:
        result_columns = (
            len(procedure.result_set.columns) if procedure.result_set is not None else None
        )
        rows.append(
            (
                "procedure",
                procedure.schema,
                procedure.name,
                len(procedure.parameters),
                0,
                result_columns,
            )
        )
    return QueryResult(columns=list(SUMMARY_COLUMNS), rows=rows, row_count=len(rows))
