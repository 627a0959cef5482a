"""Reverse-engineering commands: inspect and dump."""

from __future__ import annotations

import asyncio
import sys
from typing import TYPE_CHECKING, Annotated

import typer

from reverse_sql.cli.commands._shared import (
    apply_local_format_options,
    get_resolved_config,
    output_result,
)
from reverse_sql.cli.output import OutputFormat  # noqa: TC001
from reverse_sql.core.exceptions import InputError
from reverse_sql.core.inspect import reverse_engineer, summarize
from reverse_sql.model.serialize import to_json

if TYPE_CHECKING:
    from reverse_sql.model.database import Database

NoTablesOption = Annotated[
    bool, typer.Option("--no-tables", help="Skip tables")
]
NoTableTypesOption = Annotated[
    bool, typer.Option("--no-table-types", help="Skip user-defined table types")
]
NoProceduresOption = Annotated[
    bool, typer.Option("--no-procedures", help="Skip stored procedures")
]
SchemaOption = Annotated[
    list[str] | None,
    typer.Option("--schema", "-s", help="Only include this schema (repeatable)"),
]
ExcludeSchemaOption = Annotated[
    list[str] | None,
    typer.Option("--exclude-schema", help="Exclude this schema (repeatable)"),
]


def _build(
    ctx: typer.Context,
    *,
    no_tables: bool,
    no_table_types: bool,
    no_procedures: bool,
    schema: list[str] | None,
    exclude_schema: list[str] | None,
) -> Database:
    overlap = sorted(set(schema or ()) & set(exclude_schema or ()))
    if overlap:
        msg = f"Schema both included and excluded: {', '.join(overlap)}"
        raise InputError(msg)

    resolved = get_resolved_config(
        ctx, include_schemas=schema or None, exclude_schemas=exclude_schema or None
    )
    skipped: set[str] = set()
    if no_tables:
        skipped.add("tables")
    if no_table_types:
        skipped.add("table_types")
    if no_procedures:
        skipped.add("stored_procedures")
    if skipped:
        resolved = resolved.model_copy(
            update={"object_types": [t for t in resolved.object_types if t not in skipped]}
        )
    if not resolved.object_types:
        raise InputError("Nothing to reverse-engineer: every object type is skipped")
    return asyncio.run(reverse_engineer(resolved))


def inspect_command(
    ctx: typer.Context,
    no_tables: NoTablesOption = False,
    no_table_types: NoTableTypesOption = False,
    no_procedures: NoProceduresOption = False,
    schema: SchemaOption = None,
    exclude_schema: ExcludeSchemaOption = None,
    format: Annotated[
        OutputFormat | None,
        typer.Option("--format", "-f", help="Output format: table|json|csv"),
    ] = None,
) -> None:
    """
    Summarize the tables, table types and stored procedures of a database.

    Prints one row per object with its column or parameter count, key
    column count, and the number of columns in its inferred result set.
    """
    apply_local_format_options(ctx, format=format)
    database = _build(
        ctx,
        no_tables=no_tables,
        no_table_types=no_table_types,
        no_procedures=no_procedures,
        schema=schema,
        exclude_schema=exclude_schema,
    )
    output_result(ctx, summarize(database))


def dump_command(
    ctx: typer.Context,
    no_tables: NoTablesOption = False,
    no_table_types: NoTableTypesOption = False,
    no_procedures: NoProceduresOption = False,
    schema: SchemaOption = None,
    exclude_schema: ExcludeSchemaOption = None,
    compact: Annotated[
        bool,
        typer.Option("--compact", help="Compact JSON output (no indentation)"),
    ] = False,
) -> None:
    """Print the full database model as JSON."""
    database = _build(
        ctx,
        no_tables=no_tables,
        no_table_types=no_table_types,
        no_procedures=no_procedures,
        schema=schema,
        exclude_schema=exclude_schema,
    )
    obj = ctx.ensure_object(dict)
    sys.stdout.write(to_json(database, compact=compact or obj.get("compact", False)) + "\n")
