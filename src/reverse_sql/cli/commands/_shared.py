"""Helpers shared by the command modules."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from reverse_sql.cli.output import get_formatter, write_output
from reverse_sql.core.config import load_config, resolve_config

if TYPE_CHECKING:
    import typer

    from reverse_sql.cli.output import OutputFormat
    from reverse_sql.core.config import ResolvedConfig
    from reverse_sql.core.models import QueryResult

_CONNECTION_FLAGS = ("server", "port", "database", "user", "password")


def get_resolved_config(ctx: typer.Context, **overrides: Any) -> ResolvedConfig:
    """Resolve config from the global flags plus command-level overrides.

    None values mean "flag not given" and are left to lower layers.
    """
    obj = ctx.ensure_object(dict)
    flags = {key: obj.get(key) for key in _CONNECTION_FLAGS}
    flags.update(overrides)
    return resolve_config(
        load_config(obj.get("config_file")),
        profile_name=obj.get("profile"),
        dsn=obj.get("dsn"),
        **{key: value for key, value in flags.items() if value is not None},
    )


def output_result(ctx: typer.Context, result: QueryResult) -> None:
    obj = ctx.ensure_object(dict)
    formatter = get_formatter(
        obj.get("format"),
        compact=obj.get("compact", False),
        width=obj.get("width", 40),
        no_header=obj.get("no_header", False),
    )
    write_output(formatter, result)


def apply_local_format_options(
    ctx: typer.Context, *, format: OutputFormat | None = None
) -> None:
    """Let a command-level --format override the global one."""
    if format is not None:
        ctx.ensure_object(dict)["format"] = format.value
