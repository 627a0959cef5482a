"""`reverse-sql config`: inspect the resolved configuration."""

from __future__ import annotations

import typer

from reverse_sql.cli.commands._shared import get_resolved_config
from reverse_sql.core.config import DEFAULT_CONFIG_PATH

config_app = typer.Typer(help="Configuration management commands")


@config_app.callback(invoke_without_command=True)
def config_callback(ctx: typer.Context) -> None:
    if not ctx.invoked_subcommand:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _listed(values: list[str], empty: str) -> str:
    return ", ".join(values) or empty


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Print every resolved setting and where its value came from."""
    resolved = get_resolved_config(ctx)

    sections: dict[str, list[tuple[str, str, str]]] = {
        "Connection Settings (resolved)": [
            ("server", "server", resolved.server),
            ("port", "port", str(resolved.port)),
            ("database", "database", resolved.database),
            ("user", "user", resolved.user or "not set"),
            ("password", "password", "***" if resolved.password else "not set"),
            ("driver", "driver", resolved.driver),
            ("encrypt", "encrypt", "yes" if resolved.encrypt else "no"),
        ],
        "Objects": [
            ("object types", "object_types", _listed(resolved.object_types, "none")),
            ("include schemas", "include_schemas", _listed(resolved.include_schemas, "all")),
            ("exclude schemas", "exclude_schemas", _listed(resolved.exclude_schemas, "none")),
        ],
        "General": [
            ("timeout", "default_timeout", f"{resolved.default_timeout}s"),
            ("format", "default_format", resolved.default_format),
        ],
    }
    for title, settings in sections.items():
        typer.echo(f"{title}:")
        for label, key, value in settings:
            typer.echo(f"  {label}: {value} ({resolved.sources.get(key, 'default')})")
        typer.echo("")

    typer.echo(f"Active Profile: {resolved.active_profile or 'none'}")
    typer.echo(f"Config File: {ctx.obj.get('config_file') or DEFAULT_CONFIG_PATH}")
