"""Configuration for reverse-sql.

Settings come from a TOML file with named profiles, MSSQL_* environment
variables, a DSN and command-line flags. Precedence, highest first:

1. CLI flags (--server, --port, --schema, ...)
2. --dsn
3. Environment variables (MSSQL_SERVER, MSSQL_PORT, MSSQL_DATABASE, ...)
4. Named profile (--profile, REVERSE_SQL_PROFILE or default_profile)
5. Config file globals
6. Built-in defaults
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any
from urllib.parse import parse_qs, unquote, urlparse

from pydantic import (
    BaseModel,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)

from reverse_sql.core.exceptions import ConfigError

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "reverse-sql" / "config.toml"

DEFAULT_DRIVER = "ODBC Driver 18 for SQL Server"

PROFILE_ENV_VAR = "REVERSE_SQL_PROFILE"

VALID_OBJECT_TYPES = ("tables", "table_types", "stored_procedures")

_ENV_VARS: dict[str, str] = {
    "MSSQL_SERVER": "server",
    "MSSQL_PORT": "port",
    "MSSQL_DATABASE": "database",
    "MSSQL_USER": "user",
    "MSSQL_PASSWORD": "password",  # pragma: allowlist secret
}

# CLI override name -> resolved field.
_CLI_FIELDS: dict[str, str] = {
    "server": "server",
    "port": "port",
    "database": "database",
    "user": "user",
    "password": "password",  # pragma: allowlist secret
    "timeout": "default_timeout",
    "include_schemas": "include_schemas",
    "exclude_schemas": "exclude_schemas",
    "object_types": "object_types",
}

_BOOL_QUERY_PARAMS = ("encrypt", "trust_server_certificate", "trusted_connection")


def _braced(value: str) -> str:
    """Quote an ODBC attribute value; a closing brace inside is doubled."""
    return "{" + value.replace("}", "}}") + "}"


def parse_dsn(dsn: str) -> dict[str, Any]:
    """Split an mssql:// (or sqlserver://) URL into settings.

    Only the parts present in the URL are returned. Query parameters:
    driver, encrypt, trust_server_certificate, trusted_connection,
    connect_timeout, application_name.
    """
    url = urlparse(dsn)
    if url.scheme not in ("mssql", "sqlserver"):
        msg = f"Invalid DSN scheme: '{url.scheme}'. Expected 'mssql' or 'sqlserver'"
        raise ConfigError(msg)

    try:
        port = url.port
    except ValueError:
        msg = f"Invalid port in DSN: '{url.netloc}'"
        raise ConfigError(msg) from None

    settings: dict[str, Any] = {
        "server": url.hostname,
        "port": port,
        "database": url.path.strip("/") or None,
        "user": unquote(url.username) if url.username else None,
        "password": unquote(url.password) if url.password else None,
    }
    params = {key: values[0] for key, values in parse_qs(url.query).items()}
    for key in _BOOL_QUERY_PARAMS:
        if key in params:
            settings[key] = params[key].strip().lower() in ("1", "true", "yes", "on")
    if "connect_timeout" in params:
        try:
            settings["connect_timeout"] = int(params["connect_timeout"])
        except ValueError:
            msg = (
                f"Invalid connect_timeout in DSN: '{params['connect_timeout']}'. "
                "Must be an integer"
            )
            raise ConfigError(msg) from None
    for key in ("driver", "application_name"):
        if key in params:
            settings[key] = params[key]
    return {key: value for key, value in settings.items() if value is not None}


class _ConnectionSettings(BaseModel):
    """Fields a profile can set and a resolved config carries."""

    server: str = "localhost"
    port: int = 1433
    database: str = "master"
    user: str | None = None
    password: str | None = None
    driver: str = DEFAULT_DRIVER
    trusted_connection: bool = False
    encrypt: bool = True
    trust_server_certificate: bool = False
    connect_timeout: int = 10
    application_name: str = "reverse-sql"
    include_schemas: list[str] = []
    exclude_schemas: list[str] = []
    object_types: list[str] = list(VALID_OBJECT_TYPES)

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not (1 <= v <= 65535):
            msg = f"Invalid port: {v}. Must be 1-65535"
            raise ValueError(msg)
        return v

    @field_validator("object_types")
    @classmethod
    def validate_object_types(cls, v: list[str]) -> list[str]:
        unknown = [t for t in v if t not in VALID_OBJECT_TYPES]
        if unknown:
            msg = (
                f"Invalid object types: {', '.join(unknown)}. "
                f"Must be any of: {', '.join(sorted(VALID_OBJECT_TYPES))}"
            )
            raise ValueError(msg)
        return v


class MssqlProfile(_ConnectionSettings):
    """A named profile; dsn fills the fields not given explicitly."""

    dsn: str | None = None

    @model_validator(mode="before")
    @classmethod
    def expand_dsn(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("dsn"):
            return {**parse_dsn(data["dsn"]), **data}
        return data

    @computed_field  # type: ignore[prop-decorator]
    @property
    def connection_url(self) -> str:
        credentials = ""
        if self.user:
            credentials = f"{self.user}:{self.password}@" if self.password else f"{self.user}@"
        return f"mssql://{credentials}{self.server}:{self.port}/{self.database}"


class AppConfig(BaseModel):
    default_timeout: float = 30.0
    default_format: str = "table"
    default_profile: str | None = None
    profiles: dict[str, MssqlProfile] = {}


class ResolvedConfig(_ConnectionSettings):
    """Final settings after precedence resolution.

    sources maps each field to where its value came from, e.g. "default",
    "profile: dev", "env: MSSQL_SERVER", "dsn" or "cli: --server".
    """

    default_timeout: float = 30.0
    default_format: str = "table"
    active_profile: str | None = None
    sources: dict[str, str] = {}

    @property
    def odbc_connection_string(self) -> str:
        """The pyodbc connection string for these settings."""
        parts = [
            f"DRIVER={_braced(self.driver)}",
            f"SERVER={self.server},{self.port}",
            f"DATABASE={_braced(self.database)}",
        ]
        if self.trusted_connection:
            parts.append("Trusted_Connection=yes")
        else:
            if self.user:
                parts.append(f"UID={_braced(self.user)}")
            if self.password:
                parts.append(f"PWD={_braced(self.password)}")
        parts.append(f"Encrypt={'yes' if self.encrypt else 'no'}")
        if self.trust_server_certificate:
            parts.append("TrustServerCertificate=yes")
        parts.append(f"APP={self.application_name}")
        return ";".join(parts) + ";"


def load_config(config_path: Path | None = None) -> AppConfig:
    """Read the TOML config file; a missing file yields the defaults.

    Raises ConfigError for malformed TOML or values that fail validation.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    if not path.exists():
        return AppConfig()

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Malformed TOML in {path}: {e}"
        raise ConfigError(msg) from e

    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid configuration in {path}: {e}"
        raise ConfigError(msg) from e


def _profile_layer(config: AppConfig, name: str) -> dict[str, Any]:
    if name not in config.profiles:
        available = ", ".join(sorted(config.profiles)) or "none"
        msg = f"Unknown profile: '{name}'. Available profiles: {available}"
        raise ConfigError(msg)
    profile = config.profiles[name]
    return {
        key: getattr(profile, key)
        for key in profile.model_fields_set
        if key in _ConnectionSettings.model_fields
    }


def _env_layer() -> dict[str, tuple[Any, str]]:
    layer: dict[str, tuple[Any, str]] = {}
    for env_var, key in _ENV_VARS.items():
        value: Any = os.environ.get(env_var)
        if value is None:
            continue
        if key == "port":
            try:
                value = int(value)
            except ValueError:
                msg = f"Invalid {env_var} value: '{value}'. Must be an integer"
                raise ConfigError(msg) from None
        layer[key] = (value, f"env: {env_var}")
    return layer


def resolve_config(
    config: AppConfig,
    profile_name: str | None = None,
    dsn: str | None = None,
    **cli_overrides: Any,
) -> ResolvedConfig:
    """Merge all configuration layers into one ResolvedConfig.

    cli_overrides keys: server, port, database, user, password, timeout,
    include_schemas, exclude_schemas, object_types. None means unset.
    """
    values: dict[str, Any] = ResolvedConfig().model_dump(
        exclude={"active_profile", "sources"}
    )
    sources = dict.fromkeys(values, "default")

    def apply(key: str, value: Any, source: str) -> None:
        values[key] = value
        sources[key] = source

    if config.default_timeout != AppConfig.model_fields["default_timeout"].default:
        apply("default_timeout", config.default_timeout, "config")
    if config.default_format != AppConfig.model_fields["default_format"].default:
        apply("default_format", config.default_format, "config")

    active_profile = (
        profile_name or os.environ.get(PROFILE_ENV_VAR) or config.default_profile
    )
    if active_profile:
        for key, value in _profile_layer(config, active_profile).items():
            apply(key, value, f"profile: {active_profile}")

    for key, (value, source) in _env_layer().items():
        apply(key, value, source)

    if dsn:
        for key, value in parse_dsn(dsn).items():
            apply(key, value, "dsn")

    for flag, key in _CLI_FIELDS.items():
        value = cli_overrides.get(flag)
        if value is not None:
            apply(key, value, f"cli: --{flag.replace('_', '-')}")

    try:
        return ResolvedConfig(**values, active_profile=active_profile, sources=sources)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
