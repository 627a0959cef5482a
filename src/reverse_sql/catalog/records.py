"""Typed catalog records.

Each model validates one row of a catalog query. Field aliases are the
column names the queries in reverse_sql.catalog.queries select.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from reverse_sql.core.exceptions import ReverseSqlError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

_R = TypeVar("_R", bound=BaseModel)


def _flag(value: Any) -> Any:
    """Catalog flags arrive as bit, int, NULL or 'YES'/'NO'."""
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip().upper() in ("YES", "1", "TRUE")
    return value


class _InformationSchemaRecord(BaseModel):
    model_config = ConfigDict(
        alias_generator=str.upper, populate_by_name=True, extra="ignore"
    )


class ColumnRecord(_InformationSchemaRecord):
    """A column of a table or user-defined table type."""

    table_schema: str
    table_name: str
    column_name: str
    ordinal_position: int
    data_type: str
    character_maximum_length: int | None = None
    numeric_precision: int | None = None
    numeric_scale: int | None = None
    is_nullable: bool = True
    column_default: str | None = None
    is_identity: bool = False
    is_rowguid_col: bool = False
    is_computed: bool = False

    @field_validator(
        "is_nullable", "is_identity", "is_rowguid_col", "is_computed", mode="before"
    )
    @classmethod
    def parse_flag(cls, v: Any) -> Any:
        return _flag(v)


class ConstraintRecord(_InformationSchemaRecord):
    """One column taking part in a table constraint."""

    table_schema: str
    table_name: str
    column_name: str
    constraint_type: str
    constraint_name: str
    pk_table_schema: str | None = None
    pk_table_name: str | None = None
    pk_column_name: str | None = None


class RoutineRecord(_InformationSchemaRecord):
    """A stored procedure or table-valued function."""

    specific_schema: str
    specific_name: str
    routine_type: str


class ParameterRecord(_InformationSchemaRecord):
    """A routine parameter. Lengths, precision and scale are 0 when absent."""

    specific_schema: str
    specific_name: str
    ordinal_position: int
    parameter_mode: str | None = None
    parameter_name: str
    data_type: str
    character_maximum_length: int | None = None
    numeric_precision: int | None = None
    numeric_scale: int | None = None
    user_defined_type_schema: str | None = None
    user_defined_type_name: str | None = None


class ResultColumnRecord(BaseModel):
    """A row of sys.dm_exec_describe_first_result_set."""

    model_config = ConfigDict(extra="ignore")

    column_ordinal: int
    name: str | None = None
    type_name: str | None = None
    source_table: str | None = None
    source_column: str | None = None
    is_nullable: bool = True
    is_hidden: bool = False

    @field_validator("is_hidden", mode="before")
    @classmethod
    def parse_hidden(cls, v: Any) -> Any:
        return _flag(v)

    @field_validator("is_nullable", mode="before")
    @classmethod
    def parse_nullable(cls, v: Any) -> Any:
        # NULL means the catalog could not tell; treat as nullable.
        return True if v is None else _flag(v)


def parse_records(model: type[_R], rows: Iterable[Mapping[str, Any]]) -> list[_R]:
    """Validate raw catalog rows into typed records.

    Raises ReverseSqlError when a row does not match the record contract.
    """
    try:
        return [model.model_validate(dict(row)) for row in rows]
    except ValidationError as e:
        msg = f"Unexpected {model.__name__} in catalog record set: {e}"
        raise ReverseSqlError(msg) from e
