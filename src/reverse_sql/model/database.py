"""In-memory model of a reverse-engineered SQL Server database.

The model is built once per run by reverse_sql.builder and handed to code
generators as a read-only value. Nothing in the package mutates it after
the builder returns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ConstraintType(Enum):
    PRIMARY_KEY = "PRIMARY KEY"
    FOREIGN_KEY = "FOREIGN KEY"


class ParameterDirection(Enum):
    INPUT = "IN"
    OUTPUT = "OUT"
    INPUT_OUTPUT = "INOUT"


@dataclass
class Constraint:
    """A single-column constraint on a table.

    Multi-column keys show up as several constraints sharing a name.
    The primary_key_* fields are only set for foreign keys and point at
    the referenced column.
    """

    constraint_type: ConstraintType
    name: str
    column_name: str
    primary_key_table_schema: str | None = None
    primary_key_table_name: str | None = None
    primary_key_column_name: str | None = None


@dataclass
class Column:
    name: str
    sql_type_name: str
    object_type_name: str
    length: int | None = None
    precision: int | None = None
    scale: int | None = None
    is_identity: bool = False
    is_primary_key: bool = False
    is_foreign_key: bool = False
    is_nullable: bool = False
    is_read_only: bool = False
    has_default_value: bool = False
    # Owning table; the table owns the column, this is only a back reference.
    table: Table | None = field(default=None, repr=False, compare=False)


@dataclass
class Table:
    """A table or a user-defined table type.

    Columns are in catalog ordinal order. Table types never carry
    constraints.
    """

    schema: str
    name: str
    columns: list[Column] = field(default_factory=list)
    constraints: list[Constraint] = field(default_factory=list)

    @property
    def full_name(self) -> str:
        return f"{self.schema}.{self.name}"

    @property
    def primary_key_columns(self) -> list[Column]:
        return [c for c in self.columns if c.is_primary_key]

    @property
    def identity_columns(self) -> list[Column]:
        """Zero or more identity columns; uniqueness is not enforced."""
        return [c for c in self.columns if c.is_identity]

    @property
    def foreign_key_constraints(self) -> list[Constraint]:
        return [
            c for c in self.constraints if c.constraint_type is ConstraintType.FOREIGN_KEY
        ]

    def get_column(self, name: str) -> Column | None:
        return next((c for c in self.columns if c.name == name), None)


@dataclass
class Parameter:
    name: str
    index: int
    direction: ParameterDirection
    sql_type_name: str
    object_type_name: str
    length: int | None = None
    precision: int | None = None
    scale: int | None = None
    is_identity: bool = False
    is_read_only: bool = False
    is_nullable: bool = True
    is_table_valued: bool = False
    table_type: Table | None = field(default=None, repr=False)


@dataclass
class ResultSetColumn:
    ordinal: int
    name: str | None
    sql_type_name: str | None
    object_type_name: str
    is_nullable: bool = True


@dataclass
class ResultSet:
    columns: list[ResultSetColumn] = field(default_factory=list)


@dataclass
class StoredProcedure:
    """A stored procedure with its parameters and first result set.

    result_set is None when the procedure returns no rows (or its shape
    could not be inferred); it is never an empty ResultSet.
    """

    schema: str
    name: str
    parameters: list[Parameter] = field(default_factory=list)
    result_set: ResultSet | None = None

    @property
    def full_name(self) -> str:
        return f"{self.schema}.{self.name}"

    @property
    def table_valued_parameters(self) -> list[Parameter]:
        return [p for p in self.parameters if p.is_table_valued]


@dataclass
class Database:
    tables: list[Table] = field(default_factory=list)
    table_types: list[Table] = field(default_factory=list)
    stored_procedures: list[StoredProcedure] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.tables and not self.stored_procedures

    def find_table(self, schema: str, name: str) -> Table | None:
        return _find(self.tables, schema, name)

    def find_table_type(self, schema: str, name: str) -> Table | None:
        return _find(self.table_types, schema, name)

    def find_stored_procedure(self, schema: str, name: str) -> StoredProcedure | None:
        return next(
            (p for p in self.stored_procedures if p.schema == schema and p.name == name),
            None,
        )


def _find(tables: list[Table], schema: str, name: str) -> Table | None:
    return next((t for t in tables if t.schema == schema and t.name == name), None)
