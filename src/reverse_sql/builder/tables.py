"""Assemble tables and table types from flat column and constraint records."""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

from reverse_sql.builder.options import include_all
from reverse_sql.mapper.providers import CSharpTypeNameProvider
from reverse_sql.model.database import Column, Constraint, ConstraintType, Table

if TYPE_CHECKING:
    from collections.abc import Iterable

    from reverse_sql.builder.options import ObjectFilter
    from reverse_sql.catalog.records import ColumnRecord, ConstraintRecord
    from reverse_sql.mapper.providers import TypeNameProvider

_CONSTRAINT_TYPES: dict[str, ConstraintType] = {
    "PRIMARY KEY": ConstraintType.PRIMARY_KEY,
    "FOREIGN KEY": ConstraintType.FOREIGN_KEY,
}

_ALWAYS_READ_ONLY_TYPES = frozenset({"rowversion", "timestamp"})
_SEQUENTIAL_GUID_MARKER = "newsequentialid"


def is_read_only_column(record: ColumnRecord) -> bool:
    """True if the database generates the column value."""
    data_type = record.data_type.lower()
    if record.is_identity or record.is_rowguid_col or record.is_computed:
        return True
    if data_type in _ALWAYS_READ_ONLY_TYPES:
        return True
    return (
        data_type == "uniqueidentifier"
        and record.column_default is not None
        and _SEQUENTIAL_GUID_MARKER in record.column_default.lower()
    )


def build_constraints(records: Iterable[ConstraintRecord] | None) -> list[Constraint]:
    """Keep primary and foreign keys; other constraint kinds are dropped."""
    constraints: list[Constraint] = []
    for record in records or ():
        constraint_type = _CONSTRAINT_TYPES.get(record.constraint_type.upper())
        if constraint_type is None:
            continue
        constraint = Constraint(
            constraint_type=constraint_type,
            name=record.constraint_name,
            column_name=record.column_name,
        )
        if constraint_type is ConstraintType.FOREIGN_KEY:
            constraint.primary_key_table_schema = record.pk_table_schema
            constraint.primary_key_table_name = record.pk_table_name
            constraint.primary_key_column_name = record.pk_column_name
        constraints.append(constraint)
    return constraints


class TableBuilder:
    """Groups column records into Table entities.

    Used for both tables and table types; table types are built without
    constraint records.
    """

    def __init__(
        self,
        table_filter: ObjectFilter | None = None,
        type_name_provider: TypeNameProvider | None = None,
    ) -> None:
        self.table_filter = table_filter or include_all
        self.type_name_provider = type_name_provider or CSharpTypeNameProvider()

    def build(
        self,
        column_records: Iterable[ColumnRecord],
        constraint_records: Iterable[ConstraintRecord] | None,
    ) -> list[Table]:
        """Build tables in first-seen catalog order.

        constraint_records=None means the constraints are unknown: every
        column gets is_primary_key=is_foreign_key=False.
        """
        columns_by_table: dict[tuple[str, str], list[ColumnRecord]] = defaultdict(list)
        for record in column_records:
            columns_by_table[(record.table_schema, record.table_name)].append(record)

        constraints_by_table: dict[tuple[str, str], list[ConstraintRecord]] | None = None
        if constraint_records is not None:
            constraints_by_table = defaultdict(list)
            for constraint in constraint_records:
                key = (constraint.table_schema, constraint.table_name)
                constraints_by_table[key].append(constraint)

        tables: list[Table] = []
        for (schema, name), records in columns_by_table.items():
            if not self.table_filter(schema, name):
                continue

            table_constraints = (
                constraints_by_table.get((schema, name), [])
                if constraints_by_table is not None
                else None
            )
            table = Table(
                schema=schema,
                name=name,
                constraints=build_constraints(table_constraints),
            )
            # sorted() is stable, so equal ordinals keep catalog order.
            for record in sorted(records, key=lambda r: r.ordinal_position):
                table.columns.append(self._build_column(table, record, table_constraints))
            tables.append(table)
        return tables

    def _build_column(
        self,
        table: Table,
        record: ColumnRecord,
        constraints: list[ConstraintRecord] | None,
    ) -> Column:
        column_types = {
            c.constraint_type.upper()
            for c in constraints or ()
            if c.column_name == record.column_name
        }
        object_type_name = self.type_name_provider.get_column_type_name(
            record.data_type, table.name, record.column_name
        )
        return Column(
            name=record.column_name,
            sql_type_name=record.data_type,
            object_type_name=object_type_name,
            length=record.character_maximum_length,
            precision=record.numeric_precision,
            scale=record.numeric_scale,
            is_identity=record.is_identity,
            is_primary_key="PRIMARY KEY" in column_types,
            is_foreign_key="FOREIGN KEY" in column_types,
            is_nullable=record.is_nullable,
            is_read_only=is_read_only_column(record),
            has_default_value=bool(record.column_default),
            table=table,
        )
