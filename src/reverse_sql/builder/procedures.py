"""Assemble stored procedures from routine, parameter and result-set records."""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING, Any

from reverse_sql.builder.options import include_all
from reverse_sql.core.logging import get_logger
from reverse_sql.mapper.providers import CSharpTypeNameProvider
from reverse_sql.model.database import (
    Parameter,
    ParameterDirection,
    ResultSet,
    ResultSetColumn,
    StoredProcedure,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from reverse_sql.builder.options import ObjectFilter
    from reverse_sql.catalog.records import (
        ParameterRecord,
        ResultColumnRecord,
        RoutineRecord,
    )
    from reverse_sql.mapper.providers import TypeNameProvider
    from reverse_sql.model.database import Table

PROCEDURE_ROUTINE_TYPE = "PROCEDURE"
TABLE_TYPE_MARKER = "table type"

_DIRECTIONS: dict[str, ParameterDirection] = {
    "IN": ParameterDirection.INPUT,
    "OUT": ParameterDirection.OUTPUT,
    "INOUT": ParameterDirection.INPUT_OUTPUT,
}


def resolve_table_type(
    table_types: Sequence[Table], schema: str | None, name: str | None
) -> Table | None:
    """Find the table type a table-valued parameter refers to, if built."""
    return next(
        (t for t in table_types if t.schema == schema and t.name == name), None
    )


class StoredProcedureBuilder:
    """Builds StoredProcedure entities.

    Parameters are mapped in build(); result sets are attached afterwards
    with build_result_set(), once per procedure.
    """

    def __init__(
        self,
        stored_procedure_filter: ObjectFilter | None = None,
        type_name_provider: TypeNameProvider | None = None,
        logger: Any = None,
    ) -> None:
        self.stored_procedure_filter = stored_procedure_filter or include_all
        self.type_name_provider = type_name_provider or CSharpTypeNameProvider()
        self.log = logger or get_logger("reverse_sql.builder")

    def build(
        self,
        routine_records: Iterable[RoutineRecord],
        parameter_records: Iterable[ParameterRecord] | None,
        table_types: Sequence[Table],
    ) -> list[StoredProcedure]:
        parameters_by_routine: dict[tuple[str, str], list[ParameterRecord]] = (
            defaultdict(list)
        )
        for record in parameter_records or ():
            key = (record.specific_schema, record.specific_name)
            parameters_by_routine[key].append(record)

        procedures: list[StoredProcedure] = []
        for routine in routine_records:
            # Table-valued functions are discovered but not assembled.
            if routine.routine_type != PROCEDURE_ROUTINE_TYPE:
                continue
            schema, name = routine.specific_schema, routine.specific_name
            if not self.stored_procedure_filter(schema, name):
                continue

            records = sorted(
                parameters_by_routine.get((schema, name), []),
                key=lambda r: r.ordinal_position,
            )
            procedures.append(
                StoredProcedure(
                    schema=schema,
                    name=name,
                    parameters=[
                        self._build_parameter(name, index, record, table_types)
                        for index, record in enumerate(records)
                    ],
                )
            )
        return procedures

    def _build_parameter(
        self,
        procedure_name: str,
        index: int,
        record: ParameterRecord,
        table_types: Sequence[Table],
    ) -> Parameter:
        is_table_valued = (
            record.data_type == TABLE_TYPE_MARKER and bool(record.user_defined_type_name)
        )
        # The provider sees the "table type" marker, not the user type name.
        object_type_name = self.type_name_provider.get_parameter_type_name(
            record.data_type, record.parameter_name, procedure_name, None
        )
        if is_table_valued:
            sql_type_name = record.user_defined_type_name or record.data_type
            table_type = resolve_table_type(
                table_types,
                record.user_defined_type_schema,
                record.user_defined_type_name,
            )
            if table_type is None:
                self.log.debug(
                    "table type not found for parameter",
                    procedure=procedure_name,
                    parameter=record.parameter_name,
                    table_type=f"{record.user_defined_type_schema}.{sql_type_name}",
                )
        else:
            sql_type_name = record.data_type
            table_type = None

        return Parameter(
            name=record.parameter_name,
            index=index,
            direction=self._parse_direction(record.parameter_mode, record.parameter_name),
            sql_type_name=sql_type_name,
            object_type_name=object_type_name,
            # The catalog reports 0 for "not applicable".
            length=record.character_maximum_length or None,
            precision=record.numeric_precision or None,
            scale=record.numeric_scale or None,
            is_identity=False,
            is_read_only=is_table_valued,
            is_nullable=True,
            is_table_valued=is_table_valued,
            table_type=table_type,
        )

    def _parse_direction(self, mode: str | None, name: str) -> ParameterDirection:
        direction = _DIRECTIONS.get((mode or "").upper())
        if direction is None:
            self.log.warning(
                "unrecognised parameter mode, falling back to input",
                mode=mode,
                parameter=name,
            )
            return ParameterDirection.INPUT
        return direction

    def build_result_set(
        self,
        procedure: StoredProcedure,
        records: Iterable[ResultColumnRecord] | None,
    ) -> ResultSet | None:
        """Turn a first-result-set description into a ResultSet.

        Hidden browsing columns and ordinal 0 rows are dropped, then the
        rest are renumbered from 0 in catalog order. Returns None when no
        usable column remains.
        """
        columns: list[ResultSetColumn] = []
        for record in records or ():
            if record.is_hidden or record.column_ordinal == 0:
                continue
            object_type_name = self.type_name_provider.get_column_type_name(
                record.type_name, procedure.name, record.name
            )
            columns.append(
                ResultSetColumn(
                    ordinal=record.column_ordinal,
                    name=record.name or None,
                    sql_type_name=record.type_name,
                    object_type_name=object_type_name,
                    is_nullable=record.is_nullable,
                )
            )
        if not columns:
            return None
        columns.sort(key=lambda c: c.ordinal)
        for index, column in enumerate(columns):
            column.ordinal = index
        return ResultSet(columns=columns)
