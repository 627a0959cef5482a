"""Build a Database model from a live catalog.

The three pipelines (tables, table types, stored procedures) run as
concurrent asyncio tasks over one shared CatalogSource. The only ordering
rule: the stored procedure pipeline awaits the finished table types
before it resolves table-valued parameters.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, TypeVar

import sentry_sdk

from reverse_sql.builder.options import BuilderOptions
from reverse_sql.builder.procedures import StoredProcedureBuilder
from reverse_sql.builder.tables import TableBuilder
from reverse_sql.catalog import queries
from reverse_sql.catalog.records import (
    ColumnRecord,
    ConstraintRecord,
    ParameterRecord,
    ResultColumnRecord,
    RoutineRecord,
    parse_records,
)
from reverse_sql.core.exceptions import ReverseSqlError
from reverse_sql.core.logging import get_logger
from reverse_sql.model.database import Database, StoredProcedure, Table

if TYPE_CHECKING:
    from pydantic import BaseModel

    from reverse_sql.core.client import CatalogSource

_R = TypeVar("_R", bound="BaseModel")


class DatabaseBuilder:
    """Reverse-engineers tables, table types and stored procedures.

    Example:
        async with CatalogClient(config) as client:
            database = await DatabaseBuilder(client, options).build()
    """

    def __init__(self, source: CatalogSource, options: BuilderOptions | None = None) -> None:
        self.source = source
        self.options = options or BuilderOptions()
        self.log: Any = self.options.logger or get_logger("reverse_sql.builder")

    async def build(self) -> Database:
        """Connect and build the model.

        Raises NetworkError when no connection can be made. Every other
        catalog problem is logged and leaves a partial model.
        """
        with sentry_sdk.start_span(op="reverse_sql.build", description="build database"):
            await self.source.connect()
            self.log.debug("connected to database")
            return await self._build_model()

    async def _build_model(self) -> Database:
        table_types_task = asyncio.ensure_future(self.build_table_types())
        tables, table_types, stored_procedures = await asyncio.gather(
            self.build_tables(),
            table_types_task,
            self.build_stored_procedures(table_types_task),
        )
        if not tables and not stored_procedures:
            self.log.warning(
                "could not find any tables or stored procedures; make sure the "
                "connection has the appropriate permissions"
            )
        self.log.debug(
            "database model built",
            tables=len(tables),
            table_types=len(table_types),
            stored_procedures=len(stored_procedures),
        )
        return Database(
            tables=tables,
            table_types=table_types,
            stored_procedures=stored_procedures,
        )

    async def _fetch(self, sql: str, record_type: type[_R]) -> list[_R] | None:
        """Run one catalog query; None when it fails or returns nothing."""
        try:
            result = await self.source.fetch(sql)
            if not result.columns:
                return None
            return parse_records(record_type, result.records())
        except ReverseSqlError as e:
            self.log.warning(
                "catalog query failed", record_type=record_type.__name__, error=e.message
            )
            return None

    async def build_tables(self) -> list[Table]:
        if not self.options.include_tables:
            return []

        column_records, constraint_records = await asyncio.gather(
            self._fetch(queries.TABLE_COLUMNS_SQL, ColumnRecord),
            self._fetch(queries.COLUMN_CONSTRAINTS_SQL, ConstraintRecord),
        )
        if column_records is None:
            self.log.warning(
                "could not find any tables or columns; if this is unexpected, "
                "check the current user permissions"
            )
        if constraint_records is None:
            self.log.warning(
                "could not find any column constraints; if this is unexpected, "
                "check the current user permissions"
            )
        if column_records is None or constraint_records is None:
            return []

        builder = TableBuilder(self.options.table_filter, self.options.type_name_provider)
        return builder.build(column_records, constraint_records)

    async def build_table_types(self) -> list[Table]:
        if not self.options.include_table_types:
            return []

        column_records = await self._fetch(queries.TABLE_TYPE_COLUMNS_SQL, ColumnRecord)
        if column_records is None:
            return []

        builder = TableBuilder(
            self.options.table_type_filter, self.options.type_name_provider
        )
        # Table types have no constraints.
        return builder.build(column_records, None)

    async def build_stored_procedures(
        self, table_types_task: asyncio.Future[list[Table]]
    ) -> list[StoredProcedure]:
        if not self.options.include_stored_procedures:
            return []

        routine_records, parameter_records = await asyncio.gather(
            self._fetch(queries.STORED_PROCEDURES_SQL, RoutineRecord),
            self._fetch(queries.PARAMETERS_SQL, ParameterRecord),
        )
        table_types = await table_types_task
        if routine_records is None:
            self.log.warning(
                "could not find any stored procedures; if this is unexpected, "
                "check the current user permissions"
            )
            return []

        builder = StoredProcedureBuilder(
            self.options.stored_procedure_filter,
            self.options.type_name_provider,
            self.log,
        )
        procedures = builder.build(routine_records, parameter_records, table_types)
        self.log.debug("discovering result sets", stored_procedures=len(procedures))

        result_records = await asyncio.gather(
            *(
                self._fetch(queries.result_set_sql(p.schema, p.name), ResultColumnRecord)
                for p in procedures
            )
        )
        for procedure, records in zip(procedures, result_records, strict=True):
            procedure.result_set = builder.build_result_set(procedure, records)
        return procedures


async def build_database(
    source: CatalogSource, options: BuilderOptions | None = None
) -> Database:
    """Convenience wrapper around DatabaseBuilder(source, options).build()."""
    return await DatabaseBuilder(source, options).build()
