"""Project tables onto result sets for generated select mappers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from reverse_sql.mapper.providers import CSharpTypeNameProvider
from reverse_sql.model.database import ResultSet, ResultSetColumn

if TYPE_CHECKING:
    from reverse_sql.mapper.providers import TypeNameProvider
    from reverse_sql.model.database import Table


def table_result_set(
    table: Table, type_name_provider: TypeNameProvider | None = None
) -> ResultSet:
    """The result set of 'SELECT *' on a table: one column per table column."""
    provider = type_name_provider or CSharpTypeNameProvider()
    return ResultSet(
        columns=[
            ResultSetColumn(
                ordinal=index,
                name=column.name,
                sql_type_name=column.sql_type_name,
                object_type_name=provider.get_column_type_name(
                    column.sql_type_name, table.name, column.name
                ),
                is_nullable=column.is_nullable,
            )
            for index, column in enumerate(table.columns)
        ]
    )
