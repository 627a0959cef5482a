"""Pluggable type and object name resolution.

The builders ask a TypeNameProvider for every target type name they need;
code generators ask an ObjectNameProvider for identifiers. Both can be
replaced through BuilderOptions.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from reverse_sql.mapper.types import CSharpType, SqlType, to_csharp_type

if TYPE_CHECKING:
    from reverse_sql.model.database import (
        Parameter,
        ResultSetColumn,
        StoredProcedure,
        Table,
    )

_NON_WORD = re.compile(r"[^\w]")

CSHARP_KEYWORDS = frozenset(
    """
    abstract as base bool break byte case catch char checked class const
    continue decimal default delegate do double else enum event explicit
    extern false finally fixed float for foreach goto if implicit in int
    interface internal is lock long namespace new null object operator out
    override params private protected public readonly ref return sbyte
    sealed short sizeof stackalloc static string struct switch this throw
    true try typeof uint ulong unchecked unsafe ushort using virtual void
    volatile while
    """.split()
)


@runtime_checkable
class TypeNameProvider(Protocol):
    def get_column_type_name(
        self, sql_type: str | None, object_name: str | None, column_name: str | None
    ) -> str: ...

    def get_parameter_type_name(
        self,
        sql_type: str | None,
        parameter_name: str,
        object_name: str | None,
        column_name: str | None,
    ) -> str: ...


class CSharpTypeNameProvider:
    """Maps SQL Server types to C# type names; unknown types become object."""

    def _type_name(self, sql_type: str | None) -> str:
        csharp_type = to_csharp_type(SqlType.parse(sql_type))
        if csharp_type is CSharpType.UNKNOWN:
            return CSharpType.OBJECT.value
        return csharp_type.value

    def get_column_type_name(
        self, sql_type: str | None, object_name: str | None, column_name: str | None
    ) -> str:
        return self._type_name(sql_type)

    def get_parameter_type_name(
        self,
        sql_type: str | None,
        parameter_name: str,
        object_name: str | None,
        column_name: str | None,
    ) -> str:
        return self._type_name(sql_type)


def cleanup_name(value: str | None) -> str:
    """Strip everything that is not a word character."""
    if not value:
        return ""
    return _NON_WORD.sub("", value)


def lower_camel_case(value: str) -> str:
    if not value:
        return value
    return value[0].lower() + value[1:]


@runtime_checkable
class ObjectNameProvider(Protocol):
    def get_result_set_class_name(self, procedure: StoredProcedure) -> str: ...

    def get_result_set_mapper_class_name(self, result_set_class_name: str) -> str: ...

    def get_result_set_column_property_name(self, column: ResultSetColumn) -> str: ...

    def get_stored_procedure_method_name(self, procedure: StoredProcedure) -> str: ...

    def get_parameter_name(self, parameter: Parameter) -> str: ...

    def get_table_class_name(self, table: Table) -> str: ...


class DefaultObjectNameProvider:
    """Default identifiers for generated classes, methods and parameters.

    With include_schema, objects outside 'dbo' get their schema as a
    prefix, e.g. 'sales_GetOrders'.
    """

    def __init__(self, include_schema: bool = False) -> None:
        self.include_schema = include_schema

    def _qualified(self, schema: str, name: str) -> str:
        cleaned = cleanup_name(name)
        if self.include_schema and schema and schema != "dbo":
            return f"{cleanup_name(schema)}_{cleaned}"
        return cleaned

    def get_result_set_class_name(self, procedure: StoredProcedure) -> str:
        return f"{self._qualified(procedure.schema, procedure.name)}Result"

    def get_result_set_mapper_class_name(self, result_set_class_name: str) -> str:
        return f"{result_set_class_name}Mapper"

    def get_result_set_column_property_name(self, column: ResultSetColumn) -> str:
        if not column.name:
            return f"Column{column.ordinal}"
        return cleanup_name(column.name)

    def get_stored_procedure_method_name(self, procedure: StoredProcedure) -> str:
        return self._qualified(procedure.schema, procedure.name)

    def get_parameter_name(self, parameter: Parameter) -> str:
        name = parameter.name[1:] if parameter.name.startswith("@") else parameter.name
        name = lower_camel_case(cleanup_name(name))
        if name in CSHARP_KEYWORDS:
            name = f"@{name}"
        return name

    def get_table_class_name(self, table: Table) -> str:
        return self._qualified(table.schema, table.name)
