"""Options that control what the database builder discovers."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Flag
from typing import Any

from reverse_sql.mapper.providers import CSharpTypeNameProvider, TypeNameProvider

ObjectFilter = Callable[[str, str], bool]


class ObjectTypes(Flag):
    NONE = 0
    TABLES = 1
    TABLE_TYPES = 2
    STORED_PROCEDURES = 4
    ALL = TABLES | TABLE_TYPES | STORED_PROCEDURES

    @classmethod
    def from_names(cls, names: Iterable[str]) -> ObjectTypes:
        """Combine names such as 'tables' or 'stored_procedures'."""
        result = cls.NONE
        for name in names:
            result |= cls[name.upper()]
        return result


@dataclass
class BuilderOptions:
    """Builder configuration.

    Attributes:
        object_types: Pipelines to run. Default: ObjectTypes.ALL. A disabled
            pipeline yields no objects and issues no catalog queries.
        table_filter: (schema, name) -> bool deciding which tables to keep.
            Default: None, keep every table.
        table_type_filter: Same, for user-defined table types. Default: None.
        stored_procedure_filter: Same, for stored procedures. Excluded
            procedures cost no result-set query. Default: None.
        type_name_provider: Resolves target type names for columns and
            parameters. Default: CSharpTypeNameProvider().
        logger: structlog-style logger (debug/warning/error). Default: None,
            a logger named 'reverse_sql.builder' is bound on first use.
    """

    object_types: ObjectTypes = ObjectTypes.ALL
    table_filter: ObjectFilter | None = None
    table_type_filter: ObjectFilter | None = None
    stored_procedure_filter: ObjectFilter | None = None
    type_name_provider: TypeNameProvider = field(default_factory=CSharpTypeNameProvider)
    logger: Any = None

    @property
    def include_tables(self) -> bool:
        return bool(self.object_types & ObjectTypes.TABLES)

    @property
    def include_table_types(self) -> bool:
        return bool(self.object_types & ObjectTypes.TABLE_TYPES)

    @property
    def include_stored_procedures(self) -> bool:
        return bool(self.object_types & ObjectTypes.STORED_PROCEDURES)


def include_all(schema: str, name: str) -> bool:
    return True


def schema_filter(
    include: Iterable[str] | None = None, exclude: Iterable[str] | None = None
) -> ObjectFilter:
    """Build a filter from schema names (case-insensitive).

    An empty include list keeps every schema not excluded.
    """
    included = {s.lower() for s in include or ()}
    excluded = {s.lower() for s in exclude or ()}

    def predicate(schema: str, name: str) -> bool:
        key = schema.lower()
        if key in excluded:
            return False
        return not included or key in included

    return predicate
