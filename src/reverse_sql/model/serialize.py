"""JSON-ready views of the database model."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from reverse_sql.model.database import (
        Column,
        Constraint,
        Database,
        Parameter,
        ResultSet,
        StoredProcedure,
        Table,
    )


def _column(column: Column) -> dict[str, Any]:
    return {
        "name": column.name,
        "sql_type": column.sql_type_name,
        "object_type": column.object_type_name,
        "length": column.length,
        "precision": column.precision,
        "scale": column.scale,
        "is_identity": column.is_identity,
        "is_primary_key": column.is_primary_key,
        "is_foreign_key": column.is_foreign_key,
        "is_nullable": column.is_nullable,
        "is_read_only": column.is_read_only,
        "has_default_value": column.has_default_value,
    }


def _constraint(constraint: Constraint) -> dict[str, Any]:
    result: dict[str, Any] = {
        "type": constraint.constraint_type.value,
        "name": constraint.name,
        "column": constraint.column_name,
    }
    if constraint.primary_key_table_name is not None:
        result["references"] = {
            "schema": constraint.primary_key_table_schema,
            "table": constraint.primary_key_table_name,
            "column": constraint.primary_key_column_name,
        }
    return result


def table_to_dict(table: Table) -> dict[str, Any]:
    return {
        "schema": table.schema,
        "name": table.name,
        "columns": [_column(c) for c in table.columns],
        "constraints": [_constraint(c) for c in table.constraints],
    }


def _parameter(parameter: Parameter) -> dict[str, Any]:
    table_type = parameter.table_type
    return {
        "name": parameter.name,
        "index": parameter.index,
        "direction": parameter.direction.name.lower(),
        "sql_type": parameter.sql_type_name,
        "object_type": parameter.object_type_name,
        "length": parameter.length,
        "precision": parameter.precision,
        "scale": parameter.scale,
        "is_read_only": parameter.is_read_only,
        "is_table_valued": parameter.is_table_valued,
        "table_type": table_type.full_name if table_type is not None else None,
    }


def _result_set(result_set: ResultSet | None) -> dict[str, Any] | None:
    if result_set is None:
        return None
    return {
        "columns": [
            {
                "ordinal": c.ordinal,
                "name": c.name,
                "sql_type": c.sql_type_name,
                "object_type": c.object_type_name,
                "is_nullable": c.is_nullable,
            }
            for c in result_set.columns
        ]
    }


def stored_procedure_to_dict(procedure: StoredProcedure) -> dict[str, Any]:
    return {
        "schema": procedure.schema,
        "name": procedure.name,
        "parameters": [_parameter(p) for p in procedure.parameters],
        "result_set": _result_set(procedure.result_set),
    }


def database_to_dict(database: Database) -> dict[str, Any]:
    """Convert the model to plain dicts and lists.

    Table-type references on parameters become "schema.name" strings.
    """
    return {
        "tables": [table_to_dict(t) for t in database.tables],
        "table_types": [table_to_dict(t) for t in database.table_types],
        "stored_procedures": [
            stored_procedure_to_dict(p) for p in database.stored_procedures
        ],
    }


def to_json(database: Database, *, compact: bool = False) -> str:
    if compact:
        return json.dumps(database_to_dict(database), default=str)
    return json.dumps(database_to_dict(database), indent=2, default=str)
