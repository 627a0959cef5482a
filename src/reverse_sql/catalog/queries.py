"""Catalog queries used to reverse-engineer a SQL Server database.

Every query is read-only and parameterless. Column aliases are part of the
record contract in reverse_sql.catalog.records.
"""

from __future__ import annotations

# Stored procedures (user procedures only) and table-valued functions.
STORED_PROCEDURES_SQL = """
SELECT  R.SPECIFIC_SCHEMA,
        R.SPECIFIC_NAME,
        R.ROUTINE_TYPE
FROM    INFORMATION_SCHEMA.ROUTINES R
WHERE   R.ROUTINE_TYPE = 'PROCEDURE'
        AND R.SPECIFIC_SCHEMA + R.SPECIFIC_NAME IN (
            SELECT  SCHEMA_NAME(sp.schema_id) + sp.name
            FROM    sys.all_objects AS sp
            WHERE   sp.type = 'P'
                    AND sp.is_ms_shipped = 0
                    AND NOT EXISTS (
                        SELECT  1
                        FROM    sys.extended_properties ep
                        WHERE   ep.major_id = sp.object_id
                                AND ep.minor_id = 0
                                AND ep.class = 1
                                AND ep.name = N'microsoft_database_tools_support'))
UNION ALL
SELECT  R.SPECIFIC_SCHEMA,
        R.SPECIFIC_NAME,
        R.ROUTINE_TYPE
FROM    INFORMATION_SCHEMA.ROUTINES R
WHERE   R.ROUTINE_TYPE = 'FUNCTION'
        AND R.DATA_TYPE = 'TABLE'
"""

PARAMETERS_SQL = """
SELECT  P.SPECIFIC_SCHEMA,
        P.SPECIFIC_NAME,
        P.ORDINAL_POSITION,
        P.PARAMETER_MODE,
        P.PARAMETER_NAME,
        P.DATA_TYPE,
        ISNULL(P.CHARACTER_MAXIMUM_LENGTH, 0) AS CHARACTER_MAXIMUM_LENGTH,
        ISNULL(P.NUMERIC_PRECISION, 0) AS NUMERIC_PRECISION,
        ISNULL(P.NUMERIC_SCALE, 0) AS NUMERIC_SCALE,
        P.USER_DEFINED_TYPE_SCHEMA,
        P.USER_DEFINED_TYPE_NAME
FROM    INFORMATION_SCHEMA.PARAMETERS P
WHERE   P.IS_RESULT = 'NO' OR P.IS_RESULT IS NULL
"""

TABLE_COLUMNS_SQL = """
SELECT  C.TABLE_SCHEMA,
        C.TABLE_NAME,
        C.COLUMN_NAME,
        C.ORDINAL_POSITION,
        C.DATA_TYPE,
        C.CHARACTER_MAXIMUM_LENGTH,
        C.NUMERIC_PRECISION,
        C.NUMERIC_SCALE,
        C.IS_NULLABLE,
        C.COLUMN_DEFAULT,
        CAST(COLUMNPROPERTY(OBJECT_ID(QUOTENAME(C.TABLE_SCHEMA) + '.' + QUOTENAME(C.TABLE_NAME)),
             C.COLUMN_NAME, 'IsIdentity') AS BIT) AS IS_IDENTITY,
        CAST(COLUMNPROPERTY(OBJECT_ID(QUOTENAME(C.TABLE_SCHEMA) + '.' + QUOTENAME(C.TABLE_NAME)),
             C.COLUMN_NAME, 'IsRowGuidCol') AS BIT) AS IS_ROWGUID_COL,
        CAST(COLUMNPROPERTY(OBJECT_ID(QUOTENAME(C.TABLE_SCHEMA) + '.' + QUOTENAME(C.TABLE_NAME)),
             C.COLUMN_NAME, 'IsComputed') AS BIT) AS IS_COMPUTED
FROM    INFORMATION_SCHEMA.COLUMNS C
        JOIN INFORMATION_SCHEMA.TABLES T
            ON T.TABLE_SCHEMA = C.TABLE_SCHEMA
            AND T.TABLE_NAME = C.TABLE_NAME
WHERE   T.TABLE_TYPE = 'BASE TABLE'
        AND OBJECTPROPERTY(OBJECT_ID(QUOTENAME(T.TABLE_SCHEMA) + '.' + QUOTENAME(T.TABLE_NAME)),
                           'IsMSShipped') = 0
"""

TABLE_TYPE_COLUMNS_SQL = """
SELECT  SCHEMA_NAME(TT.schema_id) AS TABLE_SCHEMA,
        TT.name AS TABLE_NAME,
        C.name AS COLUMN_NAME,
        C.column_id AS ORDINAL_POSITION,
        TYPE_NAME(C.user_type_id) AS DATA_TYPE,
        COLUMNPROPERTY(C.object_id, C.name, 'charmaxlen') AS CHARACTER_MAXIMUM_LENGTH,
        CASE WHEN C.precision = 0 THEN NULL ELSE C.precision END AS NUMERIC_PRECISION,
        CASE WHEN C.precision = 0 THEN NULL ELSE C.scale END AS NUMERIC_SCALE,
        CASE C.is_nullable WHEN 1 THEN 'YES' ELSE 'NO' END AS IS_NULLABLE,
        OBJECT_DEFINITION(C.default_object_id) AS COLUMN_DEFAULT,
        C.is_identity AS IS_IDENTITY,
        C.is_rowguidcol AS IS_ROWGUID_COL,
        C.is_computed AS IS_COMPUTED
FROM    sys.table_types TT
        JOIN sys.columns C ON C.object_id = TT.type_table_object_id
WHERE   TT.is_user_defined = 1
"""

COLUMN_CONSTRAINTS_SQL = """
SELECT  TC.TABLE_SCHEMA,
        TC.TABLE_NAME,
        KCU.COLUMN_NAME,
        TC.CONSTRAINT_TYPE,
        TC.CONSTRAINT_NAME,
        PK.TABLE_SCHEMA AS PK_TABLE_SCHEMA,
        PK.TABLE_NAME AS PK_TABLE_NAME,
        PKC.COLUMN_NAME AS PK_COLUMN_NAME
FROM    INFORMATION_SCHEMA.TABLE_CONSTRAINTS TC
        JOIN INFORMATION_SCHEMA.KEY_COLUMN_USAGE KCU
            ON KCU.CONSTRAINT_SCHEMA = TC.CONSTRAINT_SCHEMA
            AND KCU.CONSTRAINT_NAME = TC.CONSTRAINT_NAME
        LEFT JOIN INFORMATION_SCHEMA.REFERENTIAL_CONSTRAINTS RC
            ON RC.CONSTRAINT_SCHEMA = TC.CONSTRAINT_SCHEMA
            AND RC.CONSTRAINT_NAME = TC.CONSTRAINT_NAME
        LEFT JOIN INFORMATION_SCHEMA.TABLE_CONSTRAINTS PK
            ON PK.CONSTRAINT_SCHEMA = RC.UNIQUE_CONSTRAINT_SCHEMA
            AND PK.CONSTRAINT_NAME = RC.UNIQUE_CONSTRAINT_NAME
        LEFT JOIN INFORMATION_SCHEMA.KEY_COLUMN_USAGE PKC
            ON PKC.CONSTRAINT_SCHEMA = PK.CONSTRAINT_SCHEMA
            AND PKC.CONSTRAINT_NAME = PK.CONSTRAINT_NAME
            AND PKC.ORDINAL_POSITION = KCU.ORDINAL_POSITION
"""


def quote_name(identifier: str) -> str:
    """Bracket-quote an identifier the way QUOTENAME() does."""
    return "[" + identifier.replace("]", "]]") + "]"


def result_set_sql(schema: str, name: str) -> str:
    """Describe the first result set of a stored procedure without running it."""
    statement = f"EXEC {quote_name(schema)}.{quote_name(name)}".replace("'", "''")
    return (
        "SELECT column_ordinal, name, TYPE_NAME(system_type_id) AS type_name, "
        "source_table, source_column, is_nullable, is_hidden "
        f"FROM sys.dm_exec_describe_first_result_set(N'{statement}', NULL, 1)"
    )
