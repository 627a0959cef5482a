"""SQL Server to C# type mapping.

SqlType is the closed set of source types the mapper knows; anything else
parses to SqlType.UNKNOWN, which maps to CSharpType.UNKNOWN. The type-name
provider decides what an unknown type falls back to.
"""

from __future__ import annotations

from enum import StrEnum


class SqlType(StrEnum):
    BIGINT = "bigint"
    BINARY = "binary"
    BIT = "bit"
    CHAR = "char"
    DATE = "date"
    DATETIME = "datetime"
    DATETIME2 = "datetime2"
    DATETIMEOFFSET = "datetimeoffset"
    DECIMAL = "decimal"
    FLOAT = "float"
    GEOGRAPHY = "geography"
    GEOMETRY = "geometry"
    HIERARCHYID = "hierarchyid"
    IMAGE = "image"
    INT = "int"
    MONEY = "money"
    NCHAR = "nchar"
    NTEXT = "ntext"
    NUMERIC = "numeric"
    NVARCHAR = "nvarchar"
    REAL = "real"
    ROWVERSION = "rowversion"
    SMALLDATETIME = "smalldatetime"
    SMALLINT = "smallint"
    SMALLMONEY = "smallmoney"
    SQL_VARIANT = "sql_variant"
    STRUCTURED = "structured"
    TABLE_TYPE = "table type"
    TEXT = "text"
    TIME = "time"
    TIMESTAMP = "timestamp"
    TINYINT = "tinyint"
    UNIQUEIDENTIFIER = "uniqueidentifier"
    VARBINARY = "varbinary"
    VARCHAR = "varchar"
    XML = "xml"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, name: str | None) -> SqlType:
        """Case-insensitive lookup; unrecognised or missing names are UNKNOWN."""
        if not name:
            return cls.UNKNOWN
        key = name.strip().lower()
        if key == "varbinary(max)":
            return cls.VARBINARY
        try:
            return cls(key)
        except ValueError:
            return cls.UNKNOWN


class CSharpType(StrEnum):
    BOOL = "bool"
    BYTE = "byte"
    BYTE_ARRAY = "byte[]"
    DATATABLE = "DataTable"
    DATETIME = "DateTime"
    DATETIMEOFFSET = "DateTimeOffset"
    DBGEOGRAPHY = "System.Data.Entity.Spatial.DbGeography"
    DBGEOMETRY = "System.Data.Entity.Spatial.DbGeometry"
    DECIMAL = "decimal"
    DOUBLE = "double"
    FLOAT = "float"
    GUID = "Guid"
    HIERARCHYID = "Microsoft.SqlServer.Types.SqlHierarchyId"
    INT = "int"
    LONG = "long"
    OBJECT = "object"
    SHORT = "short"
    STRING = "string"
    TIMESPAN = "TimeSpan"
    UNKNOWN = "unknown"


_CSHARP_TYPES: dict[SqlType, CSharpType] = {
    SqlType.BIGINT: CSharpType.LONG,
    SqlType.BINARY: CSharpType.BYTE_ARRAY,
    SqlType.BIT: CSharpType.BOOL,
    SqlType.CHAR: CSharpType.STRING,
    SqlType.DATE: CSharpType.DATETIME,
    SqlType.DATETIME: CSharpType.DATETIME,
    SqlType.DATETIME2: CSharpType.DATETIME,
    SqlType.DATETIMEOFFSET: CSharpType.DATETIMEOFFSET,
    SqlType.DECIMAL: CSharpType.DECIMAL,
    SqlType.FLOAT: CSharpType.DOUBLE,
    SqlType.GEOGRAPHY: CSharpType.DBGEOGRAPHY,
    SqlType.GEOMETRY: CSharpType.DBGEOMETRY,
    SqlType.HIERARCHYID: CSharpType.HIERARCHYID,
    SqlType.IMAGE: CSharpType.BYTE_ARRAY,
    SqlType.INT: CSharpType.INT,
    SqlType.MONEY: CSharpType.DECIMAL,
    SqlType.NCHAR: CSharpType.STRING,
    SqlType.NTEXT: CSharpType.STRING,
    SqlType.NUMERIC: CSharpType.DECIMAL,
    SqlType.NVARCHAR: CSharpType.STRING,
    SqlType.REAL: CSharpType.FLOAT,
    SqlType.ROWVERSION: CSharpType.BYTE_ARRAY,
    SqlType.SMALLDATETIME: CSharpType.DATETIME,
    SqlType.SMALLINT: CSharpType.SHORT,
    SqlType.SMALLMONEY: CSharpType.DECIMAL,
    SqlType.SQL_VARIANT: CSharpType.OBJECT,
    SqlType.STRUCTURED: CSharpType.DATATABLE,
    SqlType.TABLE_TYPE: CSharpType.DATATABLE,
    SqlType.TEXT: CSharpType.STRING,
    SqlType.TIME: CSharpType.TIMESPAN,
    SqlType.TIMESTAMP: CSharpType.BYTE_ARRAY,
    SqlType.TINYINT: CSharpType.BYTE,
    SqlType.UNIQUEIDENTIFIER: CSharpType.GUID,
    SqlType.VARBINARY: CSharpType.BYTE_ARRAY,
    SqlType.VARCHAR: CSharpType.STRING,
    SqlType.XML: CSharpType.STRING,
    SqlType.UNKNOWN: CSharpType.UNKNOWN,
}

# System.Data.SqlDbType member names used when binding parameters.
_SQL_DB_TYPES: dict[SqlType, str] = {
    SqlType.BIGINT: "BigInt",
    SqlType.BINARY: "Binary",
    SqlType.BIT: "Bit",
    SqlType.CHAR: "Char",
    SqlType.DATE: "Date",
    SqlType.DATETIME: "DateTime",
    SqlType.DATETIME2: "DateTime2",
    SqlType.DATETIMEOFFSET: "DateTimeOffset",
    SqlType.DECIMAL: "Decimal",
    SqlType.FLOAT: "Float",
    SqlType.HIERARCHYID: "VarChar",
    SqlType.IMAGE: "Image",
    SqlType.INT: "Int",
    SqlType.MONEY: "Money",
    SqlType.NCHAR: "NChar",
    SqlType.NTEXT: "NText",
    SqlType.NUMERIC: "Decimal",
    SqlType.NVARCHAR: "NVarChar",
    SqlType.REAL: "Real",
    SqlType.ROWVERSION: "Timestamp",
    SqlType.SMALLDATETIME: "SmallDateTime",
    SqlType.SMALLINT: "SmallInt",
    SqlType.SMALLMONEY: "SmallMoney",
    SqlType.SQL_VARIANT: "Variant",
    SqlType.STRUCTURED: "Structured",
    SqlType.TABLE_TYPE: "Structured",
    SqlType.TEXT: "Text",
    SqlType.TIME: "Time",
    SqlType.TIMESTAMP: "Timestamp",
    SqlType.TINYINT: "TinyInt",
    SqlType.UNIQUEIDENTIFIER: "UniqueIdentifier",
    SqlType.VARBINARY: "VarBinary",
    SqlType.VARCHAR: "VarChar",
    SqlType.XML: "Xml",
}

# These cannot take a '?' suffix in generated code.
_NON_NULLABLE_TYPES = frozenset(
    {
        "string",
        "System.String",
        "object",
        "System.Object",
        "DataTable",
        "System.Data.DataTable",
        "byte[]",
        CSharpType.DBGEOGRAPHY.value,
        CSharpType.DBGEOMETRY.value,
    }
)


def to_csharp_type(sql_type: SqlType) -> CSharpType:
    return _CSHARP_TYPES[sql_type]


def sql_db_type(sql_type: SqlType) -> str | None:
    """SqlDbType member for a source type, None when there is none."""
    return _SQL_DB_TYPES.get(sql_type)


def can_be_nullable(type_name: str) -> bool:
    """True if a C# type can be declared as Nullable<T>."""
    return type_name not in _NON_NULLABLE_TYPES
