"""Tests for the table assembler."""

import pytest

from reverse_sql.builder.options import schema_filter
from reverse_sql.builder.tables import TableBuilder, build_constraints, is_read_only_column
from reverse_sql.catalog.records import ColumnRecord, ConstraintRecord, parse_records
from reverse_sql.model.database import ConstraintType
from tests.fakes import column_row, constraint_row


def _columns(*rows):
    return parse_records(ColumnRecord, rows)


def _constraints(*rows):
    return parse_records(ConstraintRecord, rows)


@pytest.fixture
def orders_columns():
    return _columns(
        column_row("dbo", "Orders", "Id", 1, "int", IS_IDENTITY=1),
        column_row(
            "dbo", "Orders", "CustomerId", 2, "int", IS_NULLABLE="YES"
        ),
        column_row(
            "dbo",
            "Orders",
            "Total",
            3,
            "decimal",
            NUMERIC_PRECISION=18,
            NUMERIC_SCALE=2,
            COLUMN_DEFAULT="((0))",
        ),
    )


@pytest.fixture
def orders_constraints():
    return _constraints(
        constraint_row("dbo", "Orders", "Id", "PRIMARY KEY", "PK_Orders"),
        constraint_row(
            "dbo",
            "Orders",
            "CustomerId",
            "FOREIGN KEY",
            "FK_Orders_Customers",
            references=("dbo", "Customers", "Id"),
        ),
    )


@pytest.mark.unit
class TestTableBuilder:
    def test_orders_table(self, orders_columns, orders_constraints):
        tables = TableBuilder().build(orders_columns, orders_constraints)

        assert len(tables) == 1
        table = tables[0]
        assert table.full_name == "dbo.Orders"
        assert [c.name for c in table.columns] == ["Id", "CustomerId", "Total"]

        id_column, customer_column, total_column = table.columns
        assert id_column.is_primary_key
        assert id_column.is_identity
        assert id_column.is_read_only
        assert not id_column.is_nullable
        assert id_column.object_type_name == "int"

        assert customer_column.is_foreign_key
        assert not customer_column.is_primary_key
        assert customer_column.is_nullable

        assert total_column.precision == 18
        assert total_column.scale == 2
        assert total_column.has_default_value
        assert total_column.object_type_name == "decimal"

        fk = table.foreign_key_constraints[0]
        assert fk.name == "FK_Orders_Customers"
        assert (
            fk.primary_key_table_schema,
            fk.primary_key_table_name,
            fk.primary_key_column_name,
        ) == ("dbo", "Customers", "Id")

    def test_back_reference(self, orders_columns, orders_constraints):
        table = TableBuilder().build(orders_columns, orders_constraints)[0]
        assert all(c.table is table for c in table.columns)

    def test_columns_sorted_by_ordinal(self):
        records = _columns(
            column_row("dbo", "T", "C", 3),
            column_row("dbo", "T", "A", 1),
            column_row("dbo", "T", "B", 2),
        )
        table = TableBuilder().build(records, [])[0]
        assert [c.name for c in table.columns] == ["A", "B", "C"]

    def test_equal_ordinals_keep_catalog_order(self):
        records = _columns(
            column_row("dbo", "T", "Second", 1),
            column_row("dbo", "T", "First", 1),
        )
        table = TableBuilder().build(records, [])[0]
        assert [c.name for c in table.columns] == ["Second", "First"]

    def test_tables_in_first_seen_order(self):
        records = _columns(
            column_row("sales", "B", "Id", 1),
            column_row("dbo", "A", "Id", 1),
            column_row("sales", "B", "Name", 2),
        )
        tables = TableBuilder().build(records, [])
        assert [t.full_name for t in tables] == ["sales.B", "dbo.A"]
        assert len(tables[0].columns) == 2

    def test_same_name_different_schema(self):
        records = _columns(column_row("a", "T", "X", 1), column_row("b", "T", "Y", 1))
        tables = TableBuilder().build(records, [])
        assert [t.full_name for t in tables] == ["a.T", "b.T"]

    def test_filter(self):
        records = _columns(column_row("a", "T", "X", 1), column_row("b", "T", "Y", 1))
        tables = TableBuilder(schema_filter(exclude=["a"])).build(records, [])
        assert [t.full_name for t in tables] == ["b.T"]

    def test_unknown_constraints(self, orders_columns):
        table = TableBuilder().build(orders_columns, None)[0]
        assert table.constraints == []
        assert not any(c.is_primary_key or c.is_foreign_key for c in table.columns)

    def test_unknown_type_falls_back_to_object(self):
        records = _columns(column_row("dbo", "T", "Shape", 1, "my_alias_type"))
        column = TableBuilder().build(records, [])[0].columns[0]
        assert column.sql_type_name == "my_alias_type"
        assert column.object_type_name == "object"

    def test_custom_type_name_provider(self):
        class UpperProvider:
            def get_column_type_name(self, sql_type, object_name, column_name):
                return f"{object_name}.{column_name}:{sql_type}".upper()

            def get_parameter_type_name(self, sql_type, parameter_name, object_name, column_name):
                return None

        records = _columns(column_row("dbo", "T", "c", 1, "int"))
        column = TableBuilder(type_name_provider=UpperProvider()).build(records, [])[0].columns[0]
        assert column.object_type_name == "T.C:INT"

    def test_composite_key(self):
        records = _columns(
            column_row("dbo", "OrderLines", "OrderId", 1),
            column_row("dbo", "OrderLines", "LineNo", 2),
        )
        constraints = _constraints(
            constraint_row("dbo", "OrderLines", "OrderId", "PRIMARY KEY", "PK_OrderLines"),
            constraint_row("dbo", "OrderLines", "LineNo", "PRIMARY KEY", "PK_OrderLines"),
        )
        table = TableBuilder().build(records, constraints)[0]
        assert [c.name for c in table.primary_key_columns] == ["OrderId", "LineNo"]
        assert {c.name for c in table.constraints} == {"PK_OrderLines"}


@pytest.mark.unit
class TestBuildConstraints:
    def test_drops_other_kinds(self):
        constraints = build_constraints(
            _constraints(
                constraint_row("dbo", "T", "A", "UNIQUE", "UQ_T"),
                constraint_row("dbo", "T", "B", "CHECK", "CK_T"),
                constraint_row("dbo", "T", "Id", "PRIMARY KEY", "PK_T"),
            )
        )
        assert [c.constraint_type for c in constraints] == [ConstraintType.PRIMARY_KEY]

    def test_primary_key_has_no_reference(self):
        constraint = build_constraints(
            _constraints(
                constraint_row(
                    "dbo", "T", "Id", "PRIMARY KEY", "PK_T", references=("x", "y", "z")
                )
            )
        )[0]
        assert constraint.primary_key_table_name is None

    def test_none(self):
        assert build_constraints(None) == []


@pytest.mark.unit
class TestIsReadOnlyColumn:
    @pytest.mark.parametrize(
        "extra",
        [
            {"IS_IDENTITY": 1},
            {"IS_ROWGUID_COL": 1},
            {"IS_COMPUTED": 1},
            {"DATA_TYPE": "rowversion"},
            {"DATA_TYPE": "timestamp"},
            {"DATA_TYPE": "uniqueidentifier", "COLUMN_DEFAULT": "(NEWSEQUENTIALID())"},
        ],
    )
    def test_generated(self, extra):
        record = _columns(column_row("dbo", "T", "C", 1, **extra))[0]
        assert is_read_only_column(record)

    @pytest.mark.parametrize(
        "extra",
        [
            {},
            {"DATA_TYPE": "uniqueidentifier"},
            {"DATA_TYPE": "uniqueidentifier", "COLUMN_DEFAULT": "(newid())"},
        ],
    )
    def test_writable(self, extra):
        record = _columns(column_row("dbo", "T", "C", 1, **extra))[0]
        assert not is_read_only_column(record)


@pytest.mark.unit
def test_orders_without_constraint_record_set():
    records = _columns(
        column_row("dbo", "Orders", "Id", 1, "int", IS_IDENTITY=1),
        column_row("dbo", "Orders", "CustomerId", 2, "int"),
        column_row("dbo", "Orders", "Total", 3, "money"),
    )

    tables = TableBuilder().build(records, None)

    assert len(tables) == 1
    columns = tables[0].columns
    assert len(columns) == 3
    assert not any(c.is_primary_key or c.is_foreign_key for c in columns)
    assert [c.is_read_only for c in columns] == [True, False, False]
