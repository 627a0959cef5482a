"""Tests for TableFormatter."""

import pytest

from reverse_sql.formatters.table import TableFormatter
from tests.formatters._results import make_summary


@pytest.mark.unit
def test_renders_headers_and_values():
    output = "\n".join(TableFormatter().format(make_summary()))
    for text in ("kind", "result_columns", "Orders", "GetOrder", "procedure"):
        assert text in output


@pytest.mark.unit
def test_missing_values_render_blank():
    output = "\n".join(TableFormatter().format(make_summary()))
    assert "None" not in output


@pytest.mark.unit
def test_empty_result():
    assert list(TableFormatter().format(make_summary(rows=[]))) == ["No objects found"]


@pytest.mark.unit
def test_truncates_long_names():
    long_name = "VeryLongProcedureName" * 4
    result = make_summary(rows=[("procedure", "dbo", long_name, 0, 0, None)])
    output = "\n".join(TableFormatter(width=20).format(result))
    assert long_name not in output
    assert "…" in output
