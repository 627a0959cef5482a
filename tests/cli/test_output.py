"""Tests for output format selection."""

import pytest

from reverse_sql.cli import output
from reverse_sql.formatters.csv import CSVFormatter
from reverse_sql.formatters.json import JSONFormatter
from reverse_sql.formatters.table import TableFormatter
from tests.formatters._results import make_summary


@pytest.mark.unit
class TestResolveFormat:
    def test_explicit_flag_wins(self, monkeypatch):
        monkeypatch.setattr(output, "detect_tty", lambda: True)
        assert output.resolve_format("json") == "json"

    def test_terminal_defaults_to_table(self, monkeypatch):
        monkeypatch.setattr(output, "detect_tty", lambda: True)
        assert output.resolve_format(None) == "table"

    def test_pipe_defaults_to_csv(self, monkeypatch):
        monkeypatch.setattr(output, "detect_tty", lambda: False)
        assert output.resolve_format(None) == "csv"


@pytest.mark.unit
class TestGetFormatter:
    def test_table_width(self):
        formatter = output.get_formatter("table", width=12)
        assert isinstance(formatter, TableFormatter)
        assert formatter.width == 12

    def test_json_compact(self):
        formatter = output.get_formatter("json", compact=True)
        assert isinstance(formatter, JSONFormatter)
        assert formatter.compact

    def test_csv_no_header(self):
        formatter = output.get_formatter("csv", no_header=True)
        assert isinstance(formatter, CSVFormatter)
        assert formatter.no_header

    def test_unknown(self):
        with pytest.raises(KeyError, match="Unknown format 'xml'"):
            output.get_formatter("xml")


@pytest.mark.unit
def test_write_output_one_line_per_row(capsys):
    output.write_output(output.get_formatter("csv"), make_summary())
    assert capsys.readouterr().out.splitlines() == [
        "kind,schema,name,members,keys,result_columns",
        "table,dbo,Orders,3,2,",
        "procedure,dbo,GetOrder,2,0,2",
    ]
