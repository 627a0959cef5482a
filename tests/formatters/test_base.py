"""Tests for the Formatter protocol and registry."""

import pytest

from reverse_sql.formatters.base import Formatter, FormatterRegistry
from tests.formatters._results import make_summary


class _NamesOnly:
    def format(self, result):
        for row in result.rows:
            yield f"{row[1]}.{row[2]}"


class _NoFormatMethod:
    pass


@pytest.mark.unit
def test_protocol_is_structural():
    assert isinstance(_NamesOnly(), Formatter)
    assert not isinstance(_NoFormatMethod(), Formatter)


@pytest.mark.unit
def test_formatter_yields_lines():
    assert list(_NamesOnly().format(make_summary())) == ["dbo.Orders", "dbo.GetOrder"]


@pytest.mark.unit
class TestFormatterRegistry:
    def test_get_passes_kwargs(self):
        class _Sized:
            def __init__(self, width=0):
                self.width = width

            def format(self, result):
                yield ""

        reg = FormatterRegistry()
        reg.register("sized", _Sized)
        assert reg.get("sized", width=12).width == 12

    def test_unknown_format_lists_available(self):
        reg = FormatterRegistry()
        reg.register("names", _NamesOnly)
        with pytest.raises(KeyError, match="Unknown format 'xml'. Available: names"):
            reg.get("xml")

    def test_available_is_sorted(self):
        reg = FormatterRegistry()
        reg.register("table", _NamesOnly)
        reg.register("csv", _NamesOnly)
        assert reg.available == ["csv", "table"]

    def test_global_registry_has_builtin_formats(self):
        from reverse_sql.cli.output import get_formatter

        get_formatter("csv")
        from reverse_sql.formatters.base import registry

        assert registry.available == ["csv", "json", "table"]
