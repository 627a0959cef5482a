"""Formatter protocol and the registry the CLI picks output formats from."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator

    from reverse_sql.core.models import QueryResult


@runtime_checkable
class Formatter(Protocol):
    """Renders an object summary as lines of text, without newlines."""

    def format(self, result: QueryResult) -> Iterator[str]: ...


class FormatterRegistry:
    def __init__(self) -> None:
        self._factories: dict[str, type[Formatter]] = {}

    def register(self, name: str, factory: type[Formatter]) -> None:
        self._factories[name] = factory

    def get(self, name: str, **options: object) -> Formatter:
        """Instantiate the formatter registered as name.

        Raises KeyError naming the registered formats when name is unknown.
        """
        factory = self._factories.get(name)
        if factory is None:
            msg = f"Unknown format {name!r}. Available: {', '.join(self.available)}"
            raise KeyError(msg)
        return factory(**options)

    @property
    def available(self) -> list[str]:
        return sorted(self._factories)


registry = FormatterRegistry()
