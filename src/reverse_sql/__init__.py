"""Reverse-engineer SQL Server metadata into an object model."""

from reverse_sql.__about__ import __version__

__all__ = ["__version__"]
