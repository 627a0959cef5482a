"""SQL Server catalog client for reverse-sql.

Wraps one shared pyodbc connection behind an asyncio interface so the
model builder can interleave catalog queries. pyodbc calls block, so each
runs in a worker thread; a lock keeps the connection to one statement at
a time.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import pyodbc
import sentry_sdk

from reverse_sql.core.exceptions import NetworkError, ReverseSqlError, TimeoutError
from reverse_sql.core.logging import get_logger
from reverse_sql.core.models import ColumnMeta, QueryResult

if TYPE_CHECKING:
    from reverse_sql.core.config import ResolvedConfig

# SQLSTATE codes pyodbc reports for login and query timeouts.
_TIMEOUT_STATES = frozenset({"HYT00", "HYT01"})


@runtime_checkable
class CatalogSource(Protocol):
    """Anything the model builder can run catalog queries against."""

    async def connect(self) -> None: ...

    async def fetch(self, sql: str) -> QueryResult: ...


def _sqlstate(error: pyodbc.Error) -> str:
    return str(error.args[0]) if error.args else ""


class CatalogClient:
    """Asynchronous SQL Server catalog client using pyodbc."""

    def __init__(self, config: ResolvedConfig) -> None:
        self.config = config
        self._connection: pyodbc.Connection | None = None
        self._lock = asyncio.Lock()

    async def __aenter__(self) -> CatalogClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        self.close()

    @property
    def connected(self) -> bool:
        return self._connection is not None

    def _open(self) -> pyodbc.Connection:
        try:
            connection = pyodbc.connect(
                self.config.odbc_connection_string,
                timeout=self.config.connect_timeout,
                autocommit=True,
            )
        except pyodbc.Error as e:
            msg = (
                f"Connection failed to {self.config.server}:{self.config.port} "
                f"database '{self.config.database}': {e}"
            )
            if _sqlstate(e) in _TIMEOUT_STATES:
                raise TimeoutError(msg) from e
            raise NetworkError(msg) from e
        connection.timeout = int(self.config.default_timeout)
        return connection

    async def connect(self) -> None:
        """Open the shared connection unless it is already open."""
        log = get_logger("reverse_sql.client")
        async with self._lock:
            if self._connection is not None:
                return
            self._connection = await asyncio.to_thread(self._open)
        log.debug(
            "connected to database",
            server=self.config.server,
            database=self.config.database,
        )

    def _execute(self, connection: pyodbc.Connection, sql: str) -> QueryResult:
        cursor = connection.cursor()
        try:
            cursor.execute(sql)
            columns: list[ColumnMeta] = []
            rows: list[tuple[Any, ...]] = []
            if cursor.description:
                for desc in cursor.description:
                    type_code = desc[1]
                    columns.append(
                        ColumnMeta(
                            name=desc[0],
                            type_name=getattr(type_code, "__name__", "unknown"),
                        )
                    )
                rows = [tuple(row) for row in cursor.fetchall()]
            return QueryResult(columns=columns, rows=rows, row_count=len(rows))
        finally:
            cursor.close()

    async def fetch(self, sql: str) -> QueryResult:
        """Execute a read-only catalog query and return a QueryResult."""
        log = get_logger("reverse_sql.client")
        await self.connect()
        connection = self._connection
        assert connection is not None

        sql_normalized = " ".join(sql.split())
        log.debug("executing query", sql=sql_normalized)
        with sentry_sdk.start_span(
            op="db.query", description=sql_normalized[:100]
        ) as span:
            start_time = time.monotonic()
            try:
                async with self._lock:
                    result = await asyncio.to_thread(self._execute, connection, sql)
            except pyodbc.OperationalError as e:
                duration_ms = (time.monotonic() - start_time) * 1000
                span.set_data("duration_ms", duration_ms)
                if _sqlstate(e) in _TIMEOUT_STATES:
                    span.set_status("deadline_exceeded")
                    log.error(
                        "query timeout",
                        sql=sql_normalized,
                        duration_ms=f"{duration_ms:.1f}",
                    )
                    msg = f"Query timed out after {self.config.default_timeout}s: {e}"
                    raise TimeoutError(msg) from e
                span.set_status("unavailable")
                log.error("database error", sql=sql_normalized, error=str(e))
                raise NetworkError(f"Database error: {e}") from e
            except pyodbc.Error as e:
                span.set_status("invalid_argument")
                log.error("query error", sql=sql_normalized, error=str(e))
                raise ReverseSqlError(f"SQL error: {e}") from e

            duration_ms = (time.monotonic() - start_time) * 1000
            span.set_data("row_count", result.row_count)
            span.set_data("duration_ms", duration_ms)
            log.debug(
                "query complete",
                duration_ms=f"{duration_ms:.1f}",
                row_count=result.row_count,
            )
            return result

    def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
