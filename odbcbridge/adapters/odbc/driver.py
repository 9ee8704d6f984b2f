"""Synchronous pyodbc driver.

The driver owns no connection lifecycle; it runs the three fixed call shapes
against the connection it is handed and returns classified results.
"""

import contextlib
from typing import TYPE_CHECKING, Any, Optional, Union

from odbcbridge.adapters.odbc.core import collect_rows, resolve_rowcount
from odbcbridge.operations import COMMAND_CALL_SQL, build_procedure_call
from odbcbridge.results import ProcedureResult, RowSetResult, StatusResult
from odbcbridge.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from odbcbridge.adapters.odbc._types import OdbcConnection
    from odbcbridge.protocols import CursorProtocol

__all__ = ("OdbcCursor", "OdbcDriver")

logger = get_logger("adapters.odbc")


class OdbcCursor:
    """Context manager for pyodbc cursor management."""

    def __init__(self, connection: "OdbcConnection") -> None:
        self.connection = connection
        self.cursor: Optional[CursorProtocol] = None

    def __enter__(self) -> "CursorProtocol":
        self.cursor = self.connection.cursor()
        return self.cursor

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.cursor is not None:
            with contextlib.suppress(Exception):
                self.cursor.close()


class OdbcDriver:
    """Runs queries, CL commands and stored procedures over one ODBC connection."""

    def __init__(self, connection: "OdbcConnection", driver_features: "Optional[dict[str, Any]]" = None) -> None:
        self.connection = connection
        self.driver_features: dict[str, Any] = dict(driver_features) if driver_features else {}

    def with_cursor(self, connection: "OdbcConnection") -> OdbcCursor:
        return OdbcCursor(connection)

    def _collect(self, cursor: "CursorProtocol") -> "list[dict[str, Any]]":
        return collect_rows(
            cursor.fetchall(),
            cursor.description,
            lowercase_columns=bool(self.driver_features.get("lowercase_columns", False)),
            strip_char_padding=bool(self.driver_features.get("strip_char_padding", False)),
        )

    def execute_query(self, sql: str) -> "Union[RowSetResult, StatusResult]":
        """Execute SQL text as-is, without parameter binding.

        Args:
            sql: The statement.

        Returns:
            The row set when the statement produced one, otherwise the affected row count.
        """
        with self.with_cursor(self.connection) as cursor:
            cursor.execute(sql)
            if cursor.description:
                rows = self._collect(cursor)
                logger.debug("Query returned %d row(s)", len(rows))
                return RowSetResult(rows=rows)
            rowcount = resolve_rowcount(cursor)
            logger.debug("Statement affected %d row(s)", rowcount)
            return StatusResult(rowcount=rowcount, statement=sql)

    def execute_command(self, command: str) -> None:
        """Run a CL command through ``QSYS2.QCMDEXC``."""
        with self.with_cursor(self.connection) as cursor:
            cursor.execute(COMMAND_CALL_SQL, [command])

    def call_procedure(self, schema: "Optional[str]", name: str, parameters: "Sequence[Any]") -> ProcedureResult:
        """Call a stored procedure with positional parameters.

        pyodbc does not write OUTPUT parameters back, so the returned
        ``parameters`` are the bound values and ``return_value`` is ``None``.

        Args:
            schema: Normalized schema, or ``None``.
            name: Procedure name.
            parameters: Coerced positional parameters.

        Returns:
            The procedure result bundle.
        """
        bound = list(parameters)
        sql = build_procedure_call(schema, name, len(bound))
        with self.with_cursor(self.connection) as cursor:
            if bound:
                cursor.execute(sql, bound)
            else:
                cursor.execute(sql)
            rows: Optional[list[dict[str, Any]]] = None
            if cursor.description:
                rows = self._collect(cursor)
            return ProcedureResult(rows=rows, parameters=bound, return_value=None)
