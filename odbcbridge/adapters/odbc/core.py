"""ODBC adapter helpers: row collection and driver error translation."""

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

from odbcbridge.exceptions import DatabaseConnectionError, DriverDiagnosticError, OperationError
from odbcbridge.results import error_message
from odbcbridge.utils.type_guards import has_odbc_errors, is_diagnostic_record, is_pyodbc_error, is_row_mapping

if TYPE_CHECKING:
    from odbcbridge.operations import OperationKind

__all__ = (
    "DIAGNOSTIC_SEPARATOR",
    "DriverDiagnostic",
    "build_error_summary",
    "collect_rows",
    "create_mapped_exception",
    "extract_diagnostics",
    "format_diagnostics",
    "resolve_rowcount",
)

DIAGNOSTIC_SEPARATOR = " | "

# pyodbc renders each diagnostic record as "[SQLSTATE] message (native code) (ODBC function)"
# and joins multiple records with "; "
_PYODBC_DIAGNOSTIC = re.compile(
    r"\[(?P<state>[0-9A-Z]{5})\]\s*(?P<message>.*?)\s*\((?P<code>-?\d+)\)(?:\s*\(SQL\w+\))?(?:;\s*|$)",
    re.DOTALL,
)


@dataclass(frozen=True)
class DriverDiagnostic:
    """One ODBC diagnostic record."""

    code: Any
    state: str
    message: str

    def __str__(self) -> str:
        return f"[{self.code}/{self.state}] {self.message}"


def _diagnostic_from(record: Any) -> "Optional[DriverDiagnostic]":
    if isinstance(record, DriverDiagnostic):
        return record
    if is_row_mapping(record):
        return DriverDiagnostic(
            code=record.get("code"), state=str(record.get("state", "")), message=str(record.get("message", ""))
        )
    if is_diagnostic_record(record):
        return DriverDiagnostic(code=record.code, state=str(record.state), message=str(record.message))
    return None


def extract_diagnostics(error: BaseException) -> "list[DriverDiagnostic]":
    """Collect the driver diagnostics attached to an error.

    A structured ``odbc_errors`` list wins. Otherwise the records are parsed out
    of a pyodbc ``(sqlstate, message)`` error.

    Args:
        error: The raw driver error.

    Returns:
        Diagnostics in driver order; empty when none are present.
    """
    if has_odbc_errors(error):
        return [diagnostic for record in error.odbc_errors if (diagnostic := _diagnostic_from(record)) is not None]
    if is_pyodbc_error(error):
        return [
            DriverDiagnostic(code=int(match["code"]), state=match["state"], message=match["message"])
            for match in _PYODBC_DIAGNOSTIC.finditer(error.args[1])
        ]
    return []


def format_diagnostics(diagnostics: "Sequence[DriverDiagnostic]") -> str:
    return DIAGNOSTIC_SEPARATOR.join(str(diagnostic) for diagnostic in diagnostics)


def build_error_summary(error: BaseException, diagnostics: "Optional[Sequence[DriverDiagnostic]]" = None) -> str:
    """Render ``"<message>\\nDetails: <diagnostics>"``, or just the message without diagnostics."""
    message = error_message(error)
    if diagnostics is None:
        diagnostics = extract_diagnostics(error)
    if not diagnostics:
        return message
    return f"{message}\nDetails: {format_diagnostics(diagnostics)}"


def create_mapped_exception(
    error: BaseException, operation: "Optional[OperationKind]" = None, *, connecting: bool = False
) -> OperationError:
    """Translate a driver failure into a single descriptive error.

    This is a factory function that returns an exception instance rather than
    raising, so callers control chaining with ``raise ... from``.

    Args:
        error: The raw driver error.
        operation: Operation that was running.
        connecting: Whether the failure happened while opening the connection.

    Returns:
        The translated error.
    """
    if isinstance(error, OperationError):
        return error
    diagnostics = extract_diagnostics(error)
    summary = build_error_summary(error, diagnostics)
    operation_name = str(operation) if operation is not None else None
    if connecting:
        return DatabaseConnectionError(summary, operation=operation_name, diagnostics=diagnostics)
    if diagnostics:
        return DriverDiagnosticError(summary, operation=operation_name, diagnostics=diagnostics)
    return OperationError(summary, operation=operation_name, diagnostics=diagnostics)


def _normalize_value(value: Any, strip_char_padding: bool) -> Any:
    if strip_char_padding and isinstance(value, str):
        return value.rstrip(" ")
    return value


def collect_rows(
    fetched_data: "Sequence[Any]",
    description: "Optional[Sequence[Any]]",
    *,
    lowercase_columns: bool = False,
    strip_char_padding: bool = False,
) -> "list[dict[str, Any]]":
    """Convert fetched pyodbc rows into dictionaries keyed by column name.

    Args:
        fetched_data: Rows from ``cursor.fetchall()``.
        description: Cursor description.
        lowercase_columns: Lowercase column names (DB2 for i reports them upper case).
        strip_char_padding: Strip the trailing blanks of fixed-width CHAR columns.

    Returns:
        One dictionary per fetched row.
    """
    if not description:
        return []
    column_names = [str(column[0]) for column in description]
    if lowercase_columns:
        column_names = [name.lower() for name in column_names]
    return [
        {name: _normalize_value(value, strip_char_padding) for name, value in zip(column_names, row)}
        for row in fetched_data
    ]


def resolve_rowcount(cursor: Any) -> int:
    """Resolve rowcount from a cursor, ``-1`` when the driver does not report one."""
    try:
        rowcount = cursor.rowcount
    except AttributeError:
        return -1
    return rowcount if isinstance(rowcount, int) else -1
