"""Type guard functions for runtime type checking in odbcbridge.

This module provides type-safe runtime checks that help the type checker
understand type narrowing, replacing defensive hasattr() and duck typing patterns.
"""

import re
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from odbcbridge.protocols import DiagnosticRecordProtocol, HasOdbcErrorsProtocol

if TYPE_CHECKING:
    from typing_extensions import TypeGuard

__all__ = (
    "SQLSTATE_PATTERN",
    "has_odbc_errors",
    "is_diagnostic_record",
    "is_pyodbc_error",
    "is_row_mapping",
)

SQLSTATE_PATTERN = re.compile(r"^[0-9A-Z]{5}$")


def has_odbc_errors(error: Any) -> "TypeGuard[HasOdbcErrorsProtocol]":
    """Check if an error carries a structured list of ODBC diagnostics.

    Args:
        error: Exception to check

    Returns:
        True if ``odbc_errors`` is a non-empty sequence.
    """
    diagnostics = getattr(error, "odbc_errors", None)
    return isinstance(diagnostics, Sequence) and not isinstance(diagnostics, str) and len(diagnostics) > 0


def is_diagnostic_record(obj: Any) -> "TypeGuard[DiagnosticRecordProtocol]":
    """Check if an object exposes ``code``, ``state`` and ``message`` attributes."""
    return isinstance(obj, DiagnosticRecordProtocol)


def is_pyodbc_error(error: Any) -> bool:
    """Check if an exception has the pyodbc ``(sqlstate, message)`` argument layout.

    Args:
        error: Exception to check

    Returns:
        True when ``args`` is a SQLSTATE followed by a message string.
    """
    args = getattr(error, "args", ())
    return (
        len(args) == 2  # noqa: PLR2004
        and isinstance(args[0], str)
        and isinstance(args[1], str)
        and SQLSTATE_PATTERN.match(args[0]) is not None
    )


def is_row_mapping(obj: Any) -> "TypeGuard[Mapping[str, Any]]":
    """Check if an object is a mapping keyed by field name."""
    return isinstance(obj, Mapping)
