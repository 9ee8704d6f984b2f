"""Runtime-checkable protocols for odbcbridge.

This module provides protocols that can be used for static type checking
and runtime isinstance() checks, replacing defensive hasattr() patterns.
"""

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from odbcbridge.host import InputItem

__all__ = (
    "CursorProtocol",
    "DiagnosticRecordProtocol",
    "ExecutionHost",
    "HasOdbcErrorsProtocol",
    "OdbcConnectionProtocol",
)


@runtime_checkable
class DiagnosticRecordProtocol(Protocol):
    """A single ODBC diagnostic record."""

    code: Any
    state: Any
    message: Any


@runtime_checkable
class HasOdbcErrorsProtocol(Protocol):
    """An error carrying a structured list of ODBC diagnostics."""

    odbc_errors: "Sequence[Any]"


@runtime_checkable
class CursorProtocol(Protocol):
    """The subset of a DB-API cursor the driver relies on."""

    description: Any
    rowcount: int

    def execute(self, sql: str, *parameters: Any) -> Any: ...

    def fetchall(self) -> "list[Any]": ...

    def close(self) -> None: ...


@runtime_checkable
class OdbcConnectionProtocol(Protocol):
    """The subset of a pyodbc connection the driver relies on."""

    def cursor(self) -> CursorProtocol: ...

    def close(self) -> None: ...


@runtime_checkable
class ExecutionHost(Protocol):
    """The workflow host that drives one invocation.

    The host owns item data, parameter resolution, the failure policy and the
    already decrypted credential bundle.
    """

    def get_input_data(self) -> "Sequence[InputItem]":
        """Return the input items in ascending index order."""
        ...

    def get_parameter(self, name: str, item_index: int, default: Optional[Any] = None) -> Any:
        """Resolve a named parameter for one item."""
        ...

    def continue_on_fail(self) -> bool:
        """Whether a failing item is recorded instead of aborting the batch."""
        ...

    def get_credentials(self) -> "Mapping[str, Any]":
        """Return the resolved credential bundle."""
        ...
