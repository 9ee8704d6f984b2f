from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from collections.abc import Sequence

    from odbcbridge.adapters.odbc.core import DriverDiagnostic

__all__ = (
    "DatabaseConnectionError",
    "DriverDiagnosticError",
    "ImproperConfigurationError",
    "MissingDependencyError",
    "OdbcBridgeError",
    "OperationError",
    "UnclassifiableResultError",
)


class OdbcBridgeError(Exception):
    """Base exception class from which all odbcbridge exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``OdbcBridgeError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class MissingDependencyError(OdbcBridgeError, ImportError):
    """Missing optional dependency.

    This exception is raised only when a module depends on a dependency that has not been installed.
    """

    def __init__(self, package: str, install_package: Optional[str] = None) -> None:
        super().__init__(
            f"Package {package!r} is not installed but required. You can install it by running "
            f"'pip install odbcbridge[{install_package or package}]' to install odbcbridge with the required extra "
            f"or 'pip install {install_package or package}' to install the package separately",
        )


class ImproperConfigurationError(OdbcBridgeError):
    """Improper Configuration error.

    Raised when the host hands over an operation or parameter the bridge cannot interpret.
    """


class OperationError(OdbcBridgeError):
    """A driver failure translated into a single descriptive error."""

    operation: Optional[str]
    diagnostics: "tuple[DriverDiagnostic, ...]"

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        diagnostics: "Optional[Sequence[DriverDiagnostic]]" = None,
    ) -> None:
        super().__init__(detail=message)
        self.operation = operation
        self.diagnostics = tuple(diagnostics or ())


class DriverDiagnosticError(OperationError):
    """Raised when the driver failure carried one or more ODBC diagnostic records."""


class DatabaseConnectionError(OperationError):
    """Opening the ODBC connection failed."""


class UnclassifiableResultError(OdbcBridgeError):
    """A raw driver result matched none of the known result shapes."""

    def __init__(self, raw_result: Any) -> None:
        super().__init__(detail=f"Cannot classify driver result of type {type(raw_result).__name__!r}")
        self.raw_result = raw_result
