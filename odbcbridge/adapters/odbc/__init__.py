"""pyodbc adapter for odbcbridge."""

from odbcbridge.adapters.odbc._types import OdbcConnection
from odbcbridge.adapters.odbc.config import OdbcConfig, OdbcConnectionParams, OdbcDriverFeatures
from odbcbridge.adapters.odbc.core import DriverDiagnostic, create_mapped_exception, extract_diagnostics
from odbcbridge.adapters.odbc.driver import OdbcCursor, OdbcDriver

__all__ = (
    "DriverDiagnostic",
    "OdbcConfig",
    "OdbcConnection",
    "OdbcConnectionParams",
    "OdbcCursor",
    "OdbcDriver",
    "OdbcDriverFeatures",
    "create_mapped_exception",
    "extract_diagnostics",
)
