"""odbcbridge: run SQL, CL commands and stored procedures over ODBC for workflow steps."""

from odbcbridge import adapters, exceptions, typing, utils
from odbcbridge.__metadata__ import __version__
from odbcbridge.adapters.odbc import OdbcConfig, OdbcDriver
from odbcbridge.credentials import (
    ConnectionOptions,
    ConnectionStringCredentials,
    Credentials,
    DsnCredentials,
    ManualCredentials,
    build_connection_string,
    parse_credentials,
)
from odbcbridge.exceptions import (
    DatabaseConnectionError,
    DriverDiagnosticError,
    ImproperConfigurationError,
    MissingDependencyError,
    OdbcBridgeError,
    OperationError,
    UnclassifiableResultError,
)
from odbcbridge.executor import OperationExecutor, execute_operation, fold_items
from odbcbridge.host import InputItem, StaticHost
from odbcbridge.operations import OperationKind
from odbcbridge.parameters import ArgumentEntry, ParameterDirection, coerce_procedure_parameters, normalize_schema
from odbcbridge.results import ProcedureResult, RowSetResult, StatusResult, normalize_result
from odbcbridge.typing import OutputRecord

__all__ = (
    "ArgumentEntry",
    "ConnectionOptions",
    "ConnectionStringCredentials",
    "Credentials",
    "DatabaseConnectionError",
    "DriverDiagnosticError",
    "DsnCredentials",
    "ImproperConfigurationError",
    "InputItem",
    "ManualCredentials",
    "MissingDependencyError",
    "OdbcBridgeError",
    "OdbcConfig",
    "OdbcDriver",
    "OperationError",
    "OperationExecutor",
    "OperationKind",
    "OutputRecord",
    "ParameterDirection",
    "ProcedureResult",
    "RowSetResult",
    "StaticHost",
    "StatusResult",
    "UnclassifiableResultError",
    "__version__",
    "adapters",
    "build_connection_string",
    "coerce_procedure_parameters",
    "exceptions",
    "execute_operation",
    "fold_items",
    "normalize_result",
    "normalize_schema",
    "parse_credentials",
    "typing",
    "utils",
)
