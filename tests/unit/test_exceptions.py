"""Tests for the odbcbridge exception hierarchy."""

import pytest

from odbcbridge.exceptions import (
    DatabaseConnectionError,
    DriverDiagnosticError,
    ImproperConfigurationError,
    MissingDependencyError,
    OdbcBridgeError,
    OperationError,
    UnclassifiableResultError,
)


def test_base_error_basic_initialization() -> None:
    error = OdbcBridgeError("Test message")
    assert str(error) == "Test message"
    assert error.detail == "Test message"


def test_base_error_with_detail() -> None:
    error = OdbcBridgeError("Main message", detail="Detailed info")
    assert error.detail == "Detailed info"
    assert "Detailed info" in str(error)


def test_base_error_repr() -> None:
    assert repr(OdbcBridgeError("Test message")) == "OdbcBridgeError - Test message"
    assert repr(OdbcBridgeError()) == "OdbcBridgeError"


def test_missing_dependency_error() -> None:
    error = MissingDependencyError("pyodbc")
    assert isinstance(error, ImportError)
    assert "pip install odbcbridge[pyodbc]" in str(error)


def test_missing_dependency_error_with_install_package() -> None:
    error = MissingDependencyError("rich-click", install_package="cli")
    assert "odbcbridge[cli]" in str(error)


def test_operation_error_carries_context() -> None:
    error = OperationError("failed", operation="executeQuery")
    assert str(error) == "failed"
    assert error.operation == "executeQuery"
    assert error.diagnostics == ()


@pytest.mark.parametrize("error_class", [DriverDiagnosticError, DatabaseConnectionError])
def test_operation_error_subclasses(error_class: type[OperationError]) -> None:
    error = error_class("failed")
    assert isinstance(error, OperationError)
    assert isinstance(error, OdbcBridgeError)


def test_unclassifiable_result_error_names_type() -> None:
    error = UnclassifiableResultError({"count": 1})
    assert "dict" in str(error)
    assert error.raw_result == {"count": 1}


def test_improper_configuration_error_is_base_error() -> None:
    with pytest.raises(OdbcBridgeError):
        raise ImproperConfigurationError("bad")
