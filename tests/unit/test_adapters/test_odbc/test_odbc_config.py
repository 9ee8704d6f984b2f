"""Tests for the pyodbc configuration and connection lifecycle."""

from typing import Any
from unittest.mock import Mock, patch

import pytest

from odbcbridge.adapters.odbc.config import OdbcConfig
from odbcbridge.adapters.odbc.driver import OdbcDriver
from odbcbridge.exceptions import MissingDependencyError
from tests.fakes import FakeConnection, make_config_type


def test_defaults_to_autocommit() -> None:
    config = OdbcConfig.from_connection_string("DSN=X")
    assert config.connection_string == "DSN=X"
    assert config.connection_config["autocommit"] is True


def test_extra_parameters_are_merged() -> None:
    config = OdbcConfig(connection_config={"connection_string": "DSN=X", "extra": {"ansi": True}})
    assert config.connection_config["ansi"] is True
    assert "extra" not in config.connection_config


def test_create_connection_passes_keyword_arguments() -> None:
    connection = FakeConnection()
    pyodbc = Mock(connect=Mock(return_value=connection))
    callback = Mock()
    config = OdbcConfig(
        connection_config={"connection_string": "DSN=X", "timeout": 5, "readonly": None},
        on_connection_create=callback,
    )
    with patch.dict("sys.modules", {"pyodbc": pyodbc}):
        assert config.create_connection() is connection
    pyodbc.connect.assert_called_once_with("DSN=X", autocommit=True, timeout=5)
    callback.assert_called_once_with(connection)


def test_create_connection_without_pyodbc() -> None:
    config = OdbcConfig.from_connection_string("DSN=X")
    with patch.dict("sys.modules", {"pyodbc": None}), pytest.raises(MissingDependencyError):
        config.create_connection()


def test_provide_session_closes_connection_once() -> None:
    connection = FakeConnection()
    config = make_config_type(connection)(connection_config={"connection_string": "DSN=X"})
    with config.provide_session() as driver:
        assert isinstance(driver, OdbcDriver)
        assert driver.connection is connection
    assert connection.close_calls == 1


def test_provide_connection_closes_on_error() -> None:
    connection = FakeConnection()
    config = make_config_type(connection)(connection_config={"connection_string": "DSN=X"})
    with pytest.raises(ValueError, match="inside"), config.provide_connection():
        raise ValueError("inside")
    assert connection.close_calls == 1


def test_connection_closed_when_create_hook_fails() -> None:
    connection = FakeConnection()
    pyodbc = Mock(connect=Mock(return_value=connection))
    config = OdbcConfig(
        connection_config={"connection_string": "DSN=X"},
        on_connection_create=Mock(side_effect=RuntimeError("hook failed")),
    )
    with patch.dict("sys.modules", {"pyodbc": pyodbc}), pytest.raises(RuntimeError, match="hook failed"):
        with config.provide_connection():
            pass
    assert connection.close_calls == 1


def test_close_failure_never_replaces_outcome() -> None:
    connection = FakeConnection(close_error=RuntimeError("close failed"))
    config = make_config_type(connection)(connection_config={"connection_string": "DSN=X"})
    with config.provide_connection() as provided:
        assert provided is connection
    assert connection.close_calls == 1

    with pytest.raises(ValueError, match="inside"), config.provide_connection():
        raise ValueError("inside")
    assert connection.close_calls == 2


def test_driver_features_reach_the_driver() -> None:
    features: dict[str, Any] = {"lowercase_columns": True}
    config = make_config_type(FakeConnection())(connection_config={}, driver_features=features)
    with config.provide_session() as driver:
        assert driver.driver_features == features

