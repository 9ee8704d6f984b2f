"""Tests for the pyodbc driver call shapes."""

import pytest

from odbcbridge.adapters.odbc.driver import OdbcCursor, OdbcDriver
from odbcbridge.results import ProcedureResult, RowSetResult, StatusResult
from tests.fakes import FakeConnection, FakePyodbcError, FakeResult


def test_execute_query_returns_row_set() -> None:
    connection = FakeConnection([FakeResult(columns=("ID", "NAME"), rows=[(1, "a"), (2, "b")])])
    result = OdbcDriver(connection).execute_query("SELECT ID, NAME FROM T")
    assert result == RowSetResult(rows=[{"ID": 1, "NAME": "a"}, {"ID": 2, "NAME": "b"}])
    assert connection.executed == [("SELECT ID, NAME FROM T", [])]
    assert connection.cursors[0].closed


def test_execute_query_without_row_set_returns_status() -> None:
    connection = FakeConnection([FakeResult(rowcount=2)])
    result = OdbcDriver(connection).execute_query("UPDATE T SET X = 1")
    assert result == StatusResult(rowcount=2, statement="UPDATE T SET X = 1")


def test_execute_query_applies_driver_features() -> None:
    connection = FakeConnection([FakeResult(columns=("NAME",), rows=[("ABC   ",)])])
    driver = OdbcDriver(connection, driver_features={"lowercase_columns": True, "strip_char_padding": True})
    result = driver.execute_query("SELECT NAME FROM T")
    assert isinstance(result, RowSetResult)
    assert result.rows == [{"name": "ABC"}]


def test_execute_command_binds_single_parameter() -> None:
    connection = FakeConnection()
    assert OdbcDriver(connection).execute_command("CRTLIB LIB(TESTLIB)") is None
    assert connection.executed == [("CALL QSYS2.QCMDEXC(?)", ["CRTLIB LIB(TESTLIB)"])]


def test_call_procedure_with_rows() -> None:
    connection = FakeConnection([FakeResult(columns=("X",), rows=[(1,), (2,)])])
    result = OdbcDriver(connection).call_procedure("MYLIB", "MYPROC", ["", 42, None])
    assert connection.executed == [("CALL MYLIB.MYPROC(?, ?, ?)", ["", 42, None])]
    assert result == ProcedureResult(rows=[{"X": 1}, {"X": 2}], parameters=["", 42, None], return_value=None)


def test_call_procedure_without_schema_or_parameters() -> None:
    connection = FakeConnection()
    result = OdbcDriver(connection).call_procedure(None, "MYPROC", [])
    assert connection.executed == [("CALL MYPROC()", [])]
    assert result.rows is None
    assert result.parameters == []


def test_driver_errors_propagate_and_cursor_is_closed() -> None:
    error = FakePyodbcError("42000", "[42000] syntax (-104) (SQLExecDirectW)")
    connection = FakeConnection([error])
    with pytest.raises(FakePyodbcError):
        OdbcDriver(connection).execute_query("SELEC 1")
    assert connection.cursors[0].closed


def test_cursor_close_failure_is_suppressed() -> None:
    class BrokenCursor:
        def close(self) -> None:
            raise RuntimeError("close failed")

    class Connection:
        def cursor(self) -> BrokenCursor:
            return BrokenCursor()

    with OdbcCursor(Connection()) as cursor:  # type: ignore[arg-type]
        assert isinstance(cursor, BrokenCursor)
