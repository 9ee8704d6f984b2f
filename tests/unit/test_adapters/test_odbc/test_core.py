"""Tests for ODBC diagnostic extraction and error translation."""

from types import SimpleNamespace

import pytest

from odbcbridge.adapters.odbc.core import (
    DriverDiagnostic,
    build_error_summary,
    collect_rows,
    create_mapped_exception,
    extract_diagnostics,
    format_diagnostics,
    resolve_rowcount,
)
from odbcbridge.exceptions import DatabaseConnectionError, DriverDiagnosticError, OperationError
from odbcbridge.operations import OperationKind
from tests.fakes import FakePyodbcError, StructuredOdbcError

PYODBC_MESSAGE = (
    "[01000] [IBM][System i Access ODBC Driver]Warning text. (0) (SQLExecDirectW); "
    "[42704] [IBM][System i Access ODBC Driver][DB2 for i5/OS]SQL0204 - T in L type *FILE not found. "
    "(-204) (SQLExecDirectW)"
)


def test_structured_diagnostics_from_mappings() -> None:
    error = StructuredOdbcError(
        "[odbc] Error executing the sql statement",
        [{"code": -204, "state": "42704", "message": "T not found"}, {"code": -1, "state": "HY000", "message": "x"}],
    )
    assert extract_diagnostics(error) == [
        DriverDiagnostic(code=-204, state="42704", message="T not found"),
        DriverDiagnostic(code=-1, state="HY000", message="x"),
    ]


def test_structured_diagnostics_from_objects() -> None:
    record = SimpleNamespace(code=-551, state="42501", message="Not authorized")
    error = StructuredOdbcError("failed", [record, object()])
    assert extract_diagnostics(error) == [DriverDiagnostic(code=-551, state="42501", message="Not authorized")]


def test_pyodbc_message_is_parsed_into_diagnostics() -> None:
    diagnostics = extract_diagnostics(FakePyodbcError("42704", PYODBC_MESSAGE))
    assert [(d.code, d.state) for d in diagnostics] == [(0, "01000"), (-204, "42704")]
    assert diagnostics[1].message.endswith("SQL0204 - T in L type *FILE not found.")


def test_errors_without_diagnostics() -> None:
    assert extract_diagnostics(RuntimeError("boom")) == []
    assert extract_diagnostics(StructuredOdbcError("boom", [])) == []


def test_format_diagnostics_joins_with_pipe() -> None:
    diagnostics = [DriverDiagnostic(-204, "42704", "a"), DriverDiagnostic(-1, "HY000", "b")]
    assert format_diagnostics(diagnostics) == "[-204/42704] a | [-1/HY000] b"


def test_summary_with_diagnostics() -> None:
    error = StructuredOdbcError("Top level", [{"code": 7, "state": "S1000", "message": "m1"}])
    assert build_error_summary(error) == "Top level\nDetails: [7/S1000] m1"


def test_summary_without_diagnostics_is_message() -> None:
    assert build_error_summary(RuntimeError("only the message")) == "only the message"


def test_translation_with_diagnostics() -> None:
    error = StructuredOdbcError("Top level", [{"code": 7, "state": "S1000", "message": "m1"}])
    translated = create_mapped_exception(error, OperationKind.QUERY)
    assert isinstance(translated, DriverDiagnosticError)
    assert str(translated) == "Top level\nDetails: [7/S1000] m1"
    assert translated.operation == "executeQuery"
    assert translated.diagnostics == (DriverDiagnostic(7, "S1000", "m1"),)


def test_translation_without_diagnostics() -> None:
    translated = create_mapped_exception(RuntimeError("boom"), OperationKind.PROCEDURE)
    assert type(translated) is OperationError
    assert str(translated) == "boom"


def test_translation_of_connect_failure() -> None:
    translated = create_mapped_exception(FakePyodbcError("08001", PYODBC_MESSAGE), OperationKind.QUERY, connecting=True)
    assert isinstance(translated, DatabaseConnectionError)
    assert len(translated.diagnostics) == 2


def test_translation_keeps_translated_errors() -> None:
    error = OperationError("already translated")
    assert create_mapped_exception(error) is error


def test_collect_rows() -> None:
    description = [("ID",), ("NAME",)]
    rows = collect_rows([(1, "A  "), (2, "B")], description)
    assert rows == [{"ID": 1, "NAME": "A  "}, {"ID": 2, "NAME": "B"}]


def test_collect_rows_with_features() -> None:
    rows = collect_rows(
        [(1, "A  ")], [("ID",), ("NAME",)], lowercase_columns=True, strip_char_padding=True
    )
    assert rows == [{"id": 1, "name": "A"}]


def test_collect_rows_without_description() -> None:
    assert collect_rows([], None) == []


@pytest.mark.parametrize(("cursor", "expected"), [(SimpleNamespace(rowcount=4), 4), (object(), -1)])
def test_resolve_rowcount(cursor: object, expected: int) -> None:
    assert resolve_rowcount(cursor) == expected
