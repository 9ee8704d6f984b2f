"""Result normalization.

Raw driver results are classified into one of three shapes before any output
record is emitted:

- :class:`RowSetResult`: rows returned by a ``SELECT``-like statement.
- :class:`StatusResult`: an affected row count from a statement without a row set.
- :class:`ProcedureResult`: rows, output parameters and return value of a procedure call.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from typing_extensions import TypeAlias

from odbcbridge.exceptions import UnclassifiableResultError
from odbcbridge.operations import COMMAND_SUCCESS_MESSAGE, OperationKind
from odbcbridge.typing import OutputRecord
from odbcbridge.utils.type_guards import is_pyodbc_error

__all__ = (
    "ProcedureResult",
    "RawResult",
    "RowSetResult",
    "StatusResult",
    "command_record",
    "error_message",
    "error_record",
    "make_record",
    "normalize_result",
)


@dataclass(frozen=True)
class RowSetResult:
    rows: "list[dict[str, Any]]"

    def __len__(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class StatusResult:
    rowcount: int = -1
    statement: Optional[str] = None

    def to_dict(self) -> "dict[str, Any]":
        return {"count": self.rowcount, "statement": self.statement}


@dataclass(frozen=True)
class ProcedureResult:
    rows: "Optional[list[dict[str, Any]]]" = None
    parameters: "list[Any]" = field(default_factory=list)
    return_value: Any = None


RawResult: TypeAlias = Union[RowSetResult, StatusResult, ProcedureResult]


def make_record(data: "dict[str, Any]", item_index: int) -> OutputRecord:
    return {"json": data, "pairedItem": {"item": item_index}}


def _classify(raw_result: Any) -> RawResult:
    if isinstance(raw_result, (RowSetResult, StatusResult, ProcedureResult)):
        return raw_result
    raise UnclassifiableResultError(raw_result)


def _normalize_query(result: RawResult, item_index: int) -> "list[OutputRecord]":
    if isinstance(result, RowSetResult):
        return [make_record(row, item_index) for row in result.rows]
    if isinstance(result, StatusResult):
        return [make_record({"success": True, "result": result.to_dict()}, item_index)]
    raise UnclassifiableResultError(result)


def _normalize_procedure(result: RawResult, item_index: int) -> "list[OutputRecord]":
    if not isinstance(result, ProcedureResult):
        raise UnclassifiableResultError(result)
    rows = list(result.rows) if isinstance(result.rows, Sequence) else []
    return [
        make_record(
            {
                "success": True,
                "result": rows,
                "rows": rows,
                "outputParameters": result.parameters,
                "returnValue": result.return_value,
            },
            item_index,
        )
    ]


def normalize_result(raw_result: Any, operation: OperationKind, item_index: int) -> "list[OutputRecord]":
    """Turn a classified driver result into output records for one item.

    Queries emit one record per row, or a single status record when there is no
    row set. Procedures always emit exactly one record bundling rows, output
    parameters and return value; rows are never flattened into separate records.

    Args:
        raw_result: The driver result.
        operation: Operation that produced the result.
        item_index: Index of the input item the records derive from.

    Raises:
        UnclassifiableResultError: If the result does not fit the operation's shapes.

    Returns:
        The output records, in row order.
    """
    result = _classify(raw_result)
    if operation is OperationKind.PROCEDURE:
        return _normalize_procedure(result, item_index)
    if operation is OperationKind.QUERY:
        return _normalize_query(result, item_index)
    raise UnclassifiableResultError(raw_result)


def command_record(command: str, item_index: int) -> OutputRecord:
    return make_record({"success": True, "command": command, "message": COMMAND_SUCCESS_MESSAGE}, item_index)


def error_message(error: BaseException) -> str:
    """Top-level message of an error, as reported by the driver.

    pyodbc errors carry ``(sqlstate, message)`` in ``args``; the message is the
    part users can act on.
    """
    if is_pyodbc_error(error):
        return str(error.args[1])
    detail = getattr(error, "detail", None)
    if isinstance(detail, str) and detail:
        return detail
    return str(error) or error.__class__.__name__


def error_record(error: BaseException, item_index: int) -> OutputRecord:
    return make_record({"error": error_message(error)}, item_index)
