"""Operation kinds and the fixed SQL call shapes they use."""

from enum import Enum
from typing import Optional, Union

from odbcbridge.exceptions import ImproperConfigurationError

__all__ = ("COMMAND_CALL_SQL", "COMMAND_SUCCESS_MESSAGE", "OperationKind", "build_procedure_call")

COMMAND_CALL_SQL = "CALL QSYS2.QCMDEXC(?)"
"""QSYS2.QCMDEXC runs the CL command passed as its only parameter."""
COMMAND_SUCCESS_MESSAGE = "Command executed successfully"


class OperationKind(str, Enum):
    """The operation run for every input item of an invocation."""

    QUERY = "executeQuery"
    COMMAND = "executeCommand"
    PROCEDURE = "callProcedure"

    def __str__(self) -> str:
        return self.value

    @property
    def translates_errors(self) -> bool:
        """Whether driver failures are translated before reaching the host.

        The command path has always surfaced the raw driver error.
        """
        return self is not OperationKind.COMMAND

    @classmethod
    def parse(cls, value: "Union[str, OperationKind]") -> "OperationKind":
        """Resolve an operation by value or member name.

        Raises:
            ImproperConfigurationError: If the operation is unknown.
        """
        if isinstance(value, OperationKind):
            return value
        for member in cls:
            if value in {member.value, member.name, member.name.lower()}:
                return member
        msg = f"Unknown operation {value!r}; expected one of {', '.join(m.value for m in cls)}"
        raise ImproperConfigurationError(msg)


def build_procedure_call(schema: "Optional[str]", name: str, parameter_count: int) -> str:
    """Render the ``CALL`` statement for a stored procedure.

    Args:
        schema: Normalized schema, or ``None`` to rely on the job's library list.
        name: Procedure name.
        parameter_count: Number of positional placeholders.

    Returns:
        The SQL text of the call.
    """
    qualified = f"{schema}.{name}" if schema else name
    placeholders = ", ".join("?" for _ in range(parameter_count))
    return f"CALL {qualified}({placeholders})"
