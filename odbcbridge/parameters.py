"""Stored procedure argument handling.

Procedure drivers are strict about parameter types: binding every argument as
a string breaks numeric procedure signatures, while coercing every argument to
a number breaks intentionally blank string arguments.
"""

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from odbcbridge.exceptions import ImproperConfigurationError

__all__ = (
    "ArgumentEntry",
    "ParameterDirection",
    "coerce_argument",
    "coerce_procedure_parameters",
    "normalize_schema",
    "parse_argument_entries",
)


class ParameterDirection(str, Enum):
    """Direction of a positional procedure argument."""

    INPUT = "INPUT"
    OUTPUT = "OUTPUT"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ArgumentEntry:
    """One positional argument of a stored procedure call."""

    value: Any = ""
    param_type: ParameterDirection = ParameterDirection.INPUT

    @classmethod
    def from_mapping(cls, entry: "Mapping[str, Any]") -> "ArgumentEntry":
        """Build an entry from the host's ``{value, paramType}`` mapping.

        Raises:
            ImproperConfigurationError: If ``paramType`` is neither INPUT nor OUTPUT.
        """
        raw_type = entry.get("paramType", ParameterDirection.INPUT)
        try:
            param_type = ParameterDirection(str(raw_type).upper())
        except ValueError as e:
            msg = f"Unknown procedure parameter type {raw_type!r}; expected INPUT or OUTPUT"
            raise ImproperConfigurationError(msg) from e
        return cls(value=entry.get("value", ""), param_type=param_type)


def parse_argument_entries(
    entries: "Optional[Sequence[Union[ArgumentEntry, Mapping[str, Any]]]]",
) -> "list[ArgumentEntry]":
    if not entries:
        return []
    return [entry if isinstance(entry, ArgumentEntry) else ArgumentEntry.from_mapping(entry) for entry in entries]


_RADIX_PREFIXES = ("0x", "0o", "0b")


def _parse_number(text: str) -> "Optional[Union[int, float]]":
    candidate = text.strip()
    # int()/float() accept digit separators and the spelled-out specials
    if "_" in candidate:
        return None
    if candidate[:2].lower() in _RADIX_PREFIXES:
        try:
            return int(candidate, 0)
        except ValueError:
            return None
    try:
        return int(candidate)
    except ValueError:
        pass
    try:
        number = float(candidate)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def coerce_argument(entry: ArgumentEntry) -> Any:
    """Coerce one argument entry into the value bound to its placeholder.

    Precedence:

    1. OUTPUT entries bind ``None``; the driver fills them in.
    2. Blank values (empty after trimming) pass through unchanged.
    3. Values parsing as a finite number bind as that number.
    4. Everything else passes through unchanged.

    Args:
        entry: The argument entry.

    Returns:
        The positional value to bind.
    """
    if entry.param_type is ParameterDirection.OUTPUT:
        return None
    value = entry.value
    if isinstance(value, str):
        if not value.strip():
            return value
        number = _parse_number(value)
        return value if number is None else number
    return value


def coerce_procedure_parameters(
    entries: "Optional[Sequence[Union[ArgumentEntry, Mapping[str, Any]]]]",
) -> "list[Any]":
    """Map argument entries to the positional parameter list, preserving order."""
    return [coerce_argument(entry) for entry in parse_argument_entries(entries)]


def normalize_schema(schema: "Optional[str]") -> "Optional[str]":
    """Return the trimmed schema, or ``None`` when it is blank.

    The driver treats a missing schema differently from an empty one, so blank
    input must never reach the call as ``""``.
    """
    if schema is None:
        return None
    trimmed = schema.strip()
    return trimmed or None
