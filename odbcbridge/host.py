"""Host collaborator support.

:class:`StaticHost` is an in-memory :class:`~odbcbridge.protocols.ExecutionHost`
used by the command line and by embedding code that has no workflow engine of
its own.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

__all__ = ("InputItem", "StaticHost", "items_from_json")


@dataclass(frozen=True)
class InputItem:
    """One row of upstream data."""

    index: int
    json: "dict[str, Any]" = field(default_factory=dict)


def items_from_json(rows: "Optional[Sequence[Mapping[str, Any]]]") -> "list[InputItem]":
    """Index a list of JSON objects as input items; no rows yields one empty item."""
    if not rows:
        return [InputItem(index=0)]
    return [InputItem(index=index, json=dict(row)) for index, row in enumerate(rows)]


class StaticHost:
    """A host whose items, parameters and credentials are fixed up front.

    Parameters may be constants or callables taking the :class:`InputItem`.
    A parameter that is not configured falls back to the item's own JSON field
    of the same name.
    """

    def __init__(
        self,
        *,
        items: "Sequence[Union[InputItem, Mapping[str, Any]]]",
        credentials: "Mapping[str, Any]",
        parameters: "Optional[Mapping[str, Union[Any, Callable[[InputItem], Any]]]]" = None,
        continue_on_fail: bool = False,
    ) -> None:
        self._items = [
            item if isinstance(item, InputItem) else InputItem(index=index, json=dict(item))
            for index, item in enumerate(items)
        ]
        self._credentials = dict(credentials)
        self._parameters = dict(parameters or {})
        self._continue_on_fail = continue_on_fail

    def get_input_data(self) -> "list[InputItem]":
        return list(self._items)

    def get_parameter(self, name: str, item_index: int, default: Optional[Any] = None) -> Any:
        item = self._items[item_index]
        if name in self._parameters:
            value = self._parameters[name]
            return value(item) if callable(value) else value
        return item.json.get(name, default)

    def continue_on_fail(self) -> bool:
        return self._continue_on_fail

    def get_credentials(self) -> "dict[str, Any]":
        return dict(self._credentials)
