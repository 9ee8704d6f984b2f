from typing import Any, TypedDict

__all__ = ("OutputRecord", "PairedItem")


class PairedItem(TypedDict):
    """Link from an output record back to the input item that produced it."""

    item: int


class OutputRecord(TypedDict):
    """One record of the batch returned to the host."""

    json: "dict[str, Any]"
    pairedItem: PairedItem
