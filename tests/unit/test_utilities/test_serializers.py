"""Tests for JSON serialization helpers."""

from decimal import Decimal

from odbcbridge.utils.serializers import from_json, to_json


def test_to_json_returns_text_by_default() -> None:
    assert to_json({"json": {"ID": 1}, "pairedItem": {"item": 0}}) == '{"json":{"ID":1},"pairedItem":{"item":0}}'


def test_to_json_as_bytes() -> None:
    assert to_json([1, None], as_bytes=True) == b"[1,null]"


def test_decimal_values_are_numbers() -> None:
    assert to_json({"amount": Decimal("12.50")}) == '{"amount":12.50}'


def test_from_json_accepts_text_and_bytes() -> None:
    assert from_json('{"connectionType":"dsn"}') == {"connectionType": "dsn"}
    assert from_json(b"[{}]") == [{}]
