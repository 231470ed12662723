"""
Tests for conversion between value trees and plain data / JSON.
"""

import json

import pytest

from toml_tree import (
    Array,
    Boolean,
    DateTime,
    Float,
    Integer,
    InvalidValueError,
    String,
    Table,
    TomlSyntaxError,
    from_json,
    from_structured,
    parse,
    to_json,
    to_structured,
)


def test_to_structured(sample_document: str) -> None:
    doc = to_structured(parse(sample_document))

    assert doc["title"] == "toml-tree example"
    assert doc["owner"] == {"name": "Tom", "dob": "1979-05-27T07:32:00-08:00"}
    assert doc["database"]["ports"] == [8000, 8001, 8002]
    assert doc["database"]["temp_targets"] == {"cpu": 79.5, "case": 72.0}
    assert doc["products"][1] == {"name": "Nail", "sku": 284758393}
    assert list(doc) == ["title", "owner", "database", "products"]


def test_from_structured_maps_python_types() -> None:
    value = from_structured({"s": "x", "i": 1, "f": 1.5, "b": True, "a": [1, "y"], "t": {"k": False}})

    assert value == Table(
        {
            "s": String("x"),
            "i": Integer(1),
            "f": Float(1.5),
            "b": Boolean(True),
            "a": Array([Integer(1), String("y")]),
            "t": Table({"k": Boolean(False)}),
        }
    )


def test_from_structured_scalars_and_tuples() -> None:
    assert from_structured(False) == Boolean(False)
    assert from_structured("x") == String("x")
    assert from_structured((1, 2)) == Array([Integer(1), Integer(2)])


@pytest.mark.parametrize(
    "doc",
    [None, {"a": None}, [1, None], {1: "x"}, {"a": {1, 2}}, {"a": 2**63}],
)
def test_from_structured_rejects_unsupported(doc: object) -> None:
    with pytest.raises(InvalidValueError):
        from_structured(doc)


def test_datetime_becomes_string() -> None:
    assert to_structured(DateTime("1979-05-27")) == "1979-05-27"
    assert from_structured("1979-05-27") == String("1979-05-27")


def test_to_json(sample_document: str) -> None:
    text = to_json(parse(sample_document))

    assert json.loads(text)["database"]["enabled"] is True
    assert "\n" not in text


def test_to_json_keeps_non_ascii() -> None:
    assert to_json(parse('name = "café"')) == '{"name": "café"}'


def test_to_json_indent() -> None:
    assert to_json(parse("a = [1]"), indent=2) == '{\n  "a": [\n    1\n  ]\n}'


def test_from_json() -> None:
    value = from_json('{"server": {"port": 8080, "hosts": ["a", "b"]}}')

    assert value.get("server").get("port") == Integer(8080)
    assert value.to_toml() == 'server.port = 8080\nserver.hosts = ["a", "b"]\n'


def test_from_json_syntax_error_has_position() -> None:
    with pytest.raises(TomlSyntaxError) as exc_info:
        from_json('{\n  "a": }')

    assert exc_info.value.line == 2
    assert exc_info.value.column == 8
    assert exc_info.value.message.startswith("Invalid JSON")


def test_from_json_rejects_null() -> None:
    with pytest.raises(InvalidValueError):
        from_json('{"a": null}')


def test_json_and_toml_agree(sample_document: str) -> None:
    root = parse(sample_document)

    assert from_json(to_json(root)).to_structured() == root.to_structured()


@pytest.mark.parametrize("number", [float("nan"), float("inf")])
def test_from_structured_rejects_non_finite_floats(number: float) -> None:
    with pytest.raises(InvalidValueError):
        from_structured({"x": number})


def test_from_json_rejects_non_finite_floats() -> None:
    with pytest.raises(InvalidValueError):
        from_json('{"x": NaN}')
