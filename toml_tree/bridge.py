"""
Conversion between value trees and generic structured documents.

A structured document is plain Python data as produced by json.loads():
dict, list, str, int, float, bool and None. TOML has no null, so None
is rejected.
"""

import json
from collections.abc import Mapping
from typing import Any

from .errors import InvalidValueError, TomlSyntaxError
from .models.value import Array, Boolean, Float, Integer, String, Table, TomlValue


def to_structured(value: TomlValue) -> Any:
    """
    Convert a value tree to plain Python data.

    DateTime values become strings, tables become dicts in insertion order.
    """
    return value.to_structured()


def from_structured(doc: Any) -> TomlValue:
    """
    Convert plain Python data to a value tree.

    Args:
        doc: dict / list / str / int / float / bool tree

    Returns:
        Equivalent TomlValue (a Table for dict input)

    Raises:
        InvalidValueError: For None, non-string keys, non-finite floats,
            integers outside the 64-bit range or any other unsupported type
    """
    # bool is a subclass of int
    if isinstance(doc, bool):
        return Boolean(doc)
    if isinstance(doc, int):
        return Integer(doc)
    if isinstance(doc, float):
        return Float(doc)
    if isinstance(doc, str):
        return String(doc)
    if isinstance(doc, Mapping):
        entries = {}
        for key, child in doc.items():
            if not isinstance(key, str):
                raise InvalidValueError(f"Unsupported key type: {type(key).__name__}")
            entries[key] = from_structured(child)
        return Table(entries)
    if isinstance(doc, (list, tuple)):
        return Array(from_structured(item) for item in doc)
    if doc is None:
        raise InvalidValueError("Unsupported value: null has no TOML representation")
    raise InvalidValueError(f"Unsupported value type: {type(doc).__name__}")


def to_json(value: TomlValue, indent: int | None = None) -> str:
    """Render a value tree as JSON text."""
    return json.dumps(to_structured(value), indent=indent, ensure_ascii=False)


def from_json(text: str) -> TomlValue:
    """
    Build a value tree from JSON text.

    Raises:
        TomlSyntaxError: If text is not valid JSON
        InvalidValueError: If the document contains null
    """
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as e:
        raise TomlSyntaxError(f"Invalid JSON: {e.msg}", offset=e.pos, line=e.lineno, column=e.colno) from e
    return from_structured(doc)
