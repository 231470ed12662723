"""
toml-tree: TOML parser producing an immutable value tree.

Usage:
    from toml_tree import parse

    root = parse('[server]\nport = 8080\n')
    root.get("server").get("port").int_val  -> 8080
"""

from .bridge import from_json, from_structured, to_json, to_structured
from .const import APP_VERSION
from .errors import (
    DuplicateKeyError,
    ErrorKind,
    InvalidValueError,
    LoadError,
    MissingKeyError,
    TomlError,
    TomlSyntaxError,
)
from .loader import parse_file, parse_file_async
from .models import Array, Boolean, DateTime, Float, Integer, String, Table, TomlType, TomlValue
from .parser import ParseResult, parse, try_parse
from .validator import ValidationIssue, validate_file, validate_text
from .watcher import TomlWatcher, WatchConfig

__version__ = APP_VERSION

__all__ = [
    "parse",
    "try_parse",
    "ParseResult",
    "parse_file",
    "parse_file_async",
    "to_structured",
    "from_structured",
    "to_json",
    "from_json",
    "TomlValue",
    "TomlType",
    "String",
    "Integer",
    "Float",
    "Boolean",
    "DateTime",
    "Array",
    "Table",
    "ErrorKind",
    "TomlError",
    "TomlSyntaxError",
    "InvalidValueError",
    "DuplicateKeyError",
    "MissingKeyError",
    "LoadError",
    "ValidationIssue",
    "validate_text",
    "validate_file",
    "TomlWatcher",
    "WatchConfig",
]
