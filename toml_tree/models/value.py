"""
Typed value tree produced by the parser.

Each TOML value kind is its own frozen dataclass. Containers hold fully
built children: Array wraps a tuple and Table wraps a read-only mapping
that preserves insertion order.

Example:
    root = Table({"server": Table({"port": Integer(8080)})})
    root.get("server").get("port").int_val  -> 8080
"""

import math
import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar

from ..const import INT64_MAX, INT64_MIN
from ..errors import InvalidValueError, MissingKeyError


class TomlType(Enum):
    """Value kinds of the TOML data model."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    ARRAY = "array"
    TABLE = "table"


BARE_KEY_RE = re.compile(r"[A-Za-z0-9_-]+")

# Characters escaped when rendering basic strings
_STRING_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
}


@dataclass(frozen=True, repr=False)
class TomlValue:
    """
    Base class for all value variants.

    Read access never raises: get() and get_index() return None when the
    receiver is not a Table/Array or the key/index does not exist.
    """

    type: ClassVar[TomlType]

    @property
    def value(self) -> Any:
        """The wrapped Python value."""
        raise NotImplementedError

    def get(self, key: str) -> "TomlValue | None":
        """Child value for key; None unless this is a Table containing key."""
        return None

    def get_index(self, index: int) -> "TomlValue | None":
        """Element at index; None unless this is an Array and index is in range."""
        return None

    def to_toml(self) -> str:
        """
        Render as TOML-like text.

        Tables become flat ``key = value`` lines (nested tables turn into
        dotted keys, tables inside arrays into inline tables). The output
        is lossy and not guaranteed to re-parse into the same structure.
        """
        return _render_inline(self)

    def to_structured(self) -> Any:
        """Convert to plain Python data (str, int, float, bool, list, dict)."""
        return self.value

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.value!r})"


@dataclass(frozen=True, repr=False)
class String(TomlValue):
    """Basic or literal string."""

    type: ClassVar[TomlType] = TomlType.STRING
    string_val: str

    @property
    def value(self) -> str:
        return self.string_val


@dataclass(frozen=True, repr=False)
class Integer(TomlValue):
    """Signed 64-bit integer."""

    type: ClassVar[TomlType] = TomlType.INTEGER
    int_val: int

    def __post_init__(self) -> None:
        if not INT64_MIN <= self.int_val <= INT64_MAX:
            raise InvalidValueError(f"Integer out of 64-bit range: {self.int_val}")

    @property
    def value(self) -> int:
        return self.int_val


@dataclass(frozen=True, repr=False)
class Float(TomlValue):
    """64-bit float."""

    type: ClassVar[TomlType] = TomlType.FLOAT
    float_val: float

    def __post_init__(self) -> None:
        if not math.isfinite(self.float_val):
            raise InvalidValueError(f"Float must be finite: {self.float_val}")

    @property
    def value(self) -> float:
        return self.float_val


@dataclass(frozen=True, repr=False)
class Boolean(TomlValue):
    """true / false."""

    type: ClassVar[TomlType] = TomlType.BOOLEAN
    bool_val: bool

    @property
    def value(self) -> bool:
        return self.bool_val


@dataclass(frozen=True, repr=False)
class DateTime(TomlValue):
    """Date, time or date-time kept as the literal source text."""

    type: ClassVar[TomlType] = TomlType.DATETIME
    datetime_val: str

    @property
    def value(self) -> str:
        return self.datetime_val


@dataclass(frozen=True, repr=False)
class Array(TomlValue):
    """
    Ordered sequence of values.

    Element types are not required to match.
    """

    type: ClassVar[TomlType] = TomlType.ARRAY
    array_val: tuple[TomlValue, ...] = ()

    def __post_init__(self) -> None:
        # Accept any iterable, store an immutable tuple
        object.__setattr__(self, "array_val", tuple(self.array_val))

    @property
    def value(self) -> tuple[TomlValue, ...]:
        return self.array_val

    def get_index(self, index: int) -> TomlValue | None:
        if index < 0 or index >= len(self.array_val):
            return None
        return self.array_val[index]

    def to_structured(self) -> list[Any]:
        return [item.to_structured() for item in self.array_val]

    def __getitem__(self, index: int) -> TomlValue:
        return self.array_val[index]

    def __len__(self) -> int:
        return len(self.array_val)

    def __iter__(self) -> Iterator[TomlValue]:
        return iter(self.array_val)


@dataclass(frozen=True, repr=False)
class Table(TomlValue):
    """
    Mapping from string keys to values.

    Keys are unique and keep insertion order. The mapping is read-only;
    build a new Table to change contents.
    """

    type: ClassVar[TomlType] = TomlType.TABLE
    table_val: Mapping[str, TomlValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "table_val", MappingProxyType(dict(self.table_val)))

    @property
    def value(self) -> Mapping[str, TomlValue]:
        return self.table_val

    def get(self, key: str) -> TomlValue | None:
        return self.table_val.get(key)

    def require(self, key: str) -> TomlValue:
        """
        Get a child value that must be present.

        Raises:
            MissingKeyError: If key is not in this table
        """
        child = self.table_val.get(key)
        if child is None:
            raise MissingKeyError(f"Missing required key: {key}")
        return child

    def keys(self) -> Iterable[str]:
        return self.table_val.keys()

    def values(self) -> Iterable[TomlValue]:
        return self.table_val.values()

    def items(self) -> Iterable[tuple[str, TomlValue]]:
        return self.table_val.items()

    def to_toml(self) -> str:
        return "".join(f"{line}\n" for line in _render_table_lines(self, []))

    def to_structured(self) -> dict[str, Any]:
        return {key: child.to_structured() for key, child in self.table_val.items()}

    def __getitem__(self, key: str) -> TomlValue:
        return self.table_val[key]

    def __contains__(self, key: object) -> bool:
        return key in self.table_val

    def __len__(self) -> int:
        return len(self.table_val)

    def __iter__(self) -> Iterator[str]:
        return iter(self.table_val)

    def __repr__(self) -> str:
        return f"Table({dict(self.table_val)!r})"

    def __hash__(self) -> int:
        return hash(tuple(self.table_val.items()))


def format_key(key: str) -> str:
    """Render a simple key, quoting it unless it is a valid bare key."""
    if BARE_KEY_RE.fullmatch(key):
        return key
    return format_string(key)


def format_string(text: str) -> str:
    """Render text as a double-quoted basic string."""
    return '"' + "".join(_STRING_ESCAPES.get(char, char) for char in text) + '"'


def _render_inline(value: TomlValue) -> str:
    """Render a value as it appears on the right-hand side of ``=``."""
    if isinstance(value, String):
        return format_string(value.string_val)
    if isinstance(value, Boolean):
        return "true" if value.bool_val else "false"
    if isinstance(value, Integer):
        return str(value.int_val)
    if isinstance(value, Float):
        return str(value.float_val)
    if isinstance(value, DateTime):
        return value.datetime_val
    if isinstance(value, Array):
        return "[" + ", ".join(_render_inline(item) for item in value) + "]"
    if isinstance(value, Table):
        pairs = [f"{format_key(key)} = {_render_inline(child)}" for key, child in value.items()]
        return "{" + ", ".join(pairs) + "}" if pairs else "{}"
    raise TypeError(f"Cannot render {value!r}")


def _render_table_lines(table: Table, prefix: list[str]) -> list[str]:
    """Flatten a table into ``dotted.key = value`` lines."""
    lines = []
    for key, child in table.items():
        path = prefix + [format_key(key)]
        if isinstance(child, Table) and len(child) > 0:
            lines.extend(_render_table_lines(child, path))
        else:
            lines.append(f"{'.'.join(path)} = {_render_inline(child)}")
    return lines
