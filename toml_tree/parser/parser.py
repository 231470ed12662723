"""
Recursive descent parser for TOML documents.

Turns a source string into a root Table. The first error anywhere aborts
the parse; callers get either a complete tree or an exception, never a
partial result.
"""

import re
from dataclasses import dataclass

from ..errors import DuplicateKeyError, InvalidValueError, TomlError, TomlSyntaxError
from ..models.value import Array, Boolean, DateTime, Float, Integer, String, Table, TomlValue
from .cursor import Mark, ParseCursor


DIGITS = "0123456789"
NUMBER_CHARS = DIGITS + "+-.eE_"

# Characters that end a bare key
BARE_KEY_STOP = frozenset(" \t\r\n=.[]{},#\"'")

SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    '"': '"',
    "\\": "\\",
}

# Dates, date-times and local times; kept as opaque text
DATETIME_RE = re.compile(
    r"\d{4}-\d{2}-\d{2}"
    r"(?:[Tt ]\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:[Zz]|[+-]\d{2}:\d{2})?)?"
    r"|\d{2}:\d{2}:\d{2}(?:\.\d+)?"
)


# Arrays and inline tables nested deeper than this are rejected
MAX_NESTING_DEPTH = 128

class _TableArray(list):
    """Array created by [[...]] headers. Later headers may descend into its last table."""


# Nodes are mutable while the document is being built and frozen at the end
Node = TomlValue | list | dict


@dataclass
class ParseResult:
    """Outcome of try_parse(): exactly one of value / error is set."""

    value: Table | None = None
    error: TomlError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Table:
        """Return the parsed table or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value


class TomlParser:
    """
    Recursive descent parser for TOML.

    Grammar:
        document    := (statement? comment? NEWLINE)*
        statement   := keyval | table | array_table
        keyval      := keypath '=' value
        table       := '[' keypath ']'
        array_table := '[[' keypath ']]'
        keypath     := key ('.' key)*
        key         := BARE | BASIC_STRING | LITERAL_STRING
        value       := string | number | datetime | boolean | array | inline_table
    """

    def __init__(self, source: str):
        self.cursor = ParseCursor(source)
        self.depth = 0

    def parse(self) -> Table:
        """Parse the entire document."""
        cursor = self.cursor
        root: dict[str, Node] = {}
        current = root

        while True:
            cursor.skip_whitespace()
            cursor.skip_comment()
            if cursor.at_end:
                break
            if cursor.skip_newline():
                continue

            if cursor.current() == "[":
                current = self._parse_header(root)
            else:
                self._parse_key_value(current)

            self._end_statement()

        return _freeze(root)

    def _end_statement(self) -> None:
        """Expect end of line (after optional whitespace and comment) or end of input."""
        cursor = self.cursor
        cursor.skip_whitespace()
        cursor.skip_comment()
        if cursor.at_end or cursor.skip_newline():
            return
        raise cursor.error(
            TomlSyntaxError,
            f"Unexpected character {cursor.current()!r}, expected end of line",
        )

    # Keys

    def _parse_key(self) -> str:
        cursor = self.cursor
        char = cursor.current()

        if char == '"':
            return self._read_string('"', multiline_allowed=False)
        if char == "'":
            return self._read_string("'", multiline_allowed=False)

        start = cursor.pos
        while cursor.current() and cursor.current() not in BARE_KEY_STOP and not cursor.current().isspace():
            cursor.advance()

        if cursor.pos == start:
            raise cursor.error(TomlSyntaxError, "Expected key")
        return cursor.source[start:cursor.pos]

    def _parse_key_path(self) -> list[str]:
        cursor = self.cursor
        cursor.skip_whitespace()
        keys = [self._parse_key()]
        cursor.skip_whitespace()

        while cursor.current() == ".":
            cursor.advance()
            cursor.skip_whitespace()
            keys.append(self._parse_key())
            cursor.skip_whitespace()

        return keys

    def _parse_key_value(self, table: dict[str, Node]) -> None:
        cursor = self.cursor
        start = cursor.mark()
        keys = self._parse_key_path()

        if cursor.current() != "=":
            raise cursor.error(TomlSyntaxError, "Expected '=' after key")
        cursor.advance()
        cursor.skip_whitespace()

        value = self._parse_value()
        parent = self._descend(table, keys[:-1], start, through_arrays=False)
        if keys[-1] in parent:
            raise cursor.error(DuplicateKeyError, f"Duplicate key: {_dotted(keys)}", start)
        parent[keys[-1]] = value

    # Headers

    def _parse_header(self, root: dict[str, Node]) -> dict[str, Node]:
        """Parse [a.b] or [[a.b]] and return the table that receives the body."""
        cursor = self.cursor
        start = cursor.mark()

        if cursor.startswith("[["):
            cursor.advance(2)
            keys = self._parse_key_path()
            if not cursor.startswith("]]"):
                raise cursor.error(TomlSyntaxError, "Expected '.' or ']]' in array table header")
            cursor.advance(2)
            return self._open_array_table(root, keys, start)

        cursor.advance()
        keys = self._parse_key_path()
        if cursor.current() != "]":
            raise cursor.error(TomlSyntaxError, "Expected '.' or ']' in table header")
        cursor.advance()
        return self._open_table(root, keys, start)

    def _open_table(self, root: dict[str, Node], keys: list[str], start: Mark) -> dict[str, Node]:
        parent = self._descend(root, keys[:-1], start, through_arrays=True)
        existing = parent.get(keys[-1])

        if existing is None:
            table: dict[str, Node] = {}
            parent[keys[-1]] = table
            return table
        if isinstance(existing, dict):
            return existing

        raise self.cursor.error(
            DuplicateKeyError,
            f"Key conflict: '{_dotted(keys)}' is already defined and is not a table",
            start,
        )

    def _open_array_table(self, root: dict[str, Node], keys: list[str], start: Mark) -> dict[str, Node]:
        parent = self._descend(root, keys[:-1], start, through_arrays=True)
        existing = parent.get(keys[-1])

        if existing is None:
            array: list = _TableArray()
            parent[keys[-1]] = array
        elif isinstance(existing, list):
            array = existing
        else:
            raise self.cursor.error(
                DuplicateKeyError,
                f"Key conflict: '{_dotted(keys)}' is already defined and is not an array",
                start,
            )

        table: dict[str, Node] = {}
        array.append(table)
        return table

    def _descend(
        self,
        table: dict[str, Node],
        keys: list[str],
        start: Mark,
        through_arrays: bool,
    ) -> dict[str, Node]:
        """Walk intermediate keys, creating missing tables."""
        for depth, key in enumerate(keys):
            existing = table.get(key)
            if existing is None:
                child: dict[str, Node] = {}
                table[key] = child
                table = child
            elif isinstance(existing, dict):
                table = existing
            elif through_arrays and isinstance(existing, _TableArray):
                table = existing[-1]
            else:
                raise self.cursor.error(
                    DuplicateKeyError,
                    f"Key conflict: '{_dotted(keys[:depth + 1])}' is not a table",
                    start,
                )
        return table

    # Values

    def _parse_value(self) -> Node:
        cursor = self.cursor
        char = cursor.current()

        if char == '"':
            return String(self._read_string('"'))
        if char == "'":
            return String(self._read_string("'"))
        if char and char in DIGITS + "+-":
            return self._parse_number_or_datetime()
        if char in ("t", "f"):
            return self._parse_bool()
        if char == "[":
            return self._parse_array()
        if char == "{":
            return self._parse_inline_table()

        if not char or cursor.at_newline():
            raise cursor.error(TomlSyntaxError, "Expected value")
        raise cursor.error(InvalidValueError, f"Unknown value type starting with {char!r}")

    def _read_string(self, quote: str, multiline_allowed: bool = True) -> str:
        """
        Read a basic (") or literal (') string, single- or multi-line.

        Escapes are processed only in basic strings. A multi-line string
        closes on a run of three to five quotes; quotes beyond the first
        three closing ones belong to the content.
        """
        cursor = self.cursor
        start = cursor.mark()
        escapes = quote == '"'
        kind = "string" if escapes else "literal string"

        multiline = multiline_allowed and cursor.startswith(quote * 3)
        if multiline:
            cursor.advance(3)
            # A newline right after the opening delimiter is trimmed
            cursor.skip_newline()
        else:
            cursor.advance()

        chars: list[str] = []
        while True:
            char = cursor.current()

            if not char:
                raise cursor.error(TomlSyntaxError, f"Unterminated {kind}", start)

            if char == quote:
                if not multiline:
                    cursor.advance()
                    break
                run = 0
                while cursor.peek(run) == quote:
                    run += 1
                if run < 3:
                    chars.append(quote * run)
                    cursor.advance(run)
                    continue
                if run > 5:
                    raise cursor.error(TomlSyntaxError, f"Too many quotes closing multi-line {kind}")
                chars.append(quote * (run - 3))
                cursor.advance(run)
                break

            if escapes and char == "\\":
                escape_mark = cursor.mark()
                cursor.advance()
                chars.append(self._read_escape(multiline, escape_mark))
                continue

            if not multiline and cursor.at_newline():
                raise cursor.error(TomlSyntaxError, f"Unterminated {kind}", start)

            chars.append(char)
            cursor.advance()

        return "".join(chars)

    def _read_escape(self, multiline: bool, escape_mark: Mark) -> str:
        """Decode the escape following a backslash in a basic string."""
        cursor = self.cursor
        char = cursor.current()

        if char in SIMPLE_ESCAPES:
            cursor.advance()
            return SIMPLE_ESCAPES[char]

        if char in ("u", "U"):
            # Code points are not decoded: the marker stays, the hex digits follow as text
            cursor.advance()
            return "\\" + char

        if multiline and (char in (" ", "\t") or cursor.at_newline()):
            # Line-ending backslash: drop the newline and leading whitespace of what follows
            cursor.skip_whitespace()
            if not cursor.at_newline():
                raise cursor.error(TomlSyntaxError, "Invalid escape sequence: '\\ '", escape_mark)
            while cursor.current() in (" ", "\t") or cursor.at_newline():
                if not cursor.skip_newline():
                    cursor.advance()
            return ""

        if not char:
            raise cursor.error(TomlSyntaxError, "Unterminated string", escape_mark)
        raise cursor.error(TomlSyntaxError, f"Invalid escape sequence: '\\{char}'", escape_mark)

    def _parse_number_or_datetime(self) -> TomlValue:
        cursor = self.cursor
        start = cursor.mark()

        match = DATETIME_RE.match(cursor.source, cursor.pos)
        if match:
            cursor.advance(len(match.group()))
            return DateTime(match.group())

        while cursor.current() and cursor.current() in NUMBER_CHARS:
            cursor.advance()
        lexeme = cursor.source[start.pos:cursor.pos]

        try:
            if any(char in lexeme for char in ".eE"):
                return Float(float(lexeme))
            return Integer(int(lexeme))
        except ValueError:
            raise cursor.error(InvalidValueError, f"Invalid number: {lexeme}", start) from None
        except InvalidValueError as e:
            raise cursor.error(InvalidValueError, e.message, start) from None

    def _parse_bool(self) -> Boolean:
        cursor = self.cursor
        if cursor.startswith("true"):
            cursor.advance(4)
            return Boolean(True)
        if cursor.startswith("false"):
            cursor.advance(5)
            return Boolean(False)
        raise cursor.error(InvalidValueError, "Invalid boolean")

    def _enter_nested(self, start: Mark) -> None:
        self.depth += 1
        if self.depth > MAX_NESTING_DEPTH:
            raise self.cursor.error(
                TomlSyntaxError,
                f"Arrays and inline tables nested deeper than {MAX_NESTING_DEPTH} levels",
                start,
            )

    def _skip_array_whitespace(self) -> None:
        """Skip whitespace, comments and newlines between array elements."""
        cursor = self.cursor
        while True:
            cursor.skip_whitespace()
            cursor.skip_comment()
            if not cursor.skip_newline():
                break

    def _parse_array(self) -> list[Node]:
        cursor = self.cursor
        start = cursor.mark()
        self._enter_nested(start)
        cursor.advance()  # skip [

        items: list[Node] = []
        while True:
            self._skip_array_whitespace()
            if cursor.current() == "]":
                cursor.advance()
                break
            if cursor.at_end:
                raise cursor.error(TomlSyntaxError, "Unterminated array", start)

            items.append(self._parse_value())

            self._skip_array_whitespace()
            if cursor.current() == ",":
                cursor.advance()
            elif cursor.current() != "]":
                raise cursor.error(TomlSyntaxError, "Expected ',' or ']' in array")

        self.depth -= 1
        return items

    def _parse_inline_table(self) -> dict[str, Node]:
        cursor = self.cursor
        start = cursor.mark()
        self._enter_nested(start)
        cursor.advance()  # skip {

        table: dict[str, Node] = {}
        while True:
            cursor.skip_whitespace()
            if cursor.current() == "}":
                cursor.advance()
                break
            if cursor.at_end or cursor.at_newline():
                raise cursor.error(TomlSyntaxError, "Unterminated inline table", start)

            self._parse_key_value(table)

            cursor.skip_whitespace()
            if cursor.current() == ",":
                cursor.advance()
            elif cursor.current() != "}":
                raise cursor.error(TomlSyntaxError, "Expected ',' or '}' in inline table")

        self.depth -= 1
        return table


def _dotted(keys: list[str]) -> str:
    return ".".join(keys)


def _freeze(node: Node) -> TomlValue:
    """Convert the mutable build tree into immutable values."""
    if isinstance(node, dict):
        return Table({key: _freeze(child) for key, child in node.items()})
    if isinstance(node, list):
        return Array(_freeze(item) for item in node)
    return node


def parse(source: str) -> Table:
    """
    Parse a TOML document.

    Args:
        source: Document text

    Returns:
        Root Table

    Raises:
        TomlError: On the first syntax, value or duplicate-key problem
    """
    return TomlParser(source).parse()


def try_parse(source: str) -> ParseResult:
    """Parse a TOML document, returning the error instead of raising it."""
    try:
        return ParseResult(value=parse(source))
    except TomlError as e:
        return ParseResult(error=e)
