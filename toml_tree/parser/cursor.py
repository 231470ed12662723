"""
Character cursor over a TOML source buffer.

Tracks the read position together with line and column numbers so that
every error raised during a parse can point at the offending character.
Spaces and tabs are insignificant between tokens; newlines terminate
statements and are never consumed by skip_whitespace().
"""

from dataclasses import dataclass

from ..errors import TomlError


@dataclass(frozen=True)
class Mark:
    """Saved cursor position."""

    pos: int
    line: int
    column: int


class ParseCursor:
    """
    Read position over one source buffer.

    A cursor drives exactly one parse and is discarded afterwards.
    """

    WHITESPACE = " \t"

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.source)

    @property
    def byte_offset(self) -> int:
        """UTF-8 byte offset of the current position."""
        return _byte_offset(self.source, self.pos)

    def current(self) -> str:
        """Get current character or empty string if at end."""
        if self.pos >= len(self.source):
            return ""
        return self.source[self.pos]

    def peek(self, offset: int = 1) -> str:
        """Peek at character at offset from current position."""
        pos = self.pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def startswith(self, text: str) -> bool:
        """Check whether the source continues with text at the current position."""
        return self.source.startswith(text, self.pos)

    def advance(self, count: int = 1) -> str:
        """Advance by count characters and return the last one consumed."""
        char = ""
        for _ in range(count):
            if self.pos >= len(self.source):
                return ""

            char = self.source[self.pos]
            self.pos += 1

            if char == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1

        return char

    def at_newline(self) -> bool:
        """Check for LF or CRLF at the current position."""
        return self.current() == "\n" or (self.current() == "\r" and self.peek() == "\n")

    def skip_newline(self) -> bool:
        """Consume one LF or CRLF. Returns True if consumed."""
        if self.current() == "\r" and self.peek() == "\n":
            self.advance(2)
            return True
        if self.current() == "\n":
            self.advance()
            return True
        return False

    def skip_whitespace(self) -> None:
        """Skip spaces and tabs (never newlines)."""
        while self.current() and self.current() in self.WHITESPACE:
            self.advance()

    def skip_comment(self) -> bool:
        """Skip a comment up to (not including) end of line. Returns True if skipped."""
        if self.current() != "#":
            return False
        while self.current() and not self.at_newline():
            self.advance()
        return True

    def mark(self) -> Mark:
        """Save the current position for later error reporting."""
        return Mark(self.pos, self.line, self.column)

    def error(self, error_cls: type[TomlError], message: str, mark: Mark | None = None) -> TomlError:
        """
        Build an error located at mark (or the current position).

        Args:
            error_cls: TomlError subclass to instantiate
            message: Description of the problem
            mark: Saved position, defaults to the current one

        Returns:
            Error instance for the caller to raise
        """
        mark = mark or self.mark()
        return error_cls(
            message,
            offset=mark.pos,
            line=mark.line,
            column=mark.column,
            byte_offset=_byte_offset(self.source, mark.pos),
        )


def _byte_offset(source: str, pos: int) -> int:
    return len(source[:pos].encode("utf-8", "surrogatepass"))
