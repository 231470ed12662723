"""
Error types raised by the parser, the value tree and the file collaborators.

Every error carries a kind, a message and, when it was raised while
scanning text, the position of the offending character.
"""

from enum import Enum


class ErrorKind(Enum):
    """Kinds of TOML errors."""

    SYNTAX = "syntax"                # malformed token or statement
    INVALID_VALUE = "invalid_value"  # well-formed token, unusable value
    DUPLICATE_KEY = "duplicate_key"  # occupied slot or key conflict
    MISSING_KEY = "missing_key"      # required key absent (callers only)
    IO = "io"                        # file could not be read or decoded


class TomlError(Exception):
    """
    Base exception for all TOML errors.

    Attributes:
        message: Human-readable description without position prefix
        offset: Character index into the source text (0 if unknown)
        byte_offset: UTF-8 byte index into the source text (0 if unknown)
        line: 1-based line number (0 if unknown)
        column: 1-based column number (0 if unknown)
    """

    kind: ErrorKind = ErrorKind.SYNTAX

    def __init__(
        self,
        message: str,
        offset: int = 0,
        line: int = 0,
        column: int = 0,
        byte_offset: int | None = None,
    ):
        self.message = message
        self.offset = offset
        self.byte_offset = offset if byte_offset is None else byte_offset
        self.line = line
        self.column = column
        if line:
            super().__init__(f"Line {line}, column {column}: {message}")
        else:
            super().__init__(message)

    @property
    def has_position(self) -> bool:
        """Whether the error points at a location in the source text."""
        return self.line > 0


class TomlSyntaxError(TomlError):
    """Malformed token: unclosed string, unexpected character, bad escape."""

    kind = ErrorKind.SYNTAX


class InvalidValueError(TomlError):
    """Well-formed token that cannot be interpreted as the expected type."""

    kind = ErrorKind.INVALID_VALUE


class DuplicateKeyError(TomlError):
    """Key path resolves to an occupied slot or is blocked by a non-table."""

    kind = ErrorKind.DUPLICATE_KEY


class MissingKeyError(TomlError):
    """Required key is absent. Raised by tree consumers, never by the parser."""

    kind = ErrorKind.MISSING_KEY


class LoadError(TomlError):
    """Document file could not be read or decoded."""

    kind = ErrorKind.IO
