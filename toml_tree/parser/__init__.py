"""
TOML parsing: character cursor and recursive descent parser.
"""

from .cursor import Mark, ParseCursor
from .parser import ParseResult, TomlParser, parse, try_parse

__all__ = [
    "Mark",
    "ParseCursor",
    "ParseResult",
    "TomlParser",
    "parse",
    "try_parse",
]
