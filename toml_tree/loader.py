"""
Document loading from files.

Reads raw bytes, detects the text encoding from a byte-order mark
(UTF-8 is assumed when there is none), decodes, and hands the text to
the parser. Blocking and asyncio variants share the same parse step.
"""

import asyncio
import codecs
from pathlib import Path

from .const import DEFAULT_ENCODING
from .errors import LoadError
from .logging import get_logger
from .models.value import Table
from .parser import parse


logger = get_logger("loader")

# Checked in order: the UTF-32LE mark starts with the UTF-16LE one
BOMS = [
    (codecs.BOM_UTF32_BE, "utf-32-be"),
    (codecs.BOM_UTF32_LE, "utf-32-le"),
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
]


def detect_encoding(data: bytes) -> str:
    """
    Detect text encoding from a leading byte-order mark.

    Args:
        data: Raw file contents

    Returns:
        Python codec name
    """
    for bom, encoding in BOMS:
        if data.startswith(bom):
            return encoding
    return DEFAULT_ENCODING


def decode_document(data: bytes, encoding: str | None = None) -> str:
    """
    Decode raw bytes to text, dropping any byte-order mark.

    Args:
        data: Raw file contents
        encoding: Codec name; detected from the BOM when None

    Raises:
        LoadError: If the codec is unknown or the bytes do not decode
    """
    if encoding is None:
        encoding = detect_encoding(data)
        logger.debug(f"Detected encoding: {encoding}")

    try:
        text = data.decode(encoding)
    except LookupError as e:
        raise LoadError(f"Unknown encoding: {encoding}") from e
    except UnicodeDecodeError as e:
        raise LoadError(f"Failed to decode document as {encoding}: {e.reason}", offset=e.start) from e

    return text.removeprefix("\ufeff")


def read_document(path: str | Path, encoding: str | None = None) -> str:
    """
    Read and decode a document file.

    Raises:
        LoadError: If the file is missing, unreadable or undecodable
    """
    path = Path(path)

    if not path.exists():
        raise LoadError(f"Document not found: {path}")

    if not path.is_file():
        raise LoadError(f"Not a file: {path}")

    try:
        data = path.read_bytes()
    except OSError as e:
        raise LoadError(f"Failed to read {path}: {e}") from e

    logger.debug(f"Read {len(data)} bytes from {path}")
    return decode_document(data, encoding)


def parse_file(path: str | Path, encoding: str | None = None) -> Table:
    """
    Parse a TOML file.

    Args:
        path: Path to the document
        encoding: Codec name; detected from the BOM when None

    Returns:
        Root Table

    Raises:
        LoadError: If the file cannot be read
        TomlError: If the document does not parse
    """
    return parse(read_document(path, encoding))


async def parse_file_async(path: str | Path, encoding: str | None = None) -> Table:
    """
    Parse a TOML file without blocking the event loop on file I/O.

    Same arguments, result and errors as parse_file().
    """
    text = await asyncio.to_thread(read_document, path, encoding)
    return parse(text)
