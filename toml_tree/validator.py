"""
Document validation with user-facing suggestions.

Runs the parser (and optional required-key checks) and reports problems
as ValidationIssue records instead of exceptions.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from .errors import ErrorKind, MissingKeyError, TomlError
from .loader import read_document
from .logging import get_logger
from .models.value import Table, TomlValue
from .parser import parse


logger = get_logger("validator")

SUGGESTIONS = {
    ErrorKind.SYNTAX: (
        "Check the TOML syntax at the indicated position. Ensure keys are properly "
        "quoted if necessary, and values match expected types."
    ),
    ErrorKind.INVALID_VALUE: (
        "Verify the value format. For example, strings should be quoted, numbers "
        "should not contain invalid characters."
    ),
    ErrorKind.DUPLICATE_KEY: "Remove or rename duplicate keys in the same table.",
    ErrorKind.MISSING_KEY: "Ensure all required keys are present.",
    ErrorKind.IO: "Check that the file exists, is readable and uses a supported encoding.",
}


@dataclass
class ValidationIssue:
    """A single validation problem."""

    kind: ErrorKind
    message: str
    line: int = 0
    column: int = 0
    suggestion: str = ""

    @classmethod
    def from_error(cls, error: TomlError) -> "ValidationIssue":
        return cls(
            kind=error.kind,
            message=error.message,
            line=error.line,
            column=error.column,
            suggestion=SUGGESTIONS.get(error.kind, ""),
        )

    def __str__(self) -> str:
        if self.line:
            return f"Line {self.line}, column {self.column}: {self.message}"
        return self.message


def check_required(root: Table, required: Iterable[str]) -> list[ValidationIssue]:
    """
    Check that dotted key paths exist in a parsed document.

    Args:
        root: Parsed document
        required: Key paths such as "server.port"

    Returns:
        One MISSING_KEY issue per absent path
    """
    issues = []
    for path in required:
        node: TomlValue = root
        try:
            for key in path.split("."):
                if not isinstance(node, Table):
                    raise MissingKeyError(f"'{key}' is not inside a table")
                node = node.require(key)
        except MissingKeyError:
            issues.append(ValidationIssue.from_error(MissingKeyError(f"Missing required key: {path}")))
    return issues


def validate_text(source: str, required: Iterable[str] = ()) -> list[ValidationIssue]:
    """
    Validate document text.

    Returns:
        List of issues (empty if the document is valid)
    """
    try:
        root = parse(source)
    except TomlError as e:
        return [ValidationIssue.from_error(e)]
    return check_required(root, required)


def validate_file(
    path: str | Path,
    encoding: str | None = None,
    required: Iterable[str] = (),
) -> list[ValidationIssue]:
    """
    Validate a document file.

    Returns:
        List of issues (empty if the file is valid)
    """
    try:
        source = read_document(path, encoding)
    except TomlError as e:
        return [ValidationIssue.from_error(e)]

    issues = validate_text(source, required)
    logger.debug(f"Validated {path}: {len(issues)} issue(s)")
    return issues
