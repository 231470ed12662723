"""
Tests for document validation and suggestions.
"""

from pathlib import Path

from toml_tree import ErrorKind, ValidationIssue, parse, validate_file, validate_text
from toml_tree.errors import InvalidValueError
from toml_tree.validator import SUGGESTIONS, check_required


def test_valid_document(sample_document: str) -> None:
    assert validate_text(sample_document) == []


def test_duplicate_key_issue() -> None:
    issues = validate_text("a = 1\na = 2")

    assert len(issues) == 1
    issue = issues[0]
    assert issue.kind is ErrorKind.DUPLICATE_KEY
    assert (issue.line, issue.column) == (2, 1)
    assert issue.message == "Duplicate key: a"
    assert issue.suggestion == "Remove or rename duplicate keys in the same table."
    assert str(issue) == "Line 2, column 1: Duplicate key: a"


def test_every_kind_has_a_suggestion() -> None:
    assert set(SUGGESTIONS) == set(ErrorKind)


def test_syntax_and_value_issues() -> None:
    assert validate_text('a = "open')[0].kind is ErrorKind.SYNTAX
    assert validate_text("a = tru")[0].kind is ErrorKind.INVALID_VALUE


def test_issue_from_error_without_position() -> None:
    issue = ValidationIssue.from_error(InvalidValueError("bad"))

    assert str(issue) == "bad"
    assert issue.suggestion == SUGGESTIONS[ErrorKind.INVALID_VALUE]


def test_required_keys(sample_document: str) -> None:
    issues = validate_text(
        sample_document,
        required=["title", "owner.name", "database.ports", "server", "title.x", "owner.email"],
    )

    assert [issue.message for issue in issues] == [
        "Missing required key: server",
        "Missing required key: title.x",
        "Missing required key: owner.email",
    ]
    assert all(issue.kind is ErrorKind.MISSING_KEY for issue in issues)
    assert issues[0].suggestion == "Ensure all required keys are present."


def test_required_keys_skipped_on_parse_error() -> None:
    issues = validate_text("a = [", required=["b"])

    assert [issue.kind for issue in issues] == [ErrorKind.SYNTAX]


def test_check_required_directly() -> None:
    assert check_required(parse("[a]\nb = 1"), ["a.b"]) == []
    assert len(check_required(parse("[a]\nb = 1"), ["a.c"])) == 1


def test_validate_file(write_toml) -> None:
    assert validate_file(write_toml("a = 1\n"), required=["a"]) == []
    assert validate_file(write_toml("a = 1\n", name="other.toml"), required=["b"])[0].kind is ErrorKind.MISSING_KEY


def test_validate_missing_file(tmp_path: Path) -> None:
    issues = validate_file(tmp_path / "missing.toml")

    assert len(issues) == 1
    assert issues[0].kind is ErrorKind.IO
    assert issues[0].line == 0
