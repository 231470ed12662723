"""
Pytest configuration and fixtures.
"""

import logging
from collections.abc import Callable
from pathlib import Path

import pytest


SAMPLE_DOCUMENT = """\
# Sample application settings
title = "toml-tree example"

[owner]
name = "Tom"
dob = 1979-05-27T07:32:00-08:00

[database]
enabled = true
ports = [ 8000, 8001, 8002 ]
temp_targets = { cpu = 79.5, case = 72.0 }

[[products]]
name = "Hammer"
sku = 738594937

[[products]]
name = "Nail"
sku = 284758393
"""


@pytest.fixture
def sample_document() -> str:
    """A document exercising tables, arrays of tables and inline values."""
    return SAMPLE_DOCUMENT


@pytest.fixture
def write_toml(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing text to a file under tmp_path and returning its path."""

    def _write(text: str, name: str = "config.toml") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_logging() during a test."""
    yield
    logger = logging.getLogger("toml_tree")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
