"""
Tests for constants.
"""

from toml_tree import __version__
from toml_tree.const import APP_NAME, APP_VERSION, INT64_MAX, INT64_MIN


def test_constants():
    """Test that constants are defined."""
    assert APP_NAME == "toml-tree"
    assert APP_VERSION == __version__
    assert INT64_MAX == 9223372036854775807
    assert INT64_MIN == -9223372036854775808
