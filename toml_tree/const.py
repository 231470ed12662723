"""
Application constants and metadata.
"""

# Application info
APP_NAME = "toml-tree"
APP_VERSION = "0.1.0"

# Signed 64-bit integer range for TOML integers
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

# Default values
DEFAULT_ENCODING = "utf-8"
DEFAULT_POLL_INTERVAL = 1.0
