"""Utilities for the ping runner."""

from ping_runner.utils.console import ColorfulFormatter, MCPRequestFormatter
from ping_runner.utils.validation import validate_count, validate_host

__all__ = [
    "ColorfulFormatter",
    "MCPRequestFormatter",
    "validate_count",
    "validate_host",
]
