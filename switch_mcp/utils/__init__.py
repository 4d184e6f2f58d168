"""Utilities for Switch MCP."""

from switch_mcp.utils.console import ColorfulFormatter, SessionEventFormatter
from switch_mcp.utils.validation import validate_address, validate_user

__all__ = [
    "ColorfulFormatter",
    "SessionEventFormatter",
    "validate_address",
    "validate_user",
]
