"""Data models for Switch MCP."""

from switch_mcp.models.session import SessionState
from switch_mcp.models.target import TargetIdentity

__all__ = [
    "SessionState",
    "TargetIdentity",
]
