"""MCP tools for Switch MCP."""

from switch_mcp.tools.switch import build_tools

__all__ = ["build_tools"]
