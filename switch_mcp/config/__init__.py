"""Configuration module for Switch MCP."""

from switch_mcp.config.settings import DEFAULT_ENCRYPTION_ALGS, Settings

__all__ = ["DEFAULT_ENCRYPTION_ALGS", "Settings"]
