"""Switch MCP: pooled interactive SSH shells for network switches."""

from switch_mcp.services import (
    ConnectionError,
    SessionPool,
    get_ssh_brand,
    run_commands,
    run_commands_with_brand,
)

__all__ = [
    "ConnectionError",
    "SessionPool",
    "get_ssh_brand",
    "run_commands",
    "run_commands_with_brand",
]
