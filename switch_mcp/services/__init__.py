"""Services for Switch MCP."""

from switch_mcp.services.brand import (
    CISCO,
    H3C,
    HUAWEI,
    KNOWN_BRANDS,
    detect_brand,
    is_known_brand,
)
from switch_mcp.services.commands import (
    get_ssh_brand,
    make_identity,
    run_commands,
    run_commands_with_brand,
)
from switch_mcp.services.connection import (
    ConnectionError,
    SessionClosedError,
    open_shell,
)
from switch_mcp.services.filter import filter_result
from switch_mcp.services.framing import PROMPT_CHARS, QuiescenceFramer
from switch_mcp.services.pool import SessionPool
from switch_mcp.services.session import SwitchSession

__all__ = [
    "CISCO",
    "ConnectionError",
    "H3C",
    "HUAWEI",
    "KNOWN_BRANDS",
    "PROMPT_CHARS",
    "QuiescenceFramer",
    "SessionClosedError",
    "SessionPool",
    "SwitchSession",
    "detect_brand",
    "filter_result",
    "get_ssh_brand",
    "is_known_brand",
    "make_identity",
    "open_shell",
    "run_commands",
    "run_commands_with_brand",
]
