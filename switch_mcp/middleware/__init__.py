"""Switch MCP middleware components."""

from switch_mcp.middleware.base import SwitchMiddleware
from switch_mcp.middleware.errors import ErrorHandlingMiddleware
from switch_mcp.middleware.logging import LoggingMiddleware

__all__ = [
    "ErrorHandlingMiddleware",
    "LoggingMiddleware",
    "SwitchMiddleware",
]
