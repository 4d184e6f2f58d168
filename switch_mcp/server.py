"""Switch MCP FastMCP server.

Thin wrapper exposing the pooled switch operations as MCP tools.
All session and framing logic lives in services/.
"""

import logging
import os
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from switch_mcp.dependencies import Dependencies
from switch_mcp.middleware import ErrorHandlingMiddleware, LoggingMiddleware
from switch_mcp.tools import build_tools
from switch_mcp.utils.console import SessionEventFormatter

NOISY_LOGGERS = [
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "asyncssh",
    "httpx",
    "httpcore",
    "fastmcp",
    "starlette",
    "anyio",
]


def _configure_logging() -> None:
    """Configure colorful logging for the switch_mcp package.

    Called at module load time so logging is ready however the server
    is started.
    """
    log_level = os.getenv("SWITCH_LOG_LEVEL", "INFO").upper()
    use_colors = os.getenv("SWITCH_LOG_COLORS", "true").lower() != "false"

    if not sys.stderr.isatty():
        use_colors = False

    switch_logger = logging.getLogger("switch_mcp")
    switch_logger.setLevel(getattr(logging, log_level, logging.INFO))

    if not switch_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(SessionEventFormatter(use_colors=use_colors))
        switch_logger.addHandler(handler)
        switch_logger.propagate = False

    for noisy_logger in NOISY_LOGGERS:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)


_configure_logging()

logger = logging.getLogger(__name__)


def make_lifespan(deps: Dependencies) -> Any:
    """Build the server lifespan owning the session pool."""

    @asynccontextmanager
    async def app_lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
        logger.info("Switch MCP server starting up")
        deps.pool.start()
        logger.info("Switch MCP server ready to accept connections")
        try:
            yield {"pool": deps.pool}
        finally:
            logger.info("Switch MCP server shutting down")
            if deps.pool.pool_size > 0:
                logger.info(
                    "Closing %d switch session(s): %s",
                    deps.pool.pool_size,
                    ", ".join(deps.pool.active_targets),
                )
            await deps.cleanup()
            logger.info("Switch MCP server shutdown complete")

    return app_lifespan


def configure_middleware(server: FastMCP, deps: Dependencies) -> None:
    """Add error handling and logging middleware (first added = innermost)."""
    server.add_middleware(
        ErrorHandlingMiddleware(include_traceback=deps.settings.include_traceback)
    )
    server.add_middleware(
        LoggingMiddleware(include_payloads=deps.settings.log_payloads)
    )


def create_server(deps: Dependencies | None = None) -> FastMCP:
    """Create and configure the MCP server.

    Args:
        deps: Settings and pool to serve with, built from the environment
            when omitted

    Returns:
        Configured FastMCP server instance
    """
    deps = deps or Dependencies.create()
    server = FastMCP("switch_mcp", lifespan=make_lifespan(deps))

    configure_middleware(server, deps)

    for tool in build_tools(deps.pool):
        server.tool(tool)

    @server.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> PlainTextResponse:
        """Health check endpoint."""
        client_host = request.client.host if request.client else "unknown"
        logger.debug(
            "Health check from %s (pool_size=%d)", client_host, deps.pool.pool_size
        )
        return PlainTextResponse("OK")

    return server


# Default server instance
mcp = create_server()
